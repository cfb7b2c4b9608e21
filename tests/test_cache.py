"""Tests for the directory cache store and the persisted sync state."""

import json
import os

import pytest

from ghost_exporter.exporter.cache import DirectoryCacheStore, SyncState, format_timestamp
from ghost_exporter.utils.constants import EPOCH

from .conftest import utc


@pytest.fixture
def store(tmp_path):
    return DirectoryCacheStore(str(tmp_path / "site"), str(tmp_path / "cache"))


def write(path, content):
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        f.write(content)


class TestDirectoryCacheStore:
    @pytest.mark.asyncio
    async def test_save_then_restore(self, store, tmp_path):
        site_file = tmp_path / "site" / "_posts" / "a.md"
        write(str(site_file), "cached body")

        assert not await store.has("./_posts/a.md")
        await store.save("./_posts/a.md")
        assert await store.has("./_posts/a.md")
        assert (tmp_path / "cache" / "_posts" / "a.md").read_text() == "cached body"

        site_file.unlink()
        assert await store.restore("./_posts/a.md")
        assert site_file.read_text() == "cached body"

    @pytest.mark.asyncio
    async def test_restore_missing_entry(self, store):
        assert await store.restore("./nothing.md") is False

    @pytest.mark.asyncio
    async def test_save_missing_file(self, store):
        with pytest.raises(FileNotFoundError):
            await store.save("./missing.md")

    @pytest.mark.asyncio
    async def test_rejects_escaping_keys(self, store):
        with pytest.raises(ValueError):
            await store.has("../elsewhere.md")


class TestSyncState:
    @pytest.mark.asyncio
    async def test_absent_state_is_epoch(self, store, tmp_path):
        state = SyncState(store, str(tmp_path / "site"), "./.ghost-sync.json")
        assert await state.load() == EPOCH

    @pytest.mark.asyncio
    async def test_save_writes_quoted_timestamp(self, store, tmp_path):
        state = SyncState(store, str(tmp_path / "site"), "./.ghost-sync.json")
        stamp = await state.save(utc("2024-01-03T10:00:00"))

        assert stamp == "2024-01-03T10:00:00.000Z"
        raw = (tmp_path / "site" / ".ghost-sync.json").read_text()
        assert raw == '"2024-01-03T10:00:00.000Z"'
        assert json.loads(raw) == stamp
        assert await store.has("./.ghost-sync.json")

    @pytest.mark.asyncio
    async def test_load_restores_from_cache(self, store, tmp_path):
        state = SyncState(store, str(tmp_path / "site"), "./.ghost-sync.json")
        await state.save(utc("2024-01-03T10:00:00"))
        (tmp_path / "site" / ".ghost-sync.json").unlink()

        assert await state.load() == utc("2024-01-03T10:00:00")

    @pytest.mark.asyncio
    async def test_unreadable_state_is_epoch(self, store, tmp_path):
        write(str(tmp_path / "site" / ".ghost-sync.json"), "not json")
        await store.save("./.ghost-sync.json")
        state = SyncState(store, str(tmp_path / "site"), "./.ghost-sync.json")

        assert await state.load() == EPOCH


def test_format_timestamp_converts_to_utc():
    from datetime import datetime, timedelta, timezone

    instant = datetime(2024, 1, 3, 12, 0, tzinfo=timezone(timedelta(hours=2)))
    assert format_timestamp(instant) == "2024-01-03T10:00:00.000Z"
