"""Shared fixtures and fakes for the exporter tests."""

import os
from datetime import datetime, timezone
from typing import Dict, List, Optional, Set

import pytest

from ghost_exporter.config import ExportConfig
from ghost_exporter.errors import AssetDownloadError, ContentFetchError
from ghost_exporter.exporter.content import ContentItem, ContentKind


GHOST_URL = "https://cms.example"
IMAGES = GHOST_URL + "/content/images/"


def utc(text: str) -> datetime:
    return datetime.fromisoformat(text).replace(tzinfo=timezone.utc)


def post_record(slug: str = "hello-world", **overrides) -> dict:
    record = {
        "slug": slug,
        "title": "Hello World",
        "html": f'<p>Hi</p><img src="{IMAGES}2024/01/a.png">',
        "custom_excerpt": None,
        "feature_image": None,
        "updated_at": "2024-01-01T00:00:00.000Z",
        "published_at": "2024-01-02T00:00:00.000Z",
        "tags": [],
        "authors": [],
    }
    record.update(overrides)
    return record


class FakeClient:
    """Serves canned Content API records per kind."""

    def __init__(self, records: Dict[ContentKind, List[dict]], failing: Set[ContentKind] = frozenset()):
        self.records = records
        self.failing = set(failing)
        self.fetched: List[ContentKind] = []
        self.stopped = False

    async def fetch_kind(self, kind: ContentKind) -> List[ContentItem]:
        self.fetched.append(kind)
        if kind in self.failing:
            raise ContentFetchError(kind.value, "HTTP 500")
        return [ContentItem.from_api(kind, record) for record in self.records.get(kind, [])]

    async def stop(self) -> None:
        self.stopped = True


class FakeDownloader:
    """Writes placeholder bytes instead of downloading."""

    def __init__(self, failing: Set[str] = frozenset()):
        self.failing = set(failing)
        self.calls: List[str] = []

    async def download(self, url: str, local_path: str) -> str:
        self.calls.append(url)
        if url in self.failing:
            raise AssetDownloadError(url, local_path, "HTTP 404")
        os.makedirs(os.path.dirname(local_path), exist_ok=True)
        with open(local_path, 'wb') as f:
            f.write(url.encode('utf-8'))
        return local_path

    async def stop(self) -> None:
        pass


class FixedClock:
    def __init__(self, instant: datetime):
        self.instant = instant

    def __call__(self) -> datetime:
        return self.instant


@pytest.fixture
def config(tmp_path) -> ExportConfig:
    return ExportConfig(
        ghost_url=GHOST_URL,
        ghost_key="test_key",
        base_dir=str(tmp_path),
    )


@pytest.fixture
def read_file(tmp_path):
    def _read(relative: str, mode: str = 'r') -> Optional[str]:
        path = os.path.join(str(tmp_path), relative)
        with open(path, mode) as f:
            return f.read()
    return _read
