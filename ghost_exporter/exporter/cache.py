"""
Build cache store and persisted sync state.

The cache store is a key-value blob store keyed by build-relative file path.
``restore`` materializes a saved file back at its path in the build
directory and ``save`` copies the current file at that path into the store.
``DirectoryCacheStore`` keeps the store in a plain directory that the build
host persists between runs.
"""

import json
import os
import shutil
import tempfile
from abc import ABC, abstractmethod
from datetime import datetime, timezone

from .content import parse_timestamp
from ..utils.constants import EPOCH
from ..utils.log import get_logger
from ..utils.paths import ensure_parent_dir, normalize_key, resolve_path


class CacheStore(ABC):
    """Three-operation contract of the build cache."""

    @abstractmethod
    async def has(self, key: str) -> bool:
        """Whether the store holds an entry for ``key``."""

    @abstractmethod
    async def restore(self, key: str) -> bool:
        """Write the stored entry for ``key`` back to its path."""

    @abstractmethod
    async def save(self, key: str) -> bool:
        """Store the current file at ``key``'s path."""


class DirectoryCacheStore(CacheStore):
    """
    Cache store backed by a directory.

    Entries are stored at the same relative path under ``cache_dir`` as the
    file they mirror under ``base_dir``.
    """

    def __init__(self, base_dir: str, cache_dir: str):
        """
        Initialize the directory cache store.

        Args:
            base_dir: Build root that keys are relative to
            cache_dir: Directory holding cached entries
        """
        self.base_dir = os.path.abspath(base_dir)
        self.cache_dir = resolve_path(base_dir, cache_dir)
        self.logger = get_logger("cache")

    def _build_path(self, key: str) -> str:
        return os.path.join(self.base_dir, normalize_key(key))

    def _cache_path(self, key: str) -> str:
        return os.path.join(self.cache_dir, normalize_key(key))

    async def has(self, key: str) -> bool:
        return os.path.isfile(self._cache_path(key))

    async def restore(self, key: str) -> bool:
        source = self._cache_path(key)
        if not os.path.isfile(source):
            return False

        target = self._build_path(key)
        ensure_parent_dir(target)
        shutil.copy2(source, target)
        self.logger.debug(f"Restored {key}")
        return True

    async def save(self, key: str) -> bool:
        source = self._build_path(key)
        if not os.path.isfile(source):
            raise FileNotFoundError(f"Nothing to cache at {source}")

        target = self._cache_path(key)
        ensure_parent_dir(target)
        shutil.copy2(source, target)
        self.logger.debug(f"Cached {key}")
        return True


def format_timestamp(instant: datetime) -> str:
    """Format an instant as UTC ISO-8601 with millisecond precision."""
    utc = instant.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class SyncState:
    """
    The persisted sync watermark.

    Stored as a file containing one JSON string (a double-quoted ISO-8601
    timestamp), written to the build directory and mirrored into the cache
    store under the same path.
    """

    def __init__(self, cache: CacheStore, base_dir: str, path: str):
        """
        Initialize the sync state.

        Args:
            cache: Cache store the state is mirrored into
            base_dir: Build root
            path: Build-relative path of the state file
        """
        self.cache = cache
        self.base_dir = base_dir
        self.path = path
        self.logger = get_logger("cache")

    @property
    def file_path(self) -> str:
        return resolve_path(self.base_dir, self.path)

    async def load(self) -> datetime:
        """
        Read the last sync timestamp.

        Returns:
            Last sync instant, or the epoch when there is no usable state
        """
        if not await self.cache.has(self.path):
            self.logger.info("No previous sync state, regenerating everything")
            return EPOCH

        await self.cache.restore(self.path)
        try:
            with open(self.file_path, 'r', encoding='utf-8') as f:
                value = json.load(f)
            last_sync = parse_timestamp(value) if isinstance(value, str) else None
        except (OSError, ValueError) as e:
            self.logger.warning(f"Ignoring unreadable sync state {self.path}: {e}")
            return EPOCH

        if last_sync is None:
            self.logger.warning(f"Ignoring empty sync state {self.path}")
            return EPOCH

        self.logger.debug(f"Last sync: {format_timestamp(last_sync)}")
        return last_sync

    async def save(self, instant: datetime) -> str:
        """
        Persist a new sync timestamp and mirror it into the cache store.

        The file is replaced atomically so an interrupted write never leaves
        a truncated watermark behind.

        Returns:
            The formatted timestamp that was written
        """
        stamp = format_timestamp(instant)
        target = self.file_path
        ensure_parent_dir(target)

        fd, tmp_path = tempfile.mkstemp(
            dir=os.path.dirname(target) or None, prefix=".sync-", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(stamp, f)
            os.replace(tmp_path, target)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

        await self.cache.save(self.path)
        return stamp
