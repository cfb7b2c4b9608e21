"""
Staleness decision for previously generated documents.
"""

from datetime import datetime
from typing import Optional

from .cache import CacheStore
from .content import ContentItem
from ..utils.constants import EPOCH


class StalenessOracle:
    """
    Decides whether an item's cached output can be reused.

    ``last_sync`` is the instant up to which the cache is known to be
    consistent. An item is reusable only if it was modified strictly before
    that instant and its output is present in the cache store. Items modified
    at the same instant, and items with no modification time, are
    regenerated.
    """

    def __init__(self, cache: CacheStore, last_sync: Optional[datetime] = None):
        self.cache = cache
        self.last_sync = last_sync or EPOCH

    def is_fresh(self, updated_at: Optional[datetime]) -> bool:
        """Whether a modification time falls before the sync watermark."""
        if updated_at is None:
            return False
        return self.last_sync > updated_at

    async def can_reuse(self, item: ContentItem, path: str) -> bool:
        """
        Whether ``item``'s previously written output at ``path`` is current.

        Args:
            item: Content item
            path: Build-relative output path of the item

        Returns:
            True when the cached document may be restored unchanged
        """
        if not self.is_fresh(item.updated_at):
            return False
        return await self.cache.has(path)
