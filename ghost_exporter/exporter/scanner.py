"""
Asset scanner for finding remote Ghost images referenced by content.

Looks at rendered HTML bodies and at the single-value image field of every
item, and returns each distinct remote image URL once.
"""

from typing import Iterable, List, Optional, Set

from .content import ContentItem
from .lexer import AttributeLexer, QuotedValueLexer
from ..utils.log import get_logger


class AssetScanner:
    """
    Extracts remote asset URLs from content items.

    Only URLs containing the remote asset base are returned; links to other
    hosts and to non-image Ghost paths are ignored.
    """

    def __init__(self, remote_base: str, lexer: Optional[AttributeLexer] = None):
        """
        Initialize the asset scanner.

        Args:
            remote_base: Canonical remote asset base URL
            lexer: Lexer used on HTML bodies (default: QuotedValueLexer)
        """
        self.remote_base = remote_base
        self.lexer = lexer or QuotedValueLexer()
        self.logger = get_logger("scanner")

    def scan(self, items: Iterable[ContentItem]) -> List[str]:
        """
        Find every distinct remote asset referenced by ``items``.

        Args:
            items: Content items of the current run, any kinds

        Returns:
            Sorted list of distinct asset URLs
        """
        assets: Set[str] = set()
        count = 0

        for item in items:
            count += 1
            assets.update(self.scan_body(item.html))
            if item.image and self.remote_base in item.image:
                assets.add(item.image)

        self.logger.debug(f"Found {len(assets)} assets in {count} items")
        return sorted(assets)

    def scan_body(self, html: Optional[str]) -> Set[str]:
        """Asset URLs referenced inside one HTML body."""
        if not html or self.remote_base not in html:
            return set()
        return {
            candidate
            for candidate in self.lexer.candidates(html)
            if self.remote_base in candidate
        }
