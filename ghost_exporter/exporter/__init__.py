"""
Exporter module for Ghost content.

Contains components for fetching, scanning, rewriting, rendering, caching,
downloading and orchestrating an export run.
"""

from .content import ContentItem, ContentKind, ContentRef
from .client import GhostContentClient
from .lexer import QuotedValueLexer, HtmlAttributeLexer
from .scanner import AssetScanner
from .rewrite import PathRewriter
from .renderer import ContentRenderer, OutputDocument
from .staleness import StalenessOracle
from .cache import CacheStore, DirectoryCacheStore, SyncState
from .downloader import AssetDownloader
from .orchestrator import SyncOrchestrator, SyncReport

__all__ = [
    "ContentItem",
    "ContentKind",
    "ContentRef",
    "GhostContentClient",
    "QuotedValueLexer",
    "HtmlAttributeLexer",
    "AssetScanner",
    "PathRewriter",
    "ContentRenderer",
    "OutputDocument",
    "StalenessOracle",
    "CacheStore",
    "DirectoryCacheStore",
    "SyncState",
    "AssetDownloader",
    "SyncOrchestrator",
    "SyncReport",
]
