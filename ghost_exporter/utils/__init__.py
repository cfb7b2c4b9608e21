"""
Utility modules for the Ghost exporter.

Contains logging, path handling utilities, and constants.
"""

from .log import setup_logger, get_logger
from .paths import (
    relative_path,
    resolve_path,
    build_relative,
    normalize_key,
    asset_base_url,
    ensure_dir,
    ensure_parent_dir,
)
from .constants import (
    DEFAULT_USER_AGENT,
    DEFAULT_TIMEOUT,
    DEFAULT_CONCURRENCY,
    DEFAULT_API_VERSION,
    GHOST_IMAGE_PATH,
    EPOCH,
)

__all__ = [
    "setup_logger",
    "get_logger",
    "relative_path",
    "resolve_path",
    "build_relative",
    "normalize_key",
    "asset_base_url",
    "ensure_dir",
    "ensure_parent_dir",
    "DEFAULT_USER_AGENT",
    "DEFAULT_TIMEOUT",
    "DEFAULT_CONCURRENCY",
    "DEFAULT_API_VERSION",
    "GHOST_IMAGE_PATH",
    "EPOCH",
]
