"""
Path and URL utilities for the Ghost exporter.

Provides build-relative path computation, output path resolution and
directory management.
"""

import os
from typing import List
from urllib.parse import urlparse


def relative_path(assets_dir: str, content_dir: str) -> str:
    """
    Compute the site-relative path of the assets directory as seen from a
    content directory.

    Both paths are compared segment by segment from the root. Everything in
    ``assets_dir`` from the first differing segment onward is returned,
    always prefixed with ``/``. When ``assets_dir`` is exhausted before a
    difference is found the two paths are treated as sharing no prefix and
    the whole of ``assets_dir`` is returned.

    Trailing slashes do not count as segments, so ``./assets/`` is a prefix
    of ``./assets/posts/``.

    Args:
        assets_dir: Local asset output directory (e.g. ``./assets/images/``)
        content_dir: Content output directory (e.g. ``./_posts/``)

    Returns:
        Absolute-style path string (e.g. ``/assets/images/``)
    """
    assets_parts = assets_dir.split('/')
    compared = _strip_trailing_segments(assets_parts)
    content_parts = _strip_trailing_segments(content_dir.split('/'))

    divergence = -1
    for index, part in enumerate(compared):
        if index >= len(content_parts) or content_parts[index] != part:
            divergence = index
            break

    if divergence == -1:
        remaining = _strip_root_segments(assets_parts)
    else:
        remaining = assets_parts[divergence:]

    return '/' + '/'.join(remaining).lstrip('/')


def _strip_trailing_segments(parts: List[str]) -> List[str]:
    """Drop the empty segments a trailing slash leaves behind."""
    end = len(parts)
    while end > 1 and parts[end - 1] == '':
        end -= 1
    return parts[:end]


def _strip_root_segments(parts: List[str]) -> List[str]:
    """Drop leading empty and current-directory segments."""
    index = 0
    while index < len(parts) - 1 and parts[index] in ('', '.'):
        index += 1
    return parts[index:]


def resolve_path(base_dir: str, path: str) -> str:
    """
    Resolve a build-relative path against an explicit base directory.

    Args:
        base_dir: Build root directory
        path: Path relative to the build root (``./_posts/x.md``)

    Returns:
        Normalized absolute file path
    """
    if os.path.isabs(path):
        return os.path.normpath(path)
    return os.path.normpath(os.path.join(os.path.abspath(base_dir), path))


def build_relative(base_dir: str, path: str) -> str:
    """
    Express a configured path relative to the build root.

    Absolute paths under ``base_dir`` are rewritten as ``./``-prefixed
    relative paths; relative paths are returned unchanged.

    Raises:
        ValueError: If the path lies outside the build root
    """
    if os.path.isabs(path):
        relative = os.path.relpath(os.path.normpath(path), os.path.abspath(base_dir))
    else:
        relative = os.path.normpath(path)
    relative = relative.replace('\\', '/')

    if relative == '..' or relative.startswith('../'):
        raise ValueError(f"Path is outside the build directory {base_dir}: {path}")
    if not os.path.isabs(path):
        return path
    return './' if relative == '.' else './' + relative


def normalize_key(path: str) -> str:
    """
    Normalize a build-relative path into a cache key.

    Raises:
        ValueError: If the path is absolute or escapes the build root
    """
    if os.path.isabs(path):
        raise ValueError(f"Cache keys must be build-relative: {path}")
    key = os.path.normpath(path).replace('\\', '/')
    if key == '..' or key.startswith('../'):
        raise ValueError(f"Cache key escapes the build directory: {path}")
    return key


def ensure_trailing_slash(path: str) -> str:
    """Return ``path`` with exactly one trailing slash."""
    return path.rstrip('/') + '/'


def asset_base_url(ghost_url: str, image_path: str = "/content/images/") -> str:
    """
    Build the canonical remote asset base for a Ghost site.

    The base is always a full absolute URL (scheme, host and any subpath the
    site is mounted under) so scanning and rewriting match the same strings.

    Args:
        ghost_url: Ghost site URL (``https://cms.example``)
        image_path: Path of the image directory on the site

    Returns:
        Asset base such as ``https://cms.example/content/images/``
    """
    parsed = urlparse(ghost_url.strip())
    if not parsed.scheme or not parsed.netloc:
        raise ValueError(f"Invalid Ghost URL: {ghost_url}")
    return ghost_url.strip().rstrip('/') + image_path


def ensure_dir(path: str) -> None:
    """
    Ensure a directory exists, creating it if necessary.

    Args:
        path: Directory path to ensure exists
    """
    os.makedirs(path, exist_ok=True)


def ensure_parent_dir(file_path: str) -> None:
    """
    Ensure the parent directory of a file exists.

    Args:
        file_path: File path whose parent directory should exist
    """
    parent = os.path.dirname(file_path)
    if parent:
        ensure_dir(parent)
