"""
Path rewriter for converting remote Ghost image URLs to local paths.

Rewrites every reference to the Ghost image directory so generated documents
point at the downloaded copies instead of the CMS.
"""

from typing import Dict, Optional

from ..utils.paths import relative_path


def rewrite_all(text: Optional[str], remote_base: str, local_base: str) -> str:
    """
    Replace every occurrence of ``remote_base`` in ``text``.

    ``remote_base`` is matched as a literal substring, so characters such as
    ``.`` or ``?`` in URLs have no special meaning.

    Args:
        text: HTML or other free text, may be None
        remote_base: Remote asset base URL
        local_base: Local asset base path

    Returns:
        Rewritten text, or empty string when text is absent
    """
    if not text:
        return ""
    return text.replace(remote_base, local_base)


def rewrite_single(value: Optional[str], remote_base: str, local_base: str) -> str:
    """
    Rewrite a single URL field such as a feature image.

    Absent values become an empty string so front-matter never carries a
    null marker.
    """
    if not value:
        return ""
    return value.replace(remote_base, local_base)


class PathRewriter:
    """
    Rewrites remote asset URLs for one export run.

    Holds the remote asset base and the local asset directory, and computes
    the site-relative asset path per content directory.
    """

    def __init__(self, remote_base: str, assets_dir: str):
        """
        Initialize the path rewriter.

        Args:
            remote_base: Canonical remote asset base URL
            assets_dir: Local asset output directory
        """
        self.remote_base = remote_base
        self.assets_dir = assets_dir
        self._local_bases: Dict[str, str] = {}

    def local_base(self, content_dir: str) -> str:
        """Site-relative asset base as seen from ``content_dir``."""
        if content_dir not in self._local_bases:
            self._local_bases[content_dir] = relative_path(self.assets_dir, content_dir)
        return self._local_bases[content_dir]

    def rewrite_text(self, text: Optional[str], content_dir: str) -> str:
        """Rewrite every asset reference in a body of text."""
        return rewrite_all(text, self.remote_base, self.local_base(content_dir))

    def rewrite_url(self, value: Optional[str], content_dir: str) -> str:
        """Rewrite one image URL field."""
        return rewrite_single(value, self.remote_base, self.local_base(content_dir))

    def asset_destination(self, url: str) -> str:
        """
        Build-relative file path an asset is downloaded to.

        The path is the assets directory followed by the part of the URL after
        the remote base, kept byte for byte, so distinct asset URLs never share
        a file.

        Args:
            url: Remote asset URL

        Returns:
            Path under the assets directory (e.g. ``./assets/images/2024/01/a.png``)
        """
        _, _, suffix = url.partition(self.remote_base)
        return self.assets_dir + suffix
