"""
Exceptions raised by the Ghost exporter.

Every fatal condition of a sync run is a ``BuildFailure``: it carries a short
label naming the failing stage and a dictionary of structured context, which
the CLI reports before exiting with a non-zero status.
"""

from typing import Any, Dict, List, Optional


class BuildFailure(Exception):
    """A fatal error that aborts the sync run."""

    def __init__(self, label: str, context: Optional[Dict[str, Any]] = None):
        self.label = label
        self.context = context or {}
        super().__init__(self._format())

    def _format(self) -> str:
        if not self.context:
            return self.label
        details = ", ".join(f"{key}={value}" for key, value in self.context.items())
        return f"{self.label} ({details})"


class ContentFetchError(BuildFailure):
    """The Content API failed for a content kind."""

    def __init__(self, kind: str, cause: Any):
        self.kind = kind
        self.cause = cause
        super().__init__("Ghost content error", {"kind": kind, "error": cause})


class InvalidContentError(BuildFailure):
    """An API payload violates the content item invariants."""

    def __init__(self, kind: str, reason: str, slug: Any = None):
        super().__init__(
            "Invalid content", {"kind": kind, "slug": slug, "reason": reason}
        )


class AssetDownloadError(BuildFailure):
    """An image could not be downloaded or written."""

    def __init__(self, url: str, path: str, cause: Any):
        self.url = url
        self.path = path
        self.cause = cause
        super().__init__("Image file error", {"url": url, "path": path, "error": cause})


class OutputWriteError(BuildFailure):
    """A generated document or cache entry could not be persisted."""

    def __init__(self, path: str, cause: Any):
        self.path = path
        self.cause = cause
        super().__init__("Markdown file error", {"path": path, "error": cause})


class SyncFailedError(BuildFailure):
    """One or more asset or document tasks failed during a run."""

    def __init__(self, failures: List[BuildFailure]):
        self.failures = failures
        super().__init__(
            "Sync failed",
            {
                "failures": len(failures),
                "first": failures[0] if failures else None,
            },
        )


class ConfigError(ValueError):
    """Invalid exporter configuration."""
