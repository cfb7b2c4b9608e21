"""
Shared constants for the Ghost exporter.

Contains common configuration values used across multiple modules.
"""

from datetime import datetime, timezone

# User agent sent with Content API requests and image downloads
DEFAULT_USER_AGENT = "ghost-exporter/1.0 (+https://ghost.org/docs/content-api/)"

# Default request timeout in seconds
DEFAULT_TIMEOUT = 30

# Default concurrent image downloads
DEFAULT_CONCURRENCY = 10

# Content API version sent in the Accept-Version header
DEFAULT_API_VERSION = "v5.0"

# Where Ghost serves uploaded images from, relative to the site URL
GHOST_IMAGE_PATH = "/content/images/"

# Sync watermark used when no previous sync exists
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
