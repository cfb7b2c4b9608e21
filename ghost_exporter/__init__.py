"""
Ghost Exporter - export Ghost CMS content to static-site markdown.

This package fetches posts, pages, tags and authors from the Ghost Content
API, downloads their images, rewrites image references to local paths and
writes front-matter markdown files, skipping unchanged content on repeated
builds.
"""

__version__ = "1.0.0"
__author__ = "Ghost Exporter Team"
