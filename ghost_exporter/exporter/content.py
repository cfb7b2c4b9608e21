"""
Content model for items fetched from the Ghost Content API.

Posts, pages, tags and authors share one ``ContentItem`` type. The kind
discriminator selects a row in ``KIND_FIELDS`` which says which API field
holds the title, excerpt, image and body for that kind.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from ..errors import InvalidContentError


class ContentKind(str, Enum):
    """Kinds of content the exporter understands."""

    POST = "post"
    PAGE = "page"
    TAG = "tag"
    AUTHOR = "author"


@dataclass(frozen=True)
class KindFields:
    """Per-kind mapping from content attributes to Content API fields."""

    resource: str
    include: Optional[str]
    title: str
    excerpt: str
    image: str
    body: Optional[str] = None
    dated: bool = False


KIND_FIELDS: Dict[ContentKind, KindFields] = {
    ContentKind.POST: KindFields(
        resource="posts",
        include="tags,authors",
        title="title",
        excerpt="custom_excerpt",
        image="feature_image",
        body="html",
        dated=True,
    ),
    ContentKind.PAGE: KindFields(
        resource="pages",
        include="tags,authors",
        title="title",
        excerpt="custom_excerpt",
        image="feature_image",
        body="html",
        dated=True,
    ),
    ContentKind.TAG: KindFields(
        resource="tags",
        include=None,
        title="name",
        excerpt="description",
        image="feature_image",
    ),
    ContentKind.AUTHOR: KindFields(
        resource="authors",
        include=None,
        title="name",
        excerpt="bio",
        image="cover_image",
    ),
}


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO-8601 timestamp as returned by Ghost.

    Accepts a trailing ``Z``; naive values are taken to be UTC.

    Args:
        value: Timestamp string or None

    Returns:
        Timezone-aware datetime, or None when value is empty
    """
    if not value:
        return None
    text = value.strip()
    if text.endswith('Z'):
        text = text[:-1] + '+00:00'
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def is_safe_slug(slug: Any) -> bool:
    """Check that a slug can be used as a single file name."""
    if not isinstance(slug, str) or not slug.strip():
        return False
    if slug in ('.', '..'):
        return False
    return '/' not in slug and '\\' not in slug and '\x00' not in slug


@dataclass(frozen=True)
class ContentRef:
    """A related tag or author embedded in a post or page."""

    slug: str
    name: str = ""

    @property
    def display_name(self) -> str:
        return self.name or self.slug


@dataclass
class ContentItem:
    """One post, page, tag or author."""

    kind: ContentKind
    slug: str
    title: str = ""
    html: Optional[str] = None
    excerpt: Optional[str] = None
    image: Optional[str] = None
    updated_at: Optional[datetime] = None
    published_at: Optional[datetime] = None
    tags: List[ContentRef] = field(default_factory=list)
    authors: List[ContentRef] = field(default_factory=list)

    @property
    def fields(self) -> KindFields:
        return KIND_FIELDS[self.kind]

    @property
    def display_title(self) -> str:
        """Title, falling back to the slug when the item has none."""
        return self.title or self.slug

    @property
    def publish_date(self) -> str:
        """Publish date as ``YYYY-MM-DD``, or empty string when unpublished."""
        if self.published_at is None:
            return ""
        return self.published_at.strftime("%Y-%m-%d")

    def references(self, kind: ContentKind, slug: str) -> bool:
        """Whether this item's tag or author relation includes ``slug``."""
        if kind == ContentKind.TAG:
            related = self.tags
        elif kind == ContentKind.AUTHOR:
            related = self.authors
        else:
            return False
        return any(ref.slug == slug for ref in related)

    @classmethod
    def from_api(cls, kind: ContentKind, data: Dict[str, Any]) -> "ContentItem":
        """
        Build an item from one Content API record.

        Args:
            kind: Kind of the record
            data: Decoded JSON object

        Returns:
            ContentItem

        Raises:
            InvalidContentError: If the slug is missing or not filesystem-safe,
                or a timestamp cannot be parsed
        """
        slug = data.get("slug")
        if not is_safe_slug(slug):
            raise InvalidContentError(kind.value, "slug is empty or unsafe", slug)

        mapping = KIND_FIELDS[kind]
        try:
            updated_at = parse_timestamp(data.get("updated_at"))
            published_at = parse_timestamp(data.get("published_at"))
        except ValueError as e:
            raise InvalidContentError(kind.value, f"bad timestamp: {e}", slug)

        return cls(
            kind=kind,
            slug=slug,
            title=data.get(mapping.title) or "",
            html=data.get(mapping.body) if mapping.body else None,
            excerpt=data.get(mapping.excerpt),
            image=data.get(mapping.image),
            updated_at=updated_at,
            published_at=published_at,
            tags=_refs(data.get("tags")),
            authors=_refs(data.get("authors")),
        )


def _refs(records: Optional[List[Dict[str, Any]]]) -> List[ContentRef]:
    if not records:
        return []
    return [
        ContentRef(slug=record["slug"], name=record.get("name") or "")
        for record in records
        if record.get("slug")
    ]
