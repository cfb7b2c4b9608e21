"""
Content renderer for turning Ghost content into markdown documents.

Every document is a YAML front-matter block followed by a body. Posts and
pages carry their rendered HTML as the body; tag and author documents get a
generated listing of the posts and pages that reference them.
"""

import html
import textwrap
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, List

import yaml

from .content import ContentItem, ContentKind
from .rewrite import PathRewriter

if TYPE_CHECKING:
    from ..config import ExportConfig


ARTICLE_TEMPLATE = textwrap.dedent("""\
    ---
    date: {date}
    title: {title}
    layout: {layout}
    excerpt: {excerpt}
    image: {image}
    tags: {tags}
    ---
    {body}
""")

TAXONOMY_TEMPLATE = textwrap.dedent("""\
    ---
    title: {title}
    layout: {layout}
    excerpt: {excerpt}
    image: {image}
    ---
    {body}
""")


def quote(value: str) -> str:
    """
    Format a string as a YAML double-quoted scalar.

    Quotes, backslashes and line breaks in the value are escaped, so the
    result can be interpolated into a front-matter line safely.
    """
    dumped = yaml.safe_dump(
        value or "",
        default_style='"',
        allow_unicode=True,
        width=float("inf"),
    )
    return dumped.rstrip("\n")


@dataclass
class OutputDocument:
    """A rendered document and the build-relative path it belongs at."""

    item: ContentItem
    path: str
    text: str


class ContentRenderer:
    """
    Renders content items into front-matter + body documents.

    Every remote asset reference in a document is rewritten relative to the
    directory the document is written to.
    """

    def __init__(self, config: "ExportConfig", rewriter: PathRewriter):
        """
        Initialize the content renderer.

        Args:
            config: Export configuration
            rewriter: Path rewriter for the run
        """
        self.config = config
        self.rewriter = rewriter

    def filename(self, item: ContentItem) -> str:
        """File name of an item's document, date-prefixed for posts when enabled."""
        if (
            item.kind == ContentKind.POST
            and self.config.post_date_prefix
            and item.publish_date
        ):
            return f"{item.publish_date}-{item.slug}.md"
        return f"{item.slug}.md"

    def output_path(self, item: ContentItem) -> str:
        """Build-relative output path of an item's document."""
        return self.config.output_dir(item.kind) + self.filename(item)

    def permalink(self, item: ContentItem) -> str:
        """Site URL path the static-site generator publishes ``item`` at."""
        if (
            item.kind == ContentKind.POST
            and self.config.post_date_prefix
            and item.published_at is not None
        ):
            return f"/{item.published_at.strftime('%Y/%m/%d')}/{item.slug}/"
        return f"/{item.slug}/"

    def render(
        self,
        item: ContentItem,
        catalog: Iterable[ContentItem] = (),
    ) -> OutputDocument:
        """
        Render one item.

        Args:
            item: Item to render
            catalog: Posts and pages of the run, used for tag and author listings

        Returns:
            OutputDocument for the item
        """
        if item.kind in (ContentKind.POST, ContentKind.PAGE):
            text = self._render_article(item)
        else:
            text = self._render_taxonomy(item, catalog)
        return OutputDocument(item=item, path=self.output_path(item), text=text)

    def _render_article(self, item: ContentItem) -> str:
        content_dir = self.config.output_dir(item.kind)
        tags = ", ".join(quote(tag.display_name) for tag in item.tags)

        return ARTICLE_TEMPLATE.format(
            date=item.publish_date or quote(""),
            title=quote(item.title),
            layout=self.config.layout(item.kind),
            excerpt=quote(item.excerpt),
            image=quote(self.rewriter.rewrite_url(item.image, content_dir)),
            tags=f"[{tags}]",
            body=self.rewriter.rewrite_text(item.html, content_dir),
        )

    def _render_taxonomy(self, item: ContentItem, catalog: Iterable[ContentItem]) -> str:
        content_dir = self.config.output_dir(item.kind)
        members = [entry for entry in catalog if entry.references(item.kind, item.slug)]

        return TAXONOMY_TEMPLATE.format(
            title=quote(item.display_title),
            layout=self.config.layout(item.kind),
            excerpt=quote(item.excerpt),
            image=quote(self.rewriter.rewrite_url(item.image, content_dir)),
            body=self.listing(item, members),
        )

    def listing(self, item: ContentItem, members: List[ContentItem]) -> str:
        """
        Generated HTML body of a tag or author document.

        Args:
            item: The tag or author
            members: Posts and pages referencing it

        Returns:
            Optional description paragraph followed by an ordered list
        """
        lines = []
        if item.excerpt:
            lines.append(f"<p>{html.escape(item.excerpt)}</p>")

        lines.append("<ol>")
        for member in members:
            entry = (
                f'<a href="{html.escape(self.permalink(member))}">'
                f"{html.escape(member.display_title)}</a>"
            )
            if member.excerpt:
                entry += f"<p>{html.escape(member.excerpt)}</p>"
            lines.append(f"  <li>{entry}</li>")
        lines.append("</ol>")

        return "\n".join(lines)
