"""Tests for markdown document rendering."""

from dataclasses import replace

import yaml

from ghost_exporter.config import ExportConfig
from ghost_exporter.exporter.content import ContentItem, ContentKind, ContentRef
from ghost_exporter.exporter.renderer import ContentRenderer, quote
from ghost_exporter.exporter.rewrite import PathRewriter

from .conftest import IMAGES, utc


def front_matter(text):
    assert text.startswith("---\n")
    block, body = text[4:].split("\n---\n", 1)
    return yaml.safe_load(block), body


def make_post(**overrides):
    values = dict(
        kind=ContentKind.POST,
        slug="hello-world",
        title="Hello World",
        html=f'<img src="{IMAGES}2024/01/a.png">',
        excerpt="Short intro",
        image=IMAGES + "2024/01/cover.png",
        updated_at=utc("2024-01-01T00:00:00"),
        published_at=utc("2024-01-02T00:00:00"),
        tags=[ContentRef("news", "News"), ContentRef("getting-started", "Getting Started")],
        authors=[ContentRef("jane", "Jane")],
    )
    values.update(overrides)
    return ContentItem(**values)


class TestQuote:
    def test_escapes_double_quotes(self):
        assert yaml.safe_load(quote('Say "hi"')) == 'Say "hi"'

    def test_escapes_newlines_and_backslashes(self):
        value = 'line one\nline two \\ end'
        assert "\n" not in quote(value)
        assert yaml.safe_load(quote(value)) == value

    def test_empty(self):
        assert quote(None) == '""'


class TestContentRenderer:
    def setup_method(self):
        self.config = ExportConfig(ghost_url="https://cms.example", ghost_key="k")
        self.renderer = ContentRenderer(
            self.config, PathRewriter(self.config.remote_base, self.config.local_assets_dir)
        )

    def test_post_document(self):
        document = self.renderer.render(make_post())
        meta, body = front_matter(document.text)

        assert document.path == "./_posts/2024-01-02-hello-world.md"
        assert str(meta["date"]) == "2024-01-02"
        assert meta["title"] == "Hello World"
        assert meta["layout"] == "post"
        assert meta["excerpt"] == "Short intro"
        assert meta["image"] == "/assets/images/2024/01/cover.png"
        assert meta["tags"] == ["News", "Getting Started"]
        assert body.strip() == '<img src="/assets/images/2024/01/a.png">'

    def test_output_is_flush_left(self):
        document = self.renderer.render(make_post())
        for line in document.text.splitlines():
            assert not line.startswith(" ")

    def test_quotes_in_title_keep_front_matter_valid(self):
        post = make_post(title='The "best" post: part 1', excerpt="It's \"here\"")
        meta, _ = front_matter(self.renderer.render(post).text)
        assert meta["title"] == 'The "best" post: part 1'
        assert meta["excerpt"] == "It's \"here\""

    def test_missing_optional_fields_render_empty(self):
        post = make_post(html=None, excerpt=None, image=None, tags=[])
        text = self.renderer.render(post).text
        meta, body = front_matter(text)

        assert meta["excerpt"] == ""
        assert meta["image"] == ""
        assert meta["tags"] == []
        assert body.strip() == ""
        assert "None" not in text
        assert "null" not in text

    def test_unpublished_item_has_empty_date(self):
        page = make_post(kind=ContentKind.PAGE, slug="draft", published_at=None)
        text = self.renderer.render(page).text
        meta, _ = front_matter(text)

        assert meta["date"] == ""
        assert "date: \"\"\n" in text

    def test_no_date_prefix(self):
        renderer = ContentRenderer(
            replace(self.config, post_date_prefix=False), self.renderer.rewriter
        )
        post = make_post()
        assert renderer.output_path(post) == "./_posts/hello-world.md"
        assert renderer.permalink(post) == "/hello-world/"

    def test_page_document(self):
        page = make_post(kind=ContentKind.PAGE, slug="about", title="About")
        document = self.renderer.render(page)
        meta, _ = front_matter(document.text)

        assert document.path == "./about.md"
        assert meta["layout"] == "page"
        assert meta["image"] == "/assets/images/2024/01/cover.png"

    def test_tag_listing(self):
        tag = ContentItem(
            kind=ContentKind.TAG,
            slug="news",
            title="News",
            excerpt="All the news",
            image=IMAGES + "tag.png",
        )
        tagged = make_post(excerpt="First <post>")
        untagged = make_post(slug="other", title="Other", tags=[])
        page = make_post(kind=ContentKind.PAGE, slug="about", title="About", excerpt=None)

        document = self.renderer.render(tag, [tagged, untagged, page])
        meta, body = front_matter(document.text)

        assert document.path == "./tag/news.md"
        assert meta["title"] == "News"
        assert meta["layout"] == "tag"
        assert meta["excerpt"] == "All the news"
        assert meta["image"] == "/assets/images/tag.png"
        assert body.startswith("<p>All the news</p>\n<ol>")
        assert '<li><a href="/2024/01/02/hello-world/">Hello World</a><p>First &lt;post&gt;</p></li>' in body
        assert '<li><a href="/about/">About</a></li>' in body
        assert "/other/" not in body

    def test_author_listing_falls_back_to_slug(self):
        author = ContentItem(kind=ContentKind.AUTHOR, slug="jane", image=IMAGES + "cover.jpg")
        document = self.renderer.render(author, [make_post()])
        meta, body = front_matter(document.text)

        assert document.path == "./author/jane.md"
        assert meta["title"] == "jane"
        assert meta["image"] == "/assets/images/cover.jpg"
        assert not body.startswith("<p>")
        assert "/2024/01/02/hello-world/" in body
