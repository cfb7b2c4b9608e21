"""
Lexers that pull candidate URL values out of rendered HTML bodies.

Asset discovery does not need a full HTML parse: Ghost renders every image
reference as a double-quoted attribute value. ``QuotedValueLexer`` relies on
that and simply splits the markup on double quotes. It is correct as long as
asset URLs never contain a raw ``"`` character, which holds for Ghost's URL
scheme. ``HtmlAttributeLexer`` parses the markup with BeautifulSoup and is
used when bodies may contain single-quoted or unquoted attributes.
"""

from abc import ABC, abstractmethod
from typing import Dict, Iterator, List, Type

from bs4 import BeautifulSoup


def split_candidates(value: str) -> List[str]:
    """
    Split one attribute value into URL candidates.

    Values without whitespace are returned whole. Values with whitespace are
    treated like a ``srcset`` list (``url 600w, url 1000w``): split on
    whitespace with list commas removed.
    """
    value = value.strip()
    if not value:
        return []
    if not any(ch.isspace() for ch in value):
        return [value]
    return [token.rstrip(',') for token in value.split() if token.rstrip(',')]


class AttributeLexer(ABC):
    """Yields the candidate URL strings found in an HTML body."""

    name = ""

    @abstractmethod
    def values(self, html: str) -> Iterator[str]:
        """Yield raw attribute values, before candidate splitting."""

    def candidates(self, html: str) -> Iterator[str]:
        """Yield every URL candidate in ``html``."""
        for value in self.values(html):
            yield from split_candidates(value)


class QuotedValueLexer(AttributeLexer):
    """Splits markup on double quotes."""

    name = "quoted"

    def values(self, html: str) -> Iterator[str]:
        yield from html.split('"')


class HtmlAttributeLexer(AttributeLexer):
    """Reads URL-bearing attributes from parsed HTML."""

    name = "html"

    URL_ATTRIBUTES = ('src', 'href', 'poster', 'data-src', 'srcset', 'data-srcset')

    def values(self, html: str) -> Iterator[str]:
        try:
            soup = BeautifulSoup(html, 'lxml')
        except Exception:
            soup = BeautifulSoup(html, 'html.parser')

        for tag in soup.find_all(True):
            for attribute in self.URL_ATTRIBUTES:
                value = tag.get(attribute)
                if isinstance(value, list):
                    value = ' '.join(value)
                if value:
                    yield value


LEXERS: Dict[str, Type[AttributeLexer]] = {
    QuotedValueLexer.name: QuotedValueLexer,
    HtmlAttributeLexer.name: HtmlAttributeLexer,
}


def get_lexer(name: str) -> AttributeLexer:
    """
    Look up a lexer by name.

    Raises:
        ValueError: If no lexer has that name
    """
    try:
        return LEXERS[name]()
    except KeyError:
        raise ValueError(
            f"Unknown asset lexer '{name}', expected one of: {', '.join(sorted(LEXERS))}"
        ) from None
