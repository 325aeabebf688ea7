"""Markup parsing and selector queries backed by BeautifulSoup."""

from functools import lru_cache
from typing import List, Optional

import soupsieve
from bs4 import BeautifulSoup, Tag

from .exceptions import SelectorError


@lru_cache(maxsize=1024)
def compile_selector(selector: str) -> soupsieve.SoupSieve:
    """Compile a CSS selector once per process."""
    try:
        return soupsieve.compile(selector)
    except soupsieve.SelectorSyntaxError as e:
        raise SelectorError(selector, str(e).splitlines()[0]) from e


class SoupDocumentAdapter:
    """Parse documents and answer selector queries against any node."""

    def __init__(self, parser: str = "lxml"):
        self.parser = parser

    def parse(self, markup: str) -> BeautifulSoup:
        # Keep attributes such as ``class`` as plain strings
        return BeautifulSoup(markup, self.parser, multi_valued_attributes=None)

    def select(self, node: Tag, selector: str) -> List[Tag]:
        """All descendants of ``node`` matching ``selector``, in document order."""
        return compile_selector(selector).select(node)

    def select_one(self, node: Tag, selector: str) -> Optional[Tag]:
        return compile_selector(selector).select_one(node)

    def text(self, node: Tag) -> str:
        return node.get_text()

    def attribute(self, node: Tag, name: str) -> str:
        value = node.get(name)
        if value is None:
            return ""
        if isinstance(value, list):
            return " ".join(value)
        return value

    def __repr__(self) -> str:
        return f"SoupDocumentAdapter(parser={self.parser!r})"
