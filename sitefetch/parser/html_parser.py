# === FILE: sitefetch/parser/html_parser.py ===
"""HTML content extraction for sitefetch.

The crawler only needs three things from a page:

* title:   document ``<title>`` text, or the page URL when absent.
* content: visible text of the elements matching the content selector,
  or of ``<body>`` when no selector is configured.
* links:   absolute URLs of every ``<a href="…">`` in the document.

Extraction never fails a crawl. Markup that cannot be parsed, or a selector
that matches nothing, yields empty content instead of an exception.

The crawler depends on the :class:`Extractor` protocol, not on
:class:`HtmlExtractor`, so another parser backend can be dropped in without
touching the scheduler.
"""
from __future__ import annotations

from collections.abc import Sequence
from typing import Optional, Protocol
from urllib.parse import urljoin

from bs4 import BeautifulSoup
from bs4.element import Tag

from sitefetch.crawler.models import Extraction
from sitefetch.logger import get_logger

__all__: Sequence[str] = ("Extractor", "HtmlExtractor", "extract")

log = get_logger("parser")

#: elements whose text is never part of the visible content
_INVISIBLE = ("script", "style", "noscript", "template", "link", "img", "video", "svg", "head")


class Extractor(Protocol):
    def extract(self, html: str, url: str, selector: Optional[str] = None) -> Extraction:
        ...


# ---------------------------------------------------------------------------
# BeautifulSoup backend
# ---------------------------------------------------------------------------


class HtmlExtractor:
    """Extractor backed by BeautifulSoup and the stdlib ``html.parser``."""

    def __init__(self, features: str = "html.parser") -> None:
        self.features = features

    def extract(self, html: str, url: str, selector: Optional[str] = None) -> Extraction:
        try:
            soup = BeautifulSoup(html, self.features)
            title = _title(soup) or url
            links = _links(soup, url)
            for element in soup(_INVISIBLE):
                element.decompose()
            content = _content(soup, selector)
        except Exception as exc:
            log.warning("Could not parse %s: %s", url, exc)
            return Extraction(title=url, content="", links=[])
        return Extraction(title=title, content=content, links=links)


def _title(soup: BeautifulSoup) -> str:
    tag = soup.find("title")
    return " ".join(tag.get_text(" ", strip=True).split()) if tag else ""


def _links(soup: BeautifulSoup, url: str) -> list[str]:
    base = url
    base_tag = soup.find("base", href=True)
    if isinstance(base_tag, Tag):
        href = base_tag.get("href")
        if isinstance(href, str) and href.strip():
            base = urljoin(url, href.strip())

    seen: set[str] = set()
    links: list[str] = []
    for tag in soup.find_all("a", href=True):
        href = tag.get("href")
        if not isinstance(href, str) or not href.strip():
            continue
        try:
            absolute = urljoin(base, href.strip())
        except ValueError:
            log.debug("Unresolvable href on %s: %r", url, href)
            continue
        if absolute not in seen:
            seen.add(absolute)
            links.append(absolute)
    return links


def _visible_text(node: Tag) -> str:
    return "\n".join(node.stripped_strings)


def _content(soup: BeautifulSoup, selector: Optional[str]) -> str:
    if selector:
        blocks = (_visible_text(el) for el in soup.select(selector))
        return "\n\n".join(b for b in blocks if b)
    body = soup.body
    return _visible_text(body if body is not None else soup)


_default = HtmlExtractor()


def extract(html: str, url: str, selector: Optional[str] = None) -> Extraction:
    """Shortcut for :meth:`HtmlExtractor.extract` with the default backend."""
    return _default.extract(html, url, selector)
