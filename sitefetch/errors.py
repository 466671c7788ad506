# sitefetch/errors.py
"""
Exception hierarchy shared by the crawler, the engine facade and the CLI.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Optional

if TYPE_CHECKING:
    from sitefetch.crawler.models import Page


class SiteFetchError(Exception):
    """Base class for every error raised by sitefetch."""


class ConfigError(SiteFetchError, ValueError):
    """Invalid seed URL or crawl options. Raised before any request is sent."""


class FetchError(SiteFetchError):
    """A single URL could not be fetched (network, timeout, status, content type)."""

    def __init__(self, url: str, reason: str, status: Optional[int] = None) -> None:
        self.url = url
        self.reason = reason
        self.status = status
        super().__init__(f"{url}: {reason}")


class ExtractError(SiteFetchError):
    """An extractor could not make sense of a page."""


class CrawlCancelled(SiteFetchError):
    """The crawl was stopped from outside; ``pages`` holds what was recorded."""

    def __init__(self, pages: Dict[str, "Page"], message: str = "crawl cancelled") -> None:
        self.pages = pages
        super().__init__(f"{message} ({len(pages)} pages recorded)")


__all__ = ("SiteFetchError", "ConfigError", "FetchError", "ExtractError", "CrawlCancelled")
