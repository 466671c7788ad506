# sitefetch/crawler/models.py
"""
Data models for the sitefetch crawler.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List


@dataclass(frozen=True, slots=True)
class Page:
    """A fetched, in-scope page. Identity is the canonical ``url``."""

    url: str
    title: str
    content: str

    def as_dict(self) -> Dict[str, str]:
        return {"url": self.url, "title": self.title, "content": self.content}


@dataclass(slots=True)
class Extraction:
    """What an extractor pulls out of one HTML document."""

    title: str
    content: str
    links: List[str] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class FetchResult:
    """Successful HTML response: requested URL, URL after redirects and the body."""

    url: str
    final_url: str
    status: int
    html: str


class CrawlState(str, Enum):
    RUNNING = "running"
    DRAINING = "draining"
    LIMIT_REACHED = "limit_reached"
    DONE = "done"
    CANCELLED = "cancelled"


@dataclass(slots=True)
class CrawlStats:
    """Counters reported at the end of a crawl."""

    fetched: int = 0
    failed: int = 0
    skipped: int = 0
    discarded: int = 0
