"""sitefetch.crawler: frontier, scheduler, fetcher and URL matching."""

from sitefetch.crawler.crawler import Crawler
from sitefetch.crawler.frontier import Frontier
from sitefetch.crawler.models import CrawlState, Page

__all__ = ["Crawler", "Frontier", "CrawlState", "Page"]
