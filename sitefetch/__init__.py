# sitefetch/__init__.py
"""
sitefetch package initializer.
Defines package version and exposes the crawl API and the CLI.
"""
__version__ = "0.1.0"

from sitefetch.crawler.models import Page
from sitefetch.engine import fetch_site, run_fetch
from sitefetch.errors import ConfigError, CrawlCancelled, ExtractError, FetchError, SiteFetchError
from sitefetch.report import serialize_pages, write_pages

# Expose CLI entry point
from .cli import cli

__all__ = [
    "__version__",
    "Page",
    "fetch_site",
    "run_fetch",
    "serialize_pages",
    "write_pages",
    "SiteFetchError",
    "ConfigError",
    "FetchError",
    "ExtractError",
    "CrawlCancelled",
    "cli",
]
