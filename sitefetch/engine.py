# File: sitefetch/engine.py
"""sitefetch.engine: entry points that validate the options and run a crawl."""

from __future__ import annotations

import asyncio
from typing import Any, Dict, Optional

from sitefetch.config import CrawlConfig, build_config
from sitefetch.crawler.crawler import Crawler
from sitefetch.crawler.matcher import validate_seed
from sitefetch.crawler.models import Page
from sitefetch.logger import logger
from sitefetch.parser.html_parser import Extractor

__all__ = ["fetch_site", "run_fetch"]


async def fetch_site(
    url: str,
    config: Optional[CrawlConfig] = None,
    *,
    extractor: Optional[Extractor] = None,
    cancel_after: Optional[float] = None,
    **options: Any,
) -> Dict[str, Page]:
    """
    Crawl the site at *url* and return its pages keyed by canonical URL.

    *options* (``concurrency``, ``match``, ``content_selector``, ``limit``,
    ``timeout``, ``user_agent``) override the fields of *config*. Bad options
    or a bad seed raise ConfigError before any request is made.

    With *cancel_after* the crawl is cancelled after that many seconds and
    CrawlCancelled carries the pages recorded until then.
    """
    cfg = build_config(config, **options) if options or config is None else config
    seed = validate_seed(url)
    logger.debug("Crawl options: %s", cfg.model_dump())

    async with Crawler(seed, cfg, extractor=extractor) as crawler:
        timer = None
        if cancel_after is not None:
            timer = asyncio.get_running_loop().call_later(cancel_after, crawler.cancel)
        try:
            return await crawler.crawl()
        finally:
            if timer is not None:
                timer.cancel()


def run_fetch(
    url: str,
    config: Optional[CrawlConfig] = None,
    *,
    extractor: Optional[Extractor] = None,
    cancel_after: Optional[float] = None,
    **options: Any,
) -> Dict[str, Page]:
    """Blocking wrapper around :func:`fetch_site` for scripts."""
    return asyncio.run(fetch_site(url, config, extractor=extractor, cancel_after=cancel_after, **options))
