# === FILE: sitefetch/crawler/crawler.py ===
from __future__ import annotations

import asyncio
import time
from typing import Dict, Optional
from urllib.parse import urldefrag

from aiohttp import ClientSession

from sitefetch.config import CrawlConfig
from sitefetch.crawler.fetcher import Fetcher, open_session
from sitefetch.crawler.frontier import Frontier
from sitefetch.crawler.matcher import matches, normalize_url, validate_seed
from sitefetch.crawler.models import CrawlState, CrawlStats, Extraction, Page
from sitefetch.errors import CrawlCancelled, ExtractError, FetchError
from sitefetch.logger import get_logger
from sitefetch.parser.html_parser import Extractor, HtmlExtractor

__all__ = ("Crawler",)


class Crawler:
    """
    Asynchronous site crawler: a fixed pool of ``concurrency`` workers
    draining one shared :class:`Frontier`.

    Usage::

        async with Crawler("https://example.com", config) as crawler:
            pages = await crawler.crawl()

    The crawl ends when the frontier is empty and every worker is idle, or
    once ``limit`` pages are recorded and the in-flight fetches have drained.
    Only a failure of the seed URL is raised; any other fetch failure is
    logged and the URL dropped.
    """

    def __init__(
        self,
        seed: str,
        config: Optional[CrawlConfig] = None,
        *,
        extractor: Optional[Extractor] = None,
        session: Optional[ClientSession] = None,
    ) -> None:
        self.config = config or CrawlConfig()
        self.seed = validate_seed(seed)
        # requested as given, the canonical form may drop a trailing slash
        self.seed_url = urldefrag(seed.strip()).url
        self.extractor: Extractor = extractor or HtmlExtractor()
        self.session = session
        self._own_session = session is None
        self.frontier: Optional[Frontier] = None
        self.state: Optional[CrawlState] = None
        self.stats = CrawlStats()
        self.logger = get_logger("crawler")
        self._in_flight = 0
        self._fatal: Optional[BaseException] = None
        self._cancel = asyncio.Event()

    async def __aenter__(self) -> Crawler:
        if self.session is None:
            self.session = open_session(self.config)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._own_session and self.session and not self.session.closed:
            await self.session.close()

    def cancel(self) -> None:
        """Stop the crawl; :meth:`crawl` raises CrawlCancelled with the pages so far."""
        self._cancel.set()

    async def crawl(self) -> Dict[str, Page]:
        if self.session is None:
            raise RuntimeError("Session not initialized, use 'async with Crawler(...)'")
        self.logger.info("Fetching site: %s", self.seed)
        start = time.monotonic()

        frontier = self.frontier = Frontier(self.config.limit)
        fetcher = Fetcher(self.session, self.config)
        self.state = CrawlState.RUNNING
        frontier.try_enqueue(self.seed, self.seed_url)

        workers = [
            asyncio.create_task(self._worker(frontier, fetcher), name=f"sitefetch-worker-{i}")
            for i in range(self.config.concurrency)
        ]
        drained = asyncio.create_task(frontier.join())
        cancelled = asyncio.create_task(self._cancel.wait())
        try:
            done, _ = await asyncio.wait({drained, cancelled}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for task in (*workers, drained, cancelled):
                task.cancel()
            await asyncio.gather(*workers, drained, cancelled, return_exceptions=True)

        pages = dict(frontier.pages)
        if self._fatal is not None:
            self.state = CrawlState.DONE
            raise self._fatal
        if drained not in done:
            self.state = CrawlState.CANCELLED
            self.logger.warning("Crawl cancelled with %d pages recorded", len(pages))
            raise CrawlCancelled(pages)

        self.state = CrawlState.LIMIT_REACHED if frontier.limit_reached else CrawlState.DONE
        duration = time.monotonic() - start
        self.logger.info(
            "Finished: %d pages in %.2f s (%.2f pages/s), %d failed, %d skipped",
            len(pages),
            duration,
            len(pages) / duration if duration else 0,
            self.stats.failed,
            self.stats.skipped,
        )
        return pages

    async def _worker(self, frontier: Frontier, fetcher: Fetcher) -> None:
        while True:
            url, fetch_url = await frontier.dequeue()
            try:
                if frontier.limit_reached:
                    self.stats.skipped += 1
                    continue
                self._in_flight += 1
                try:
                    await self._process(url, fetch_url, frontier, fetcher)
                finally:
                    self._in_flight -= 1
            except Exception as exc:
                self.logger.exception("Crawler failed on %s", url)
                self._fatal = exc
                self.cancel()
            finally:
                frontier.done()
                self._update_state(frontier)

    async def _process(self, url: str, fetch_url: str, frontier: Frontier, fetcher: Fetcher) -> None:
        self.logger.info("Fetching %s", fetch_url)
        try:
            result = await fetcher.fetch(fetch_url)
        except FetchError as exc:
            self.stats.failed += 1
            if url == self.seed:
                self.logger.error("Seed URL failed: %s", exc)
                self._fatal = exc
            else:
                self.logger.warning("Failed to fetch %s", exc)
            return
        self.stats.fetched += 1

        try:
            extraction = self.extractor.extract(result.html, result.final_url, self.config.content_selector)
        except ExtractError as exc:
            self.logger.warning("Could not extract %s: %s", url, exc)
            extraction = Extraction(title=url, content="")

        # the seed is fetched for its links even when it is out of scope
        if matches(url, self.config.match, self.seed):
            page = Page(url=url, title=extraction.title, content=extraction.content)
            if frontier.record_page(url, page):
                self.logger.debug("Recorded %s (%d pages)", url, frontier.size())
            else:
                self.stats.discarded += 1
                self.logger.debug("Limit reached, discarding %s", url)
        else:
            self.logger.info("Skipped %s: does not match %s", url, ", ".join(self.config.match))

        if frontier.limit_reached:
            return
        for link in extraction.links:
            try:
                canonical = normalize_url(link)
            except ValueError:
                continue
            if matches(canonical, self.config.match, self.seed) and frontier.try_enqueue(
                canonical, urldefrag(link).url
            ):
                self.logger.debug("Queued %s", link)

    def _update_state(self, frontier: Frontier) -> None:
        if self.state is CrawlState.CANCELLED:
            return
        if frontier.limit_reached:
            self.state = CrawlState.LIMIT_REACHED
        elif frontier.pending == 0 and self._in_flight > 0:
            self.state = CrawlState.DRAINING
        elif frontier.pending:
            self.state = CrawlState.RUNNING
