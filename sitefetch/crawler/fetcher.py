# sitefetch/crawler/fetcher.py
"""
Fetcher module: a single HTTP GET with a bounded duration.

Anything short of a same-origin 2xx HTML response becomes a FetchError.
There is no retry: a failed URL is reported once and dropped by the caller.
"""
from __future__ import annotations

import asyncio

from aiohttp import ClientError, ClientSession, ClientTimeout, TCPConnector

from sitefetch.config import CrawlConfig
from sitefetch.crawler.matcher import same_origin
from sitefetch.crawler.models import FetchResult
from sitefetch.errors import FetchError

_HTML_TYPES = ("text/html", "application/xhtml+xml")


def open_session(config: CrawlConfig) -> ClientSession:
    """Session sized to the crawl: one connection per worker, per-request timeout."""
    return ClientSession(
        connector=TCPConnector(limit=config.concurrency),
        timeout=ClientTimeout(total=config.timeout),
        headers={
            "User-Agent": config.user_agent,
            "Accept": "text/html,application/xhtml+xml;q=0.9,*/*;q=0.5",
        },
        raise_for_status=False,
    )


class Fetcher:
    """Fetches HTML pages through a shared aiohttp session."""

    def __init__(self, session: ClientSession, config: CrawlConfig) -> None:
        self.session = session
        self.config = config

    async def fetch(self, url: str) -> FetchResult:
        """
        GET *url*, following redirects.

        Raises FetchError on network errors, timeouts, non-2xx statuses,
        non-HTML content and redirects that leave the origin.
        """
        try:
            async with self.session.get(url, allow_redirects=True) as resp:
                final_url = str(resp.url)
                if not 200 <= resp.status < 300:
                    raise FetchError(url, f"HTTP {resp.status} {resp.reason or ''}".strip(), resp.status)
                if not same_origin(final_url, url):
                    raise FetchError(url, f"redirected off-site to {final_url}", resp.status)
                ctype = resp.headers.get("Content-Type", "").split(";", 1)[0].strip().lower()
                if ctype not in _HTML_TYPES:
                    raise FetchError(url, f"not an HTML page ({ctype or 'no content type'})", resp.status)
                html = await resp.text(errors="replace")
                return FetchResult(url=url, final_url=final_url, status=resp.status, html=html)
        except asyncio.TimeoutError as exc:
            raise FetchError(url, f"timed out after {self.config.timeout:g}s") from exc
        except ClientError as exc:
            raise FetchError(url, f"{type(exc).__name__}: {exc}") from exc
