# sitefetch/crawler/frontier.py
"""
The mutable state of one crawl: pending URLs, seen URLs and recorded pages.

Each queued entry is a pair ``(key, fetch_url)``. The key is the canonical
form used for de-duplication and as the page's identity; the fetch URL is the
absolute URL as it was discovered, which is what gets requested. Servers may
treat ``/guide`` and ``/guide/`` differently, so the two are kept apart.

A Frontier is owned by a single event loop. Every method that mutates it is
synchronous, so each call runs to completion without another worker
interleaving: the seen-check in :meth:`Frontier.try_enqueue` and the limit
check in :meth:`Frontier.record_page` are atomic with respect to the pool.
"""
from __future__ import annotations

import asyncio
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Set, Tuple

from sitefetch.crawler.models import Page

Entry = Tuple[str, str]


class Frontier:
    def __init__(self, limit: Optional[int] = None) -> None:
        self.limit = limit
        self._queue: asyncio.Queue[Entry] = asyncio.Queue()
        self._seen: Set[str] = set()
        self._pages: Dict[str, Page] = {}

    # -- queue ---------------------------------------------------------------

    def try_enqueue(self, key: str, fetch_url: Optional[str] = None) -> bool:
        """
        Queue ``(key, fetch_url)`` unless *key* was ever seen before.
        *fetch_url* defaults to the key. Returns True if queued.
        """
        if key in self._seen:
            return False
        self._seen.add(key)
        self._queue.put_nowait((key, fetch_url or key))
        return True

    async def dequeue(self) -> Entry:
        """Next pending entry, waiting while other workers may still add some."""
        return await self._queue.get()

    def dequeue_nowait(self) -> Optional[Entry]:
        try:
            return self._queue.get_nowait()
        except asyncio.QueueEmpty:
            return None

    def done(self) -> None:
        """Mark one dequeued entry as fully processed."""
        self._queue.task_done()

    async def join(self) -> None:
        """Wait until every queued entry has been dequeued and marked done."""
        await self._queue.join()

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    # -- pages ---------------------------------------------------------------

    def record_page(self, url: str, page: Page) -> bool:
        """
        Store *page* under *url*. A URL is recorded at most once and nothing is
        recorded once the limit is reached. Returns True if stored.
        """
        if url in self._pages or self.limit_reached:
            return False
        self._pages[url] = page
        return True

    def size(self) -> int:
        return len(self._pages)

    @property
    def limit_reached(self) -> bool:
        return self.limit is not None and len(self._pages) >= self.limit

    @property
    def pages(self) -> Mapping[str, Page]:
        """Read-only view in recording order."""
        return MappingProxyType(self._pages)

    def __repr__(self) -> str:
        return (
            f"<Frontier pending={self.pending} seen={len(self._seen)} "
            f"pages={len(self._pages)} limit={self.limit}>"
        )
