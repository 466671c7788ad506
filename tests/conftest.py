# File: tests/conftest.py
from __future__ import annotations

from collections import Counter
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Callable, Dict

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from sitefetch.crawler.models import Page


def html_page(title: str | None = None, *links: str, body: str = "") -> str:
    """Small HTML document with a title, some text and anchors."""
    head = f"<head><title>{title}</title></head>" if title is not None else ""
    anchors = "".join(f'<a href="{href}">{href}</a>' for href in links)
    return f"<html>{head}<body><p>{body}</p>{anchors}</body></html>"


def _handler(target: Any, hits: Counter, path: str) -> Callable:
    """
    Turn a route target into an aiohttp handler:
    str → HTML page, int → empty response with that status,
    coroutine function → used as is.
    """

    async def handle(request: web.Request) -> web.StreamResponse:
        hits[path] += 1
        if callable(target):
            return await target(request)
        if isinstance(target, int):
            return web.Response(status=target, text="error")
        return web.Response(text=target, content_type="text/html")

    return handle


class Site:
    """A running local site: ``base`` URL plus per-path request counters."""

    def __init__(self, base: str, hits: Counter) -> None:
        self.base = base
        self.hits = hits

    def url(self, path: str = "") -> str:
        return self.base + path.lstrip("/")


@pytest.fixture()
def serve_site():
    """
    Factory fixture: ``async with serve_site({"/": html, ...}) as site``
    starts an aiohttp server on a free port for the duration of the block.
    """

    @asynccontextmanager
    async def _serve(routes: Dict[str, Any]) -> AsyncIterator[Site]:
        hits: Counter = Counter()
        app = web.Application()
        for path, target in routes.items():
            app.router.add_get(path, _handler(target, hits, path))
        server = TestServer(app)
        await server.start_server()
        try:
            yield Site(str(server.make_url("/")), hits)
        finally:
            await server.close()

    return _serve


@pytest.fixture()
def make_html():
    return html_page


@pytest.fixture()
def sample_pages() -> Dict[str, Page]:
    return {
        "https://example.com/": Page("https://example.com/", "Home", "Welcome"),
        "https://example.com/docs": Page("https://example.com/docs", "Docs «guide»", "Line 1\nLine 2"),
    }
