# File: tests/conftest.py
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Awaitable, Callable, Dict, List, Union

import pytest
import pytest_asyncio
from aiohttp import web

from web_spider.config import SpiderConfig
from web_spider.crawler.models import CrawlEvent

#: page body (HTML), bare HTTP status, or a custom aiohttp handler
PageDef = Union[str, int, Callable[[web.Request], Awaitable[web.StreamResponse]]]


@dataclass
class FakeSite:
    """A running aiohttp test server and the request counts it has seen."""

    base: str
    hits: Counter = field(default_factory=Counter)

    def url(self, path: str) -> str:
        return f"{self.base}{path}"


def _handler(path: str, page_def: PageDef, hits: Counter):
    async def handle(request: web.Request) -> web.StreamResponse:
        hits[path] += 1
        if isinstance(page_def, int):
            return web.Response(status=page_def)
        if isinstance(page_def, str):
            return web.Response(text=page_def, content_type="text/html")
        return await page_def(request)

    return handle


@pytest_asyncio.fixture
async def site_factory(unused_tcp_port_factory):
    """
    Start aiohttp servers from ``{path: PageDef}`` mappings.
    Every server is shut down after the test.
    """
    runners: List[web.AppRunner] = []

    async def _make(pages: Dict[str, PageDef]) -> FakeSite:
        port = unused_tcp_port_factory()
        site = FakeSite(base=f"http://127.0.0.1:{port}")
        app = web.Application()
        for path, page_def in pages.items():
            app.router.add_get(path, _handler(path, page_def, site.hits))
        runner = web.AppRunner(app)
        await runner.setup()
        await web.TCPSite(runner, "127.0.0.1", port).start()
        runners.append(runner)
        return site

    yield _make

    for runner in runners:
        await runner.cleanup()


@pytest.fixture()
def make_config(tmp_path: Path):
    """Build a SpiderConfig writing into a temporary directory, without politeness delay."""

    def _make(url: str, **kwargs) -> SpiderConfig:
        kwargs.setdefault("target_dir", tmp_path / "downloads")
        kwargs.setdefault("crawl_delay", 0)
        return SpiderConfig(url=url, **kwargs)

    return _make


class EventRecorder:
    """Collects every event it is called with."""

    def __init__(self) -> None:
        self.events: List[CrawlEvent] = []

    def __call__(self, event: CrawlEvent) -> None:
        self.events.append(event)

    @property
    def names(self) -> List[str]:
        return [e.name for e in self.events]

    def named(self, name: str) -> List[CrawlEvent]:
        return [e for e in self.events if e.name == name]


@pytest.fixture()
def recorder() -> EventRecorder:
    return EventRecorder()
