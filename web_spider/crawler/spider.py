# === FILE: web_spider/crawler/spider.py ===
from __future__ import annotations

import asyncio
import time
from typing import Callable, List, Optional, Set, Union

from aiohttp import ClientSession, ClientTimeout

from web_spider.config import SpiderConfig
from web_spider.crawler.downloader import Downloader
from web_spider.crawler.events import (
    COMPLETED,
    FILE_EXISTS,
    LINKS_FOUND,
    QUEUE_INITIALIZED,
    SPIDER_COMPLETE,
    SPIDER_ERROR,
    SPIDER_RECURSIVE,
    EventEmitter,
    Listener,
)
from web_spider.crawler.link_extractor import extract_links
from web_spider.crawler.models import CrawlEvent, CrawlReport
from web_spider.crawler.paths import url_to_path
from web_spider.crawler.scheduler import TaskQueue
from web_spider.crawler.store import PageStore
from web_spider.crawler.visited import VisitedSet
from web_spider.logger import get_logger

__all__ = ("Spider", "crawl")

log = get_logger("spider")


class Spider:
    """
    Recursive crawler: fetches the seed, then fans out over every eligible,
    not-yet-visited link until the nesting budget is spent.

    Each page waits for the whole sub-tree of its children before it counts as
    done; the download queue is the only global throttle.
    """

    def __init__(
        self,
        config: SpiderConfig,
        *,
        session: Optional[ClientSession] = None,
        store: Optional[PageStore] = None,
        events: Optional[EventEmitter] = None,
    ) -> None:
        self._config = config
        self.events = events if events is not None else EventEmitter()
        self.queue = TaskQueue(config.concurrency, self.events)
        self.session = session
        self._owns_session = session is None
        self._store = store
        self._visited = VisitedSet()
        self.downloader: Optional[Downloader] = None
        self._report: Optional[CrawlReport] = None
        self._cache_hits: Set[str] = set()
        self.events.on(FILE_EXISTS, self._track)
        self.events.on(COMPLETED, self._track)

    async def __aenter__(self) -> Spider:
        if self.session is None:
            self.session = ClientSession(
                timeout=ClientTimeout(total=self._config.timeout),
                headers={"User-Agent": self._config.user_agent},
                raise_for_status=False,
            )
        self.downloader = Downloader(
            self.session,
            self.queue,
            self.events,
            store=self._store,
            crawl_delay=self._config.crawl_delay_seconds,
        )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._owns_session and self.session and not self.session.closed:
            await self.session.close()

    @property
    def config(self) -> SpiderConfig:
        return self._config

    @property
    def visited(self) -> Set[str]:
        return set(self._visited)

    def on(self, name: str, callback: Listener) -> None:
        self.events.on(name, callback)

    def off(self, name: str, callback: Listener) -> None:
        self.events.off(name, callback)

    async def crawl(self) -> CrawlReport:
        """Run the crawl once and return its report; ``spider-complete`` is emitted at the end."""
        if self.downloader is None:
            raise RuntimeError("Spider must be entered with 'async with' before crawling")
        if self._report is not None:
            raise RuntimeError("Spider.crawl() may only run once")

        seed = str(self._config.url)
        self._report = report = CrawlReport(seed=seed)
        self.events.emit(QUEUE_INITIALIZED, concurrency=self._config.concurrency)
        log.info(
            "Crawl started: %s (nesting=%d, concurrency=%d)",
            seed,
            self._config.nesting,
            self._config.concurrency,
        )
        start = time.monotonic()

        await self._crawl_recursive(seed, self._config.nesting)
        # the last fetches may still be draining after the recursion returned
        await self.queue.join()

        report.visited = self._visited.snapshot()
        duration = time.monotonic() - start
        log.info(
            "Crawl finished: %d visited, %d saved, %d cached, %d errors in %.2f s",
            len(report.visited),
            len(report.saved),
            len(report.cached),
            len(report.errors),
            duration,
        )
        self.events.emit(SPIDER_COMPLETE)
        return report

    async def _crawl_recursive(self, url: str, nesting: int) -> None:
        if not self._visited.add_if_new(url):
            return
        self.events.emit(SPIDER_RECURSIVE, url=url, remaining_depth=nesting)

        try:
            destination = self._config.target_dir / url_to_path(url)
            content = await self.downloader.fetch_or_load(url, destination)  # type: ignore[union-attr]
            await self._process_links(url, content, nesting)
        except Exception as exc:
            self._record_error("url", url, exc)

    async def _process_links(self, current_url: str, content: Union[str, bytes], nesting: int) -> None:
        if nesting <= 0:
            return

        links = extract_links(current_url, content)
        unvisited: List[str] = [link for link in links if link not in self._visited]
        self.events.emit(
            LINKS_FOUND,
            current_url=current_url,
            total_links=len(links),
            unvisited_links=len(unvisited),
            remaining_depth=nesting - 1,
        )
        if not unvisited:
            return
        await asyncio.gather(*(self._crawl_child(link, nesting - 1) for link in unvisited))

    async def _crawl_child(self, link: str, nesting: int) -> None:
        try:
            await self._crawl_recursive(link, nesting)
        except Exception as exc:
            self._record_error("link", link, exc)

    def _record_error(self, key: str, url: str, exc: Exception) -> None:
        message = str(exc) or type(exc).__name__
        log.warning("Failed %s: %s", url, message)
        if self._report is not None:
            self._report.errors.append((url, message))
        self.events.emit(SPIDER_ERROR, **{key: url, "error": message})

    def _track(self, event: CrawlEvent) -> None:
        if self._report is None:
            return
        filename = event.payload["filename"]
        if event.name == FILE_EXISTS:
            self._cache_hits.add(filename)
        elif filename in self._cache_hits:
            self._report.cached.append(filename)
        else:
            self._report.saved.append(filename)


async def crawl(
    config: SpiderConfig,
    on_event: Optional[Callable[[CrawlEvent], object]] = None,
    store: Optional[PageStore] = None,
) -> CrawlReport:
    """Run one crawl in its own HTTP session; *on_event* receives every event."""
    async with Spider(config, store=store) as spider:
        if on_event is not None:
            spider.events.on_any(on_event)
        return await spider.crawl()
