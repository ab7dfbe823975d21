# web_spider/crawler/downloader.py
"""
Download manager: serves a page from the store when it is already there,
otherwise fetches it under the shared concurrency cap and stores it.
"""
from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional, Union

from aiohttp import ClientError, ClientSession

from web_spider.crawler.errors import FetchError, StorageError
from web_spider.crawler.events import (
    COMPLETED,
    DOWNLOADING,
    FILE_EXISTS,
    FILE_NOT_EXISTS,
    EventEmitter,
)
from web_spider.crawler.models import DownloadTask
from web_spider.crawler.scheduler import TaskQueue
from web_spider.crawler.store import FileSystemStore, PageStore
from web_spider.logger import get_logger

log = get_logger("downloader")


class Downloader:
    """Fetch-or-load pages; no retries, failures surface as :class:`SpiderError` subclasses."""

    def __init__(
        self,
        session: ClientSession,
        queue: TaskQueue,
        events: EventEmitter,
        store: Optional[PageStore] = None,
        crawl_delay: float = 1.0,
    ) -> None:
        self.session = session
        self.queue = queue
        self.events = events
        self.store: PageStore = store if store is not None else FileSystemStore()
        self.crawl_delay = crawl_delay
        self.fetch_count = 0

    async def fetch_or_load(self, url: str, destination: Union[str, Path]) -> bytes:
        """
        Return the bytes stored at *destination*, fetching *url* first if absent.

        Raises FetchError on transport failures and non-2xx statuses,
        StorageError when the store cannot be read or written.
        """
        task = DownloadTask(url, Path(destination))
        cached = await self._load(task)
        if cached is not None:
            self.events.emit(COMPLETED, url=url, filename=str(task.destination))
            return cached
        return await self.queue.add(lambda: self._download(task))

    async def _load(self, task: DownloadTask) -> Optional[bytes]:
        filename = str(task.destination)
        try:
            content = await self.store.load(task.destination)
        except OSError as exc:
            raise StorageError(task.url, task.destination, exc) from exc
        if content is None:
            self.events.emit(FILE_NOT_EXISTS, filename=filename)
            return None
        log.debug("Cache hit %s -> %s", task.url, filename)
        self.events.emit(FILE_EXISTS, filename=filename)
        return content

    async def _download(self, task: DownloadTask) -> bytes:
        filename = str(task.destination)
        self.events.emit(DOWNLOADING, url=task.url, filename=filename)

        if self.crawl_delay > 0:
            await asyncio.sleep(self.crawl_delay)

        self.fetch_count += 1
        try:
            async with self.session.get(task.url) as resp:
                if not 200 <= resp.status < 300:
                    raise FetchError(task.url, f"HTTP {resp.status} for {task.url}", status=resp.status)
                data = await resp.read()
        except (ClientError, asyncio.TimeoutError) as exc:
            raise FetchError(task.url, f"Request to {task.url} failed: {str(exc) or type(exc).__name__}") from exc

        try:
            await self.store.save(task.destination, data)
        except OSError as exc:
            raise StorageError(task.url, task.destination, exc) from exc

        log.debug("Saved %s -> %s (%d bytes)", task.url, filename, len(data))
        self.events.emit(COMPLETED, url=task.url, filename=filename)
        return data


__all__ = ["Downloader"]
