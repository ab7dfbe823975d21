# web_spider/crawler/scheduler.py
"""
Bounded FIFO task queue: at most ``concurrency`` coroutines run at once,
the rest wait in submission order.
"""
from __future__ import annotations

import asyncio
from collections import deque
from typing import Awaitable, Callable, Deque, Optional, Set, Tuple, TypeVar

from web_spider.crawler.events import TASK_COMPLETED, TASK_STARTING, EventEmitter
from web_spider.logger import get_logger

T = TypeVar("T")

log = get_logger("scheduler")

_Pending = Tuple[Callable[[], Awaitable[object]], "asyncio.Future[object]"]


class TaskQueue:
    """Admits queued coroutine factories while fewer than ``concurrency`` are active."""

    def __init__(self, concurrency: int, events: Optional[EventEmitter] = None) -> None:
        if concurrency < 1:
            raise ValueError("concurrency must be >= 1")
        self.concurrency = concurrency
        self.events = events
        self._pending: Deque[_Pending] = deque()
        self._running: Set[asyncio.Task[None]] = set()
        self._idle = asyncio.Event()
        self._idle.set()
        self.max_active_seen = 0

    @property
    def active(self) -> int:
        return len(self._running)

    @property
    def pending(self) -> int:
        return len(self._pending)

    async def add(self, factory: Callable[[], Awaitable[T]]) -> T:
        """Queue *factory* and wait for its result; its exception propagates to the caller."""
        future: asyncio.Future[object] = asyncio.get_running_loop().create_future()
        self._pending.append((factory, future))
        self._idle.clear()
        self._admit()
        return await future  # type: ignore[return-value]

    async def join(self) -> None:
        """Wait until nothing is running and nothing is queued."""
        await self._idle.wait()

    def _admit(self) -> None:
        while self._pending and len(self._running) < self.concurrency:
            factory, future = self._pending.popleft()
            if future.cancelled():
                continue
            task = asyncio.create_task(self._run(factory, future))
            self._running.add(task)
            self.max_active_seen = max(self.max_active_seen, len(self._running))
            self._notify(TASK_STARTING)
        if not self._pending and not self._running:
            self._idle.set()

    async def _run(self, factory: Callable[[], Awaitable[object]], future: "asyncio.Future[object]") -> None:
        try:
            result = await factory()
        except asyncio.CancelledError:
            future.cancel()
            raise
        except Exception as exc:
            if not future.done():
                future.set_exception(exc)
        else:
            if not future.done():
                future.set_result(result)
        finally:
            self._running.discard(asyncio.current_task())  # type: ignore[arg-type]
            self._notify(TASK_COMPLETED)
            self._admit()

    def _notify(self, name: str) -> None:
        log.debug("%s active=%d queued=%d", name, self.active, self.pending)
        if self.events is not None:
            self.events.emit(
                name,
                active=self.active,
                concurrency=self.concurrency,
                queue_length=self.pending,
            )


__all__ = ["TaskQueue"]
