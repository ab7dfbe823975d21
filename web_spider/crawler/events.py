# web_spider/crawler/events.py
"""
Event names and the callback channel the crawler reports through.

The core only writes to an :class:`EventEmitter`; rendering progress is
left to whoever subscribes.
"""
from __future__ import annotations

from collections import defaultdict
from typing import Any, Callable, Dict, FrozenSet, List

from web_spider.crawler.models import CrawlEvent
from web_spider.logger import get_logger

QUEUE_INITIALIZED = "queue-initialized"
SPIDER_RECURSIVE = "spider-recursive"
DOWNLOADING = "downloading"
FILE_EXISTS = "file-exists"
FILE_NOT_EXISTS = "file-not-exists"
COMPLETED = "completed"
LINKS_FOUND = "links-found"
TASK_STARTING = "task-starting"
TASK_COMPLETED = "task-completed"
SPIDER_ERROR = "spider-error"
SPIDER_COMPLETE = "spider-complete"

EVENT_NAMES: FrozenSet[str] = frozenset(
    {
        QUEUE_INITIALIZED,
        SPIDER_RECURSIVE,
        DOWNLOADING,
        FILE_EXISTS,
        FILE_NOT_EXISTS,
        COMPLETED,
        LINKS_FOUND,
        TASK_STARTING,
        TASK_COMPLETED,
        SPIDER_ERROR,
        SPIDER_COMPLETE,
    }
)

Listener = Callable[[CrawlEvent], Any]

log = get_logger("events")


class EventEmitter:
    """Synchronous fan-out of :class:`CrawlEvent` records to registered callbacks."""

    def __init__(self) -> None:
        self._listeners: Dict[str, List[Listener]] = defaultdict(list)
        self._any: List[Listener] = []

    def on(self, name: str, callback: Listener) -> None:
        self._check(name)
        self._listeners[name].append(callback)

    def off(self, name: str, callback: Listener) -> None:
        self._check(name)
        try:
            self._listeners[name].remove(callback)
        except ValueError:
            pass

    def on_any(self, callback: Listener) -> None:
        """Subscribe to every event; callbacks see events in emission order."""
        self._any.append(callback)

    def emit(self, name: str, **payload: Any) -> CrawlEvent:
        self._check(name)
        event = CrawlEvent(name, payload)
        for callback in [*self._listeners.get(name, ()), *self._any]:
            try:
                callback(event)
            except Exception:
                log.exception("Listener %r failed on %s", callback, name)
        return event

    @staticmethod
    def _check(name: str) -> None:
        if name not in EVENT_NAMES:
            raise ValueError(f"Unknown event: {name!r}")


__all__ = [
    "EventEmitter",
    "EVENT_NAMES",
    "Listener",
    "QUEUE_INITIALIZED",
    "SPIDER_RECURSIVE",
    "DOWNLOADING",
    "FILE_EXISTS",
    "FILE_NOT_EXISTS",
    "COMPLETED",
    "LINKS_FOUND",
    "TASK_STARTING",
    "TASK_COMPLETED",
    "SPIDER_ERROR",
    "SPIDER_COMPLETE",
]
