# web_spider/crawler/models.py
"""
Data models for the WebSpider crawler.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Tuple


@dataclass(slots=True, frozen=True)
class DownloadTask:
    """A URL and the destination path its bytes are stored under."""

    url: str
    destination: Path


@dataclass(slots=True, frozen=True)
class CrawlEvent:
    """One lifecycle occurrence reported to observers."""

    name: str
    payload: Dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class CrawlReport:
    """Outcome of a single crawl run."""

    seed: str
    visited: List[str] = field(default_factory=list)
    saved: List[str] = field(default_factory=list)
    cached: List[str] = field(default_factory=list)
    errors: List[Tuple[str, str]] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return not self.errors

    def as_dict(self) -> Dict[str, Any]:
        return {
            "seed": self.seed,
            "visited": list(self.visited),
            "saved": list(self.saved),
            "cached": list(self.cached),
            "errors": [{"url": url, "error": message} for url, message in self.errors],
        }
