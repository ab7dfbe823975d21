"""Typed failures raised by the WebSpider download layer."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union


class SpiderError(Exception):
    """Base class for failures tied to a single URL."""

    def __init__(self, url: str, message: str) -> None:
        self.url = url
        super().__init__(message)


class FetchError(SpiderError):
    """Raised when a page cannot be fetched: transport error or non-success status."""

    def __init__(self, url: str, message: str, status: Optional[int] = None) -> None:
        self.status = status
        super().__init__(url, message)


class StorageError(SpiderError):
    """Raised when a page cannot be read from or written to the local store."""

    def __init__(self, url: str, path: Union[str, Path], original: Exception) -> None:
        self.path = str(path)
        self.original = original
        super().__init__(url, f"Storage failure for {self.path}: {original}")
