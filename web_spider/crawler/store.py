# web_spider/crawler/store.py
"""
Page stores keyed by destination path.

A page found in the store is served from it and never fetched again, which
is what lets a repeated crawl into the same target directory skip network I/O.
"""
from __future__ import annotations

import uuid
from pathlib import Path
from typing import Dict, Optional, Protocol, Union, runtime_checkable

import aiofiles
import aiofiles.os

PathLike = Union[str, Path]


@runtime_checkable
class PageStore(Protocol):
    async def load(self, path: PathLike) -> Optional[bytes]:
        """Return stored bytes, or None when nothing is stored under *path*."""

    async def save(self, path: PathLike, data: bytes) -> None:
        """Persist *data* under *path*."""


class FileSystemStore:
    """Reads and writes pages on local disk, creating parent directories on demand."""

    async def load(self, path: PathLike) -> Optional[bytes]:
        try:
            async with aiofiles.open(path, "rb") as f:
                return await f.read()
        except FileNotFoundError:
            return None

    async def save(self, path: PathLike, data: bytes) -> None:
        """Write through a sibling temp file so a half-written page never becomes a cache hit."""
        target = Path(path)
        await aiofiles.os.makedirs(target.parent, exist_ok=True)
        partial = target.with_name(f".{target.name}.{uuid.uuid4().hex}.part")
        try:
            async with aiofiles.open(partial, "wb") as f:
                await f.write(data)
            await aiofiles.os.replace(partial, target)
        except BaseException:
            try:
                await aiofiles.os.remove(partial)
            except FileNotFoundError:
                pass
            raise


class MemoryStore:
    """In-memory store for tests and dry runs."""

    def __init__(self, pages: Optional[Dict[str, bytes]] = None) -> None:
        self.pages: Dict[str, bytes] = dict(pages or {})

    async def load(self, path: PathLike) -> Optional[bytes]:
        return self.pages.get(str(path))

    async def save(self, path: PathLike, data: bytes) -> None:
        self.pages[str(path)] = bytes(data)


__all__ = ["PageStore", "FileSystemStore", "MemoryStore"]
