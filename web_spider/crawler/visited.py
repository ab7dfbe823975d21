from __future__ import annotations

from typing import Iterator, List


class VisitedSet:
    """
    URLs already committed to crawling in this run.

    Grows only. :meth:`add_if_new` is the single check-and-insert step and
    contains no await, so concurrent branches on one event loop can never
    both claim the same URL.
    """

    def __init__(self) -> None:
        self._urls: dict[str, None] = {}

    def add_if_new(self, url: str) -> bool:
        """Claim *url*; False if another branch already did."""
        if url in self._urls:
            return False
        self._urls[url] = None
        return True

    def __contains__(self, url: object) -> bool:
        return url in self._urls

    def __len__(self) -> int:
        return len(self._urls)

    def __iter__(self) -> Iterator[str]:
        return iter(self._urls)

    def snapshot(self) -> List[str]:
        """Visited URLs in admission order."""
        return list(self._urls)
