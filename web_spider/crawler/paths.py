# web_spider/crawler/paths.py
"""
Maps page URLs to relative, filesystem-safe storage paths.
"""
from __future__ import annotations

import posixpath
import re
from urllib.parse import unquote, urlsplit

from slugify import slugify

__all__ = ("url_to_path",)

_HTML_SUFFIX = ".html"
_HTML_EXT_RE = re.compile(r"\.html?$", re.IGNORECASE)


def _slug(segment: str) -> str:
    return slugify(segment, lowercase=True)


def url_to_path(url: str) -> str:
    """
    Convert *url* into ``<host>/<seg1>/<seg2>...html``.

    Host and every path segment are slugified on their own. An ``.html`` or
    ``.htm`` extension on the last segment is split off before slugifying
    and put back afterwards; every other path gets ``.html`` appended.
    Query strings and fragments do not take part, so distinct URLs may
    share a path.

    >>> url_to_path("https://Example.COM/Docs/Page.html")
    'example-com/docs/page.html'
    """
    parts = urlsplit(url)
    host = _slug(parts.hostname or "")
    if not host:
        raise ValueError(f"URL has no hostname: {url!r}")

    segments = [s for s in unquote(parts.path).split("/") if s]
    suffix = _HTML_SUFFIX
    if segments:
        match = _HTML_EXT_RE.search(segments[-1])
        if match:
            suffix = match.group(0).lower()
            segments[-1] = segments[-1][: match.start()]

    slugs = [slug for slug in (_slug(s) for s in segments) if slug]
    return posixpath.join(host, *slugs) + suffix
