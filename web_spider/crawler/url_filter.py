# web_spider/crawler/url_filter.py
"""
Decides whether a hyperlink found on a page is worth crawling.

A link is followed only when it stays on the referencing page's host and
inside the referencing page's base path, i.e. the crawl never climbs out of
the sub-tree it started in.
"""
from __future__ import annotations

import posixpath
import re
from typing import Optional, Tuple
from urllib.parse import urljoin, urlsplit

from web_spider.logger import get_logger

__all__ = ("is_eligible", "resolve_link", "base_path")

_TEMPLATE_MARKERS: Tuple[str, ...] = ("[%", "%]", "{{", "}}", "${")
_SKIPPED_PREFIXES: Tuple[str, ...] = ("javascript:", "mailto:", "#")
_HTML_DOC_RE = re.compile(r"\.html?$", re.IGNORECASE)

log = get_logger("url_filter")


def base_path(page_path: str) -> str:
    """
    Directory-equivalent prefix of a page path.

    ``/fhir/R4/`` -> ``/fhir/R4``; ``/a/b/index.html`` -> ``/a/b``.
    """
    path = page_path[:-1] if page_path.endswith("/") else page_path
    if _HTML_DOC_RE.search(path):
        path = posixpath.dirname(path)
    return path


def _strip_slash(path: str) -> str:
    return path[:-1] if path.endswith("/") else path


def resolve_link(page_url: str, href: Optional[str]) -> Optional[str]:
    """Return the absolute URL *href* points to, or None if it must not be followed."""
    if href is None:
        return None
    raw = href.strip()
    if not raw or raw == "/":
        return None
    if any(marker in raw for marker in _TEMPLATE_MARKERS):
        return None
    if raw.lower().startswith(_SKIPPED_PREFIXES):
        return None

    try:
        absolute = urljoin(page_url, raw)
        link = urlsplit(absolute)
        page = urlsplit(page_url)
        link_host, page_host = link.hostname, page.hostname
    except ValueError:
        log.debug("Unparsable link %r on %s", href, page_url)
        return None

    if not link_host or link_host != page_host:
        return None

    scope = base_path(page.path or "/")
    link_path = _strip_slash(link.path or "/")
    if link_path != scope and not link_path.startswith(scope + "/"):
        return None
    return absolute


def is_eligible(page_url: str, href: Optional[str]) -> bool:
    """True when *href*, found on *page_url*, is a legal crawl target."""
    return resolve_link(page_url, href) is not None
