# web_spider/crawler/link_extractor.py
"""
Link extraction for WebSpider pages.
"""
from __future__ import annotations

from typing import List, Union

from bs4 import BeautifulSoup
from bs4.builder import ParserRejectedMarkup
from bs4.element import Tag

from web_spider.crawler.url_filter import resolve_link
from web_spider.logger import get_logger

log = get_logger("links")


def extract_links(page_url: str, content: Union[str, bytes]) -> List[str]:
    """
    Return the crawlable links of a page, deduplicated, in document order.

    Every ``<a href>`` is resolved against *page_url* and passed through the
    URL filter. Markup the parser refuses yields no links instead of an error.
    """
    try:
        soup = BeautifulSoup(content, "html.parser")
    except ParserRejectedMarkup as exc:
        log.debug("Unparsable markup at %s: %s", page_url, exc)
        return []

    seen: set[str] = set()
    links: List[str] = []
    for tag in soup.find_all("a", href=True):
        if not isinstance(tag, Tag):
            continue
        href_val = tag.get("href")
        if not isinstance(href_val, str):
            continue
        absolute = resolve_link(page_url, href_val)
        if absolute is None or absolute in seen:
            continue
        seen.add(absolute)
        links.append(absolute)
    return links


__all__ = ["extract_links"]
