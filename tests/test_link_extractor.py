# File: tests/test_link_extractor.py
from bs4.builder import ParserRejectedMarkup

import web_spider.crawler.link_extractor as link_extractor
from web_spider.crawler.link_extractor import extract_links

PAGE = "http://example.com/docs/index.html"


def test_links_filtered_deduplicated_in_document_order():
    html = """
    <html><body>
      <a href="b.html">B</a>
      <a href="a.html">A</a>
      <a href="b.html">B again</a>
      <a href="/outside.html">Out</a>
      <a href="http://external.com/docs/x">X</a>
      <a href="mailto:me@example.com">Mail</a>
      <a name="anchor-without-href">No href</a>
      <a href="#top">Top</a>
    </body></html>
    """
    assert extract_links(PAGE, html) == [
        "http://example.com/docs/b.html",
        "http://example.com/docs/a.html",
    ]


def test_bytes_content_accepted():
    html = b'<a href="guide/start.html">Start</a>'
    assert extract_links(PAGE, html) == ["http://example.com/docs/guide/start.html"]


def test_malformed_markup_yields_partial_or_no_links():
    assert extract_links(PAGE, "<<<a href=") == []
    assert extract_links(PAGE, '<div><a href="x.html">x</p></div') == ["http://example.com/docs/x.html"]


def test_rejected_markup_degrades_to_no_links(monkeypatch):
    def refuse(*_args, **_kwargs):
        raise ParserRejectedMarkup("cannot parse")

    monkeypatch.setattr(link_extractor, "BeautifulSoup", refuse)
    assert extract_links(PAGE, "<a href='a.html'>a</a>") == []
