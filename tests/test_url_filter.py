# File: tests/test_url_filter.py
import pytest

from web_spider.crawler.url_filter import base_path, is_eligible, resolve_link


@pytest.mark.parametrize(
    "page_path,expected",
    [
        ("/fhir/R4/", "/fhir/R4"),
        ("/fhir/R4", "/fhir/R4"),
        ("/a/b/index.html", "/a/b"),
        ("/a/b.HTM", "/a"),
        ("/", ""),
    ],
)
def test_base_path(page_path, expected):
    assert base_path(page_path) == expected


def test_link_inside_document_directory_is_eligible():
    assert is_eligible("https://h/a/b.html", "c") is True
    assert resolve_link("https://h/a/b.html", "c") == "https://h/a/c"


def test_relative_link_below_index_page_is_eligible():
    assert resolve_link("https://h/a/b/index.html", "c/d.html") == "https://h/a/b/c/d.html"


def test_parent_directory_link_leaves_scope():
    # /a/b/index.html scopes the crawl to /a/b, so ../c (-> /a/c) is outside it
    assert is_eligible("https://h/a/b/index.html", "../c") is False


def test_cross_host_link_rejected():
    assert is_eligible("https://h/a/b.html", "https://other/x") is False


def test_sibling_path_is_not_a_sub_path():
    assert is_eligible("https://h/fhir/R4/x.html", "https://h/fhir/R4B/y") is False


def test_link_equal_to_base_path_is_eligible():
    assert is_eligible("https://h/fhir/R4/index.html", "./") is True
    assert is_eligible("https://h/fhir/R4/index.html", "https://h/fhir/R4") is True


def test_root_seed_allows_whole_host():
    assert resolve_link("https://h/", "/docs/intro") == "https://h/docs/intro"


def test_host_comparison_ignores_case():
    assert is_eligible("https://Docs.Example.com/a/", "https://docs.example.com/a/x") is True


def test_query_and_fragment_are_kept():
    assert resolve_link("https://h/a/", "x?y=1#z") == "https://h/a/x?y=1#z"


@pytest.mark.parametrize(
    "href",
    [
        None,
        "",
        "   ",
        "/",
        "#section",
        "javascript:void(0)",
        "JavaScript:alert(1)",
        "mailto:team@h",
        "[% link %]",
        "page%]",
        "{{ url }}",
        "}}",
        "${base}/x",
    ],
)
def test_unusable_hrefs_rejected(href):
    assert is_eligible("https://h/a/", href) is False


def test_unparsable_link_rejected():
    assert is_eligible("https://h/a/", "http://[::1/broken") is False
