# tests/crawler/test_subpage_discovery.py
import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
from bs4 import BeautifulSoup

from crawler.model import CrawlSettings
from crawler.services.subpage_discovery_service import SubpageDiscoveryService, COMMON_PATHS

BASE = "https://example.com/"


def make_service(existing_urls=(), **settings):
    """A discovery service whose HEAD probes succeed only for `existing_urls`."""
    http = MagicMock()
    existing = set(existing_urls)
    http.probe = AsyncMock(side_effect=lambda url, timeout=None: url in existing)
    return SubpageDiscoveryService(http, CrawlSettings(**settings)), http


def discover(service, html, base=BASE):
    return asyncio.run(service.discover(html, base))


def test_anchor_links_are_resolved_filtered_and_deduplicated():
    html = """
        <a href="/about">About</a>
        <a href="products">Products</a>
        <a href="https://example.com/about#team">About again</a>
        <a href="#top">Top</a>
        <a href="mailto:hi@example.com">Mail</a>
        <a href="tel:+100">Call</a>
        <a href="javascript:void(0)">JS</a>
        <a href="https://www.facebook.com/example">Facebook</a>
        <a href="https://example.com/login">Login</a>
        <a href="/shop/cart">Cart</a>
        <a href="/">Home</a>
        <a href="https://other.example.com/page">Other</a>
    """
    service, http = make_service()
    soup = BeautifulSoup(html, "html.parser")

    found = asyncio.run(service.from_anchor_links(soup, BASE, []))

    assert found == ["https://example.com/about", "https://example.com/products"]
    http.probe.assert_not_called()


def test_cross_origin_links_never_discovered():
    html = '<a href="https://other.example.com/page">x</a><a href="https://example.com/a">a</a>'
    service, _ = make_service()

    result = discover(service, html)

    assert "https://other.example.com/page" not in result
    assert result[0] == "https://example.com/a"


def test_fallbacks_skipped_when_anchors_suffice():
    html = '<a href="/about">a</a><a href="/team">t</a><div data-href="/hidden"></div>'
    service, http = make_service(existing_urls=["https://example.com/pricing"])

    result = discover(service, html)

    assert result == ["https://example.com/about", "https://example.com/team"]
    http.probe.assert_not_called()


def test_result_truncated_to_three():
    html = "".join(f'<a href="/page-{i}">p</a>' for i in range(6))
    service, _ = make_service()

    result = discover(service, html)

    assert result == [f"https://example.com/page-{i}" for i in range(3)]


def test_common_path_probing_runs_with_fewer_than_two_candidates():
    existing = ["https://example.com/about", "https://example.com/pricing"]
    service, http = make_service(existing_urls=existing)

    result = discover(service, '<a href="/blog">Blog</a>')

    assert result == ["https://example.com/blog", "https://example.com/about", "https://example.com/pricing"]
    assert http.probe.await_count > 0


def test_common_path_probing_stops_at_five_candidates():
    existing = [f"https://example.com{p}" for p in COMMON_PATHS]
    service, http = make_service(existing_urls=existing, probe_batch_size=1, max_subpages=10)

    result = discover(service, "<p>No links here</p>")

    assert result == existing[:5]
    assert http.probe.await_count == 5


def test_probing_keeps_list_order_when_batched():
    existing = [f"https://example.com{p}" for p in COMMON_PATHS[3:]]
    service, _ = make_service(existing_urls=existing, probe_batch_size=20, max_subpages=10)

    soup = BeautifulSoup("", "html.parser")
    found = asyncio.run(service.from_common_paths(soup, BASE, []))

    assert found == existing[:5]


def test_probing_respects_time_budget():
    service, http = make_service(existing_urls=[f"https://example.com{p}" for p in COMMON_PATHS],
                                 probe_budget_seconds=0)
    soup = BeautifulSoup("", "html.parser")

    assert asyncio.run(service.from_common_paths(soup, BASE, [])) == []
    http.probe.assert_not_called()


def test_data_attributes_used_as_last_resort():
    html = """
        <div data-href="/features">f</div>
        <button data-url="/docs">d</button>
        <span data-link="//cdn.example.com/x">cdn</span>
        <span data-link="https://example.com/absolute">abs</span>
        <div data-href="/features">dup</div>
    """
    service, http = make_service()

    result = discover(service, html)

    assert result == ["https://example.com/features", "https://example.com/docs"]
    assert http.probe.await_count == len(COMMON_PATHS)


def test_data_attribute_precedence():
    html = '<div data-href="/first" data-url="/second"></div>'
    service, _ = make_service()
    soup = BeautifulSoup(html, "html.parser")

    assert asyncio.run(service.from_data_attributes(soup, BASE, [])) == ["https://example.com/first"]


@pytest.mark.parametrize("path, skipped", [
    ("/", True),
    ("", True),
    ("/login", True),
    ("/account/register", True),
    ("/search?q=x", True),
    ("/contact-form", True),
    ("/contact", False),
    ("/about", False),
])
def test_non_content_paths(path, skipped):
    assert SubpageDiscoveryService._is_non_content_path(path) is skipped


def test_configured_common_paths_replace_builtin_list():
    service, http = make_service(
        existing_urls=["https://example.com/story"],
        common_paths=["/story", "/about"],
    )
    soup = BeautifulSoup("", "html.parser")

    assert asyncio.run(service.from_common_paths(soup, BASE, [])) == ["https://example.com/story"]
    assert http.probe.await_count == 2


def test_spellings_of_one_page_fill_a_single_slot():
    html = """
        <a href="/about">About</a>
        <a href="https://Example.com/about">About</a>
        <a href="https://example.com:443/about">About</a>
        <a href="/team">Team</a>
    """
    service, http = make_service()

    result = discover(service, html)

    assert result == ["https://example.com/about", "https://example.com/team"]
    http.probe.assert_not_called()
