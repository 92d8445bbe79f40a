# src/crawler/services/subpage_discovery_service.py
import asyncio
import logging
import time
from typing import Awaitable, Callable, List, Optional, Sequence
from urllib.parse import urlparse

from bs4 import BeautifulSoup

from crawler.model import CrawlSettings
from crawler.services.http_request_service import HttpRequestService
from crawler.utils.url_utils import UrlUtils

logger = logging.getLogger(__name__)

SKIPPED_HREF_PREFIXES = ('#', 'mailto:', 'tel:', 'javascript:')

SOCIAL_DOMAINS = (
    'facebook.com', 'twitter.com', 'instagram.com', 'linkedin.com', 'youtube.com',
)

# Matched as substrings of the lower-cased path
NON_CONTENT_PATHS = (
    '/login', '/register', '/cart', '/checkout', '/search', '/contact-form',
)

COMMON_PATHS = (
    '/about', '/about-us', '/company', '/team',
    '/products', '/services', '/solutions', '/features',
    '/pricing', '/plans', '/contact', '/support',
    '/help', '/docs', '/documentation', '/blog',
    '/news', '/careers', '/jobs', '/investors',
)

DATA_LINK_ATTRIBUTES = ('data-href', 'data-url', 'data-link')

# (soup, base_url, current candidates) -> new candidates, in discovery order
DiscoveryStrategy = Callable[[BeautifulSoup, str, List[str]], Awaitable[List[str]]]


class SubpageDiscoveryService:
    """
    Finds same-origin subpages worth auditing on a homepage.

    Strategies are tried in order until enough candidates exist:
    anchor links first, then probing well-known paths, then SPA-style
    data attributes. Each strategy only sees the candidates gathered so far
    and returns what it adds, so every one of them can be tested alone.
    """

    def __init__(self, http: HttpRequestService, settings: CrawlSettings):
        self.http = http
        self.settings = settings
        self.utils = UrlUtils()
        self.strategies: List[DiscoveryStrategy] = [
            self.from_anchor_links,
            self.from_common_paths,
            self.from_data_attributes,
        ]

    async def discover(self, html: str, base_url: str) -> List[str]:
        """
        Returns a deduplicated, order-stable list of at most
        `settings.max_subpages` same-origin candidate URLs.
        """
        soup = BeautifulSoup(html or "", "html.parser")
        candidates: List[str] = []

        for index, strategy in enumerate(self.strategies):
            # The anchor scan always runs; fallbacks only when short of candidates
            if index > 0 and len(candidates) >= self.settings.target_candidates:
                break
            for url in await strategy(soup, base_url, list(candidates)):
                if url not in candidates:
                    candidates.append(url)
            logger.debug("After %s: %d candidate(s)", strategy.__name__, len(candidates))

        logger.debug(
            "Found subpage links for %s: total=%d first=%s",
            base_url, len(candidates), candidates[:5]
        )
        return candidates[:self.settings.max_subpages]

    # =========================================================================
    #  STRATEGY 1: Anchor links
    # =========================================================================
    async def from_anchor_links(self, soup: BeautifulSoup, base_url: str, candidates: List[str]) -> List[str]:
        found: List[str] = []
        for link_tag in soup.find_all('a', href=True):
            url = self._accept_anchor(link_tag['href'], base_url)
            if url and url not in candidates and url not in found:
                found.append(url)
        return found

    def _accept_anchor(self, raw_href: str, base_url: str) -> Optional[str]:
        href = (raw_href or "").strip()
        if not href or href.lower().startswith(SKIPPED_HREF_PREFIXES):
            return None

        lowered = href.lower()
        if any(domain in lowered for domain in SOCIAL_DOMAINS):
            return None

        try:
            absolute_url = self.utils.normalize_url(base_url, href)
            parsed = urlparse(absolute_url)
        except ValueError:
            return None

        if parsed.scheme not in ('http', 'https'):
            return None
        if not self.utils.is_same_origin(absolute_url, base_url):
            return None
        if self._is_non_content_path(parsed.path):
            return None
        return absolute_url

    @staticmethod
    def _is_non_content_path(path: str) -> bool:
        path = (path or "").lower()
        if path in ('', '/'):
            return True
        return any(segment in path for segment in NON_CONTENT_PATHS)

    # =========================================================================
    #  STRATEGY 2: Common-path probing
    # =========================================================================
    async def from_common_paths(
            self,
            soup: BeautifulSoup,
            base_url: str,
            candidates: List[str],
            paths: Optional[Sequence[str]] = None
    ) -> List[str]:
        """
        Probes conventional paths with HEAD requests.

        Probes run concurrently in batches but their results are consumed in
        list order, so the outcome matches a sequential scan that stops once
        `probe_stop_at` candidates exist. A total time budget caps the worst case.
        """
        paths = paths or self.settings.common_paths or COMMON_PATHS
        found: List[str] = []
        stop_at = self.settings.probe_stop_at
        batch_size = max(1, self.settings.probe_batch_size)
        deadline = time.monotonic() + self.settings.probe_budget_seconds

        urls = []
        for path in paths:
            url = self.utils.normalize_url(base_url, path)
            if url not in candidates and url not in urls:
                urls.append(url)

        for start in range(0, len(urls), batch_size):
            if len(candidates) + len(found) >= stop_at:
                break
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                logger.debug("Common-path probing budget exhausted for %s", base_url)
                break

            batch = urls[start:start + batch_size]
            timeout = min(self.settings.probe_timeout, remaining)
            results = await asyncio.gather(*(self.http.probe(url, timeout) for url in batch))

            for url, exists in zip(batch, results):
                if exists:
                    found.append(url)
                    if len(candidates) + len(found) >= stop_at:
                        break
        return found

    # =========================================================================
    #  STRATEGY 3: data-* attributes (SPA routers)
    # =========================================================================
    async def from_data_attributes(self, soup: BeautifulSoup, base_url: str, candidates: List[str]) -> List[str]:
        found: List[str] = []
        selector = ", ".join(f"[{attr}]" for attr in DATA_LINK_ATTRIBUTES)
        for element in soup.select(selector):
            value = next((element.get(attr) for attr in DATA_LINK_ATTRIBUTES if element.get(attr)), None)
            if not value or not value.startswith('/') or value.startswith('//'):
                continue
            url = self.utils.normalize_url(base_url, value)
            if not self.utils.is_same_origin(url, base_url):
                continue
            if url not in candidates and url not in found:
                found.append(url)
        return found
