import asyncio
import logging
from typing import List, Optional

from crawler.model import CrawlSettings, HomepageFetchError
from crawler.services.generate_default_user_agent_service import generate_default_user_agent
from crawler.services.http_request_service import HttpRequestService
from crawler.services.subpage_discovery_service import SubpageDiscoveryService
from copyaudit.core.managers.config_manager import config_manager
from parser.model import PageContent, ParserSettings
from parser.services.page_content_service import PageContentService

logger = logging.getLogger(__name__)


def load_crawl_settings() -> CrawlSettings:
    """Builds CrawlSettings from the 'session' and 'discovery' sections of settings.json."""
    return config_manager.load_model(CrawlSettings, "session", "discovery")


def load_parser_settings() -> ParserSettings:
    return config_manager.load_model(ParserSettings, "extraction")


class SiteCrawlController:
    """
    Fetches and extracts the pages of one audit run.

    1.  The homepage is fetched first; without it there is nothing to audit,
        so its failure raises HomepageFetchError.
    2.  Subpages are discovered from the homepage markup.
    3.  Up to `max_subpages` subpages are fetched and extracted concurrently.
        A failing subpage is logged and dropped; it never affects the others.

    Nothing is kept between runs: each call to `crawl` opens and closes its
    own HTTP session.
    """

    def __init__(
            self,
            settings: Optional[CrawlSettings] = None,
            parser_settings: Optional[ParserSettings] = None,
            user_agent: Optional[str] = None,
    ):
        self.settings = settings or load_crawl_settings()
        self.parser_settings = parser_settings or load_parser_settings()
        self.user_agent = user_agent or generate_default_user_agent()

    async def crawl(self, start_url: str) -> List[PageContent]:
        """
        Returns the extracted pages, homepage at index 0 and subpages in the
        order their fetches completed.
        """
        async with HttpRequestService(self.settings, self.user_agent) as http:
            homepage_html = await self._fetch_homepage(http, start_url)
            homepage = self.extract(homepage_html, start_url)
            logger.debug(
                "Homepage content sample for %s: paragraphs=%d content_length=%d first=%r",
                start_url, len(homepage.paragraphs), len(homepage.main_content),
                homepage.paragraphs[0][:100] if homepage.paragraphs else "No paragraphs found"
            )

            discovery = SubpageDiscoveryService(http, self.settings)
            subpage_urls = await discovery.discover(homepage_html, start_url)

            pages = [homepage]
            pages.extend(await self._crawl_subpages(http, subpage_urls))

        logger.info("Crawled %d page(s) for %s", len(pages), start_url)
        return pages

    async def fetch_html(self, url: str) -> str:
        """Raw homepage markup without extraction; raises HomepageFetchError like `crawl`."""
        async with HttpRequestService(self.settings, self.user_agent) as http:
            return await self._fetch_homepage(http, url)

    async def _fetch_homepage(self, http: HttpRequestService, url: str) -> str:
        result = await http.fetch_page(url, timeout=self.settings.homepage_timeout)
        if not result.ok:
            raise HomepageFetchError(url, result.status, result.error)
        return result.content

    async def _crawl_subpages(self, http: HttpRequestService, urls: List[str]) -> List[PageContent]:
        pages: List[PageContent] = []

        async def worker(url: str) -> None:
            page = await self._crawl_subpage(http, url)
            if page is not None:
                pages.append(page)

        await asyncio.gather(*(worker(url) for url in urls))
        return pages

    async def _crawl_subpage(self, http: HttpRequestService, url: str) -> Optional[PageContent]:
        try:
            result = await http.fetch_page(url, timeout=self.settings.subpage_timeout)
            if not result.ok:
                logger.debug("Failed to fetch subpage %s: status=%s error=%s", url, result.status, result.error)
                return None
            return self.extract(result.content, url)
        except Exception as e:
            # One bad subpage must never sink the run
            logger.debug("Failed to process subpage %s: %s", url, e, exc_info=True)
            return None

    def extract(self, html: str, url: str) -> PageContent:
        return PageContentService(html, url, self.parser_settings).extract()
