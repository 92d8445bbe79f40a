# src/crawler/services/http_request_service.py
import asyncio
import logging
import time
from typing import Optional

import aiohttp

from crawler.model import (
    CrawlSettings,
    FetchResult,
    STATUS_INTERNAL_ERROR,
    STATUS_NETWORK_ERROR,
    STATUS_NON_HTML,
)

logger = logging.getLogger(__name__)

ACCEPT_HTML = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"
HTML_CONTENT_TYPES = ("text/html", "application/xhtml+xml")


class HttpRequestService:
    """
    Central service for executing HTTP requests (GET/HEAD) for one audit run.
    Manages the aiohttp session, concurrency (semaphore), and error handling.

    Fetch failures are returned as FetchResult values and never raised, so a
    caller can decide whether a failed page is fatal or just dropped.
    """

    def __init__(self, settings: CrawlSettings, user_agent: str):
        self.settings = settings
        self.user_agent = user_agent
        self.semaphore = asyncio.Semaphore(max(1, settings.concurrency))
        self.session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self):
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def initialize(self):
        if not self.session or self.session.closed:
            default_headers = {
                'Accept': ACCEPT_HTML,
                'Accept-Encoding': 'gzip, deflate',
                'User-Agent': self.user_agent,
            }
            # No explicit total timeout: requests without their own cap use the transport default
            self.session = aiohttp.ClientSession(headers=default_headers)
            logger.debug("HttpRequestService: Session initialized.")

    async def close(self):
        if self.session and not self.session.closed:
            await self.session.close()
            logger.debug("HttpRequestService: Session closed.")

    @staticmethod
    def _request_kwargs(timeout: Optional[float]) -> dict:
        kwargs = {"allow_redirects": True}
        if timeout is not None:
            kwargs["timeout"] = aiohttp.ClientTimeout(total=timeout)
        return kwargs

    # =========================================================================
    #  GET REQUEST LOGIC (Page Fetching)
    # =========================================================================
    async def fetch_page(self, url: str, timeout: Optional[float] = None) -> FetchResult:
        """
        Fetches one page and returns its HTML body.

        Args:
            url: Absolute URL to fetch.
            timeout: Total seconds allowed for the request; None means the
                     session default.
        """
        start_time = time.perf_counter()

        if not self.session or self.session.closed:
            await self.initialize()

        try:
            async with self.semaphore:
                result = await self._execute_get(url, timeout)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.debug("Fetch failed for %s: %r", url, e)
            result = FetchResult(url=url, status=STATUS_NETWORK_ERROR, error=str(e) or type(e).__name__)
        except Exception as e:
            logger.error("Internal fetch error for %s: %s", url, e, exc_info=True)
            result = FetchResult(url=url, status=STATUS_INTERNAL_ERROR, error=str(e))

        result.elapsed_time = round(time.perf_counter() - start_time, 4)
        return result

    async def _execute_get(self, url: str, timeout: Optional[float]) -> FetchResult:
        async with self.session.get(url, **self._request_kwargs(timeout)) as response:
            status = response.status
            content_type = response.headers.get("Content-Type", "").lower()
            final_url = str(response.url)

            if not 200 <= status < 300:
                return FetchResult(
                    url=url, status=status, final_url=final_url,
                    content_type=content_type, error=f"HTTP status {status}"
                )

            # A missing Content-Type is given the benefit of the doubt
            if content_type and not any(t in content_type for t in HTML_CONTENT_TYPES):
                logger.debug("Skipping non-HTML content for %s (%s)", url, content_type)
                return FetchResult(
                    url=url, status=STATUS_NON_HTML, final_url=final_url,
                    content_type=content_type, error=f"Unsupported Content-Type: {content_type}"
                )

            content = await self._read_content(response, url, capped=timeout is not None)
            return FetchResult(
                url=url, status=status, content=content,
                final_url=final_url, content_type=content_type,
                error=None if content is not None else "Timeout reading response body"
            )

    async def _read_content(self, response, url, capped: bool = True) -> Optional[str]:
        """
        Helper to read response body text safely.
        Uncapped reads (requests made without their own timeout) are bounded
        only by the session's transport defaults.
        """
        try:
            if not capped:
                return await response.text()
            return await asyncio.wait_for(response.text(), timeout=self.settings.read_timeout)
        except asyncio.TimeoutError:
            logger.warning("Timeout reading response body for %s", url)
            return None
        except UnicodeDecodeError:
            content_bytes = await response.read()
            return content_bytes.decode('utf-8', errors='replace')

    # =========================================================================
    #  HEAD REQUEST LOGIC (Existence probes)
    # =========================================================================
    async def probe(self, url: str, timeout: Optional[float] = None) -> bool:
        """
        Lightweight existence check: True when a HEAD request (redirects
        followed) ends in a 2xx status within the timeout.
        """
        if not self.session or self.session.closed:
            await self.initialize()

        timeout = self.settings.probe_timeout if timeout is None else timeout
        try:
            async with self.semaphore:
                async with self.session.head(url, **self._request_kwargs(timeout)) as response:
                    return 200 <= response.status < 300
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.debug("Probe failed for %s: %r", url, e)
            return False
