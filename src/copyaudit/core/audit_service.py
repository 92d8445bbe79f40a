# src/copyaudit/core/audit_service.py
import asyncio
import logging
from typing import Any, Dict, Optional, Tuple

from auditor.controllers.audit_controller import AuditController
from auditor.model import AuditResponse, SparseContentDetails
from crawler.controllers.site_crawl_controller import SiteCrawlController
from crawler.model import HomepageFetchError
from crawler.utils.url_utils import UrlUtils
from parser.services.html_inspection_service import HtmlInspectionService

logger = logging.getLogger(__name__)

SPARSE_MESSAGE = (
    "This appears to be a JavaScript application that loads content dynamically. "
    "Our crawler can only analyze server-side HTML content."
)
SPARSE_SUGGESTION = (
    "Try auditing a traditional website with server-side content, "
    "or check individual pages that might have static content."
)

HTTP_OK = 200
HTTP_BAD_REQUEST = 400
HTTP_SERVER_ERROR = 500
HTTP_BAD_GATEWAY = 502


class AuditService:
    """
    The 'audit a site' operation: validate, crawl, audit, respond.

    Every outcome is returned as an (AuditResponse, http_status) pair so the
    HTTP layer and the CLI render the same thing. Each call is independent;
    the service holds collaborators, never results.
    """

    def __init__(
            self,
            crawl_controller: Optional[SiteCrawlController] = None,
            audit_controller: Optional[AuditController] = None,
    ):
        self.crawl_controller = crawl_controller or SiteCrawlController()
        self.audit_controller = audit_controller or AuditController()

    def audit_site(self, raw_url: Optional[str]) -> Tuple[AuditResponse, int]:
        """Synchronous entry point; drives the async pipeline on a fresh event loop."""
        return asyncio.run(self.audit_site_async(raw_url))

    async def audit_site_async(self, raw_url: Optional[str]) -> Tuple[AuditResponse, int]:
        logger.info("Received audit website request")

        if raw_url is None or not str(raw_url).strip():
            return AuditResponse(success=False, message="URL is required"), HTTP_BAD_REQUEST

        validation = UrlUtils.validate_url(str(raw_url))
        if not validation.is_valid:
            logger.info("Rejected URL %r: %s", raw_url, validation.error)
            return AuditResponse(success=False, message="Invalid URL provided"), HTTP_BAD_REQUEST

        url = validation.url
        try:
            pages = await self.crawl_controller.crawl(url)
            outcome = self.audit_controller.audit(pages)
        except HomepageFetchError as e:
            logger.warning("Homepage fetch failed for %s: %s", url, e.reason)
            return AuditResponse(success=False, message=f"Failed to fetch website: {e.reason}"), HTTP_BAD_GATEWAY
        except Exception as e:
            logger.error("Error in audit website pipeline for %s: %s", url, e, exc_info=True)
            return AuditResponse(success=False, message="Failed to audit website"), HTTP_SERVER_ERROR

        if outcome.is_sparse:
            logger.info(
                "Detected minimal content - likely JavaScript app: %s (paragraphs=%d, content_length=%d)",
                url, outcome.stats.total_paragraphs, outcome.stats.total_content_length
            )
            return AuditResponse(
                success=False,
                message=SPARSE_MESSAGE,
                details=SparseContentDetails(
                    suggestion=SPARSE_SUGGESTION,
                    pages_scanned=outcome.pages_crawled,
                    content_found=outcome.stats.describe(),
                ),
            ), HTTP_OK

        summary = outcome.result.summary
        logger.info("Successfully audited website %s: %d violation(s)", url, summary.total_violations)
        return AuditResponse(
            success=True,
            message=f"Found {summary.total_violations} writing issues across {summary.pages_crawled} pages",
            audit=outcome.result,
        ), HTTP_OK

    def inspect_html(self, raw_url: Optional[str]) -> Tuple[Dict[str, Any], int]:
        """Synchronous entry point for the markup diagnostic."""
        return asyncio.run(self.inspect_html_async(raw_url))

    async def inspect_html_async(self, raw_url: Optional[str]) -> Tuple[Dict[str, Any], int]:
        """
        Fetches one page and reports what its served HTML contains, with no
        crawling or auditing. Errors are returned as {"error": message}.
        """
        if raw_url is None or not str(raw_url).strip():
            return {"error": "URL required"}, HTTP_BAD_REQUEST

        validation = UrlUtils.validate_url(str(raw_url))
        if not validation.is_valid:
            return {"error": "Invalid URL"}, HTTP_BAD_REQUEST

        url = validation.url
        try:
            html = await self.crawl_controller.fetch_html(url)
            inspection = HtmlInspectionService(html, url).inspect()
        except HomepageFetchError as e:
            logger.warning("Debug fetch failed for %s: %s", url, e.reason)
            return {"error": f"Failed to fetch website: {e.reason}"}, HTTP_BAD_GATEWAY
        except Exception as e:
            logger.error("Error inspecting HTML for %s: %s", url, e, exc_info=True)
            return {"error": str(e) or "Unknown error"}, HTTP_SERVER_ERROR

        return inspection.to_wire(), HTTP_OK
