import logging
import re
from typing import List, Optional

from bs4 import BeautifulSoup

from parser.model import HtmlInspection, HtmlSampleContent

logger = logging.getLogger(__name__)

COUNTED_ELEMENTS = ("p", "div", "span", "section", "article", "h1", "h2", "h3")

HTML_SAMPLE_LENGTH = 1000
BODY_TEXT_LENGTH = 500

_WHITESPACE_RE = re.compile(r"\s+")


class HtmlInspectionService:
    """
    Describes the markup of a page as served, before any cleanup: element
    counts, short text samples and the start of the raw HTML.
    """

    def __init__(self, page_content: Optional[str], url: str):
        self.url = url
        self.html = page_content or ""
        self.soup = BeautifulSoup(self.html.replace('\ufeff', ''), "html.parser")

    def inspect(self) -> HtmlInspection:
        inspection = HtmlInspection(
            url=self.url,
            html_length=len(self.html),
            title=self.extract_page_title(),
            element_counts={tag: len(self.soup.find_all(tag)) for tag in COUNTED_ELEMENTS},
            sample_content=HtmlSampleContent(
                paragraphs=self._texts("p", limit=3),
                divs=self._short_texts("div"),
                spans=self._short_texts("span"),
                headings=self._texts("h1, h2, h3", limit=5),
            ),
            html_sample=self.html[:HTML_SAMPLE_LENGTH],
            body_text=self.extract_body_text(),
        )
        logger.debug("Inspected %s: %s", self.url, inspection.element_counts)
        return inspection

    def extract_page_title(self) -> str:
        el = self.soup.find("title")
        return el.get_text() if el else ""

    def extract_body_text(self) -> str:
        body = self.soup.body
        if body is None:
            return ""
        return _WHITESPACE_RE.sub(" ", body.get_text()).strip()[:BODY_TEXT_LENGTH]

    def _texts(self, selector: str, limit: int) -> List[str]:
        return [el.get_text().strip() for el in self.soup.select(selector, limit=limit)]

    def _short_texts(self, selector: str, limit: int = 5) -> List[str]:
        """Texts of the first `limit` matches, keeping only those that read like a line of copy."""
        return [text for text in self._texts(selector, limit) if 20 < len(text) < 200]
