from __future__ import annotations

import logging
import re
from typing import List, Optional

from bs4 import BeautifulSoup

from parser.model import PageContent, ParserSettings

logger = logging.getLogger(__name__)

# Structural and decorative regions whose text is never copy
NON_CONTENT_SELECTORS = (
    "nav, footer, header, .nav, .navigation, .menu, .sidebar, "
    ".ads, .advertisement, script, style, noscript"
)
PARAGRAPH_SELECTORS = "p, h1, h2, h3, h4, h5, h6"

# Main-content fallbacks, most specific first
MAIN_CONTENT_SELECTORS = (
    "main",
    "article",
    ".content, .post-content, .entry-content",
)

_WHITESPACE_RE = re.compile(r"\s+")


class PageContentService:
    """
    Extracts auditable copy from raw HTML.
    Stateless apart from the parsed document; never raises on malformed
    markup, an unusable page simply yields empty text and no paragraphs.
    """

    def __init__(self, page_content: Optional[str], url: str, settings: Optional[ParserSettings] = None):
        self.url = url
        self.settings = settings or ParserSettings()
        # Stray BOMs confuse html.parser at the document start
        clean_html = (page_content or "").replace('\ufeff', '')
        self.soup = BeautifulSoup(clean_html, "html.parser")

    def extract(self) -> PageContent:
        title = self.extract_page_title()
        self.remove_non_content()
        paragraphs = self.extract_paragraphs()
        main_content = self.extract_main_content()

        logger.debug(
            "Extracted %s: %d paragraph(s), %d characters of main content",
            self.url, len(paragraphs), len(main_content)
        )
        return PageContent(url=self.url, title=title, main_content=main_content, paragraphs=paragraphs)

    # -------- Cleanup --------

    def remove_non_content(self) -> int:
        """Removes navigation, boilerplate, scripts and styles. Returns the number of elements dropped."""
        removed = 0
        for el in self.soup.select(NON_CONTENT_SELECTORS):
            # Nested matches may already be gone with their ancestor
            if el.decomposed:
                continue
            el.decompose()
            removed += 1
        return removed

    # -------- Extraction --------

    def extract_page_title(self) -> str:
        """Retrieves the content of the <title> tag."""
        el = self.soup.find("title")
        return el.get_text(strip=True) if el else ""

    def extract_paragraphs(self) -> List[str]:
        """Text of paragraph and heading elements, in document order, long enough to be prose."""
        paragraphs: List[str] = []
        for el in self.soup.select(PARAGRAPH_SELECTORS):
            text = el.get_text().strip()
            if len(text) > self.settings.min_paragraph_length:
                paragraphs.append(text)
                if len(paragraphs) >= self.settings.max_paragraphs:
                    break
        return paragraphs

    def extract_main_content(self) -> str:
        text = ""
        for selector in MAIN_CONTENT_SELECTORS:
            text = "".join(el.get_text() for el in self.soup.select(selector))
            if text.strip():
                break
        else:
            root = self.soup.body or self.soup
            text = root.get_text()

        text = _WHITESPACE_RE.sub(" ", text).strip()
        return text[:self.settings.max_content_length]
