# tests/conftest.py
import pytest

from parser.model import PageContent


def html_page(body: str, title: str = "Test page") -> str:
    return f"<!doctype html><html><head><title>{title}</title></head><body>{body}</body></html>"


@pytest.fixture
def make_html():
    """Builds a minimal HTML document around a body fragment."""
    return html_page


@pytest.fixture
def make_page():
    """Builds a PageContent directly, bypassing fetch and extraction."""
    def _make(url="https://example.com/", paragraphs=None, main_content="", title=""):
        return PageContent(url=url, title=title, main_content=main_content, paragraphs=list(paragraphs or []))
    return _make
