# ============================================
# file: src/parser/model.py
# ============================================
from __future__ import annotations

from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ParserSettings(BaseModel):
    min_paragraph_length: int = Field(default=20, description="Blocks must be strictly longer than this.")
    max_paragraphs: int = Field(default=10)
    max_content_length: int = Field(default=3000)


class PageContent(BaseModel):
    """
    The copy extracted from one successfully fetched page.

    `paragraphs` feeds the sentence-level audit rules; `main_content` is only
    used for coarse content-volume checks.
    """
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    url: str
    title: str = ""
    main_content: str = ""
    paragraphs: List[str] = Field(default_factory=list)


class HtmlSampleContent(BaseModel):
    paragraphs: List[str] = Field(default_factory=list)
    divs: List[str] = Field(default_factory=list)
    spans: List[str] = Field(default_factory=list)
    headings: List[str] = Field(default_factory=list)


class HtmlInspection(BaseModel):
    """
    Raw structure report for one fetched page, used to see why extraction
    found little copy (e.g. a client-rendered shell).
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    url: str
    html_length: int
    title: str = ""
    element_counts: Dict[str, int] = Field(default_factory=dict)
    sample_content: HtmlSampleContent = Field(default_factory=HtmlSampleContent)
    html_sample: str = ""
    body_text: str = ""

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
