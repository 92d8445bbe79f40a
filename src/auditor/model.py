from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ViolationType(str, Enum):
    LONG_SENTENCE = "long-sentence"
    PASSIVE_VOICE = "passive-voice"
    JARGON = "jargon"
    SPELLING_INCONSISTENCY = "spelling-inconsistency"


class Severity(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        """Sort weight; higher is more severe."""
        return {"high": 3, "medium": 2, "low": 1}[self.value]


class _WireModel(BaseModel):
    """Serializes with camelCase keys (by_alias) but accepts snake_case names too."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class Violation(_WireModel):
    """
    A single flagged writing issue, attributed to a page and a text fragment.
    `position` encodes paragraph_index * 100 + sentence_index.
    """
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    type: ViolationType
    severity: Severity
    text: str
    suggestion: str
    page: str
    position: int


class AuditSummary(_WireModel):
    total_violations: int
    pages_crawled: int
    top_issues: List[ViolationType] = Field(default_factory=list)


class AuditResult(_WireModel):
    violations: List[Violation] = Field(default_factory=list)
    summary: AuditSummary


class ContentStats(_WireModel):
    total_paragraphs: int
    total_content_length: int

    def describe(self) -> str:
        return f"{self.total_paragraphs} text blocks, {self.total_content_length} characters"


class AuditOutcome(BaseModel):
    """What the aggregator concluded for one run: a normal result, or too little copy to judge."""
    result: AuditResult
    stats: ContentStats
    is_sparse: bool = False

    @property
    def pages_crawled(self) -> int:
        return self.result.summary.pages_crawled


class SparseContentDetails(_WireModel):
    issue: str = "javascript_app"
    suggestion: str
    pages_scanned: int
    content_found: str


class AuditResponse(_WireModel):
    """The response body of the 'audit a site' operation."""
    success: bool
    message: str
    audit: Optional[AuditResult] = None
    details: Optional[SparseContentDetails] = None

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
