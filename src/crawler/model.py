# src/crawler/model.py (Crawl Layer)
import logging
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)

# Sentinel status codes for fetches that never produced an HTTP status
STATUS_NETWORK_ERROR = -1
STATUS_INTERNAL_ERROR = -2
STATUS_NON_HTML = -10


class UrlValidation(BaseModel):
    """Outcome of normalizing and validating a user-supplied URL."""
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    is_valid: bool
    url: str
    error: Optional[str] = None


class FetchResult(BaseModel):
    """
    Outcome of a single GET. Failures are values, not exceptions:
    callers check `ok` and decide whether the failure is fatal.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    url: str
    status: int
    content: Optional[str] = None
    final_url: Optional[str] = None
    content_type: Optional[str] = None
    error: Optional[str] = None
    elapsed_time: float = 0.0

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300 and self.content is not None


class CrawlSettings(BaseModel):
    user_agent: Optional[str] = None
    concurrency: int = Field(default=10)
    homepage_timeout: Optional[float] = Field(
        default=None, description="None leaves the homepage bounded only by the session default."
    )
    subpage_timeout: float = Field(default=5.0)
    probe_timeout: float = Field(default=2.0)
    read_timeout: float = Field(default=15.0)

    target_candidates: int = Field(default=2, description="Fallback strategies run while below this count.")
    probe_stop_at: int = Field(default=5, description="Common-path probing stops at this many candidates.")
    probe_batch_size: int = Field(default=5)
    probe_budget_seconds: float = Field(default=8.0)
    max_subpages: int = Field(default=3)
    common_paths: Optional[List[str]] = Field(
        default=None, description="Overrides the built-in well-known paths probed during discovery."
    )


class HomepageFetchError(RuntimeError):
    """Raised when the homepage cannot be fetched; the audit run cannot continue."""

    def __init__(self, url: str, status: int, reason: Optional[str] = None):
        self.url = url
        self.status = status
        self.reason = reason or f"HTTP status {status}"
        super().__init__(f"Could not fetch {url}: {self.reason}")
