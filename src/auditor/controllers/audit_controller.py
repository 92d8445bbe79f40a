import logging
from collections import Counter
from typing import List, Optional

from auditor.model import AuditOutcome, AuditResult, AuditSummary, ContentStats, Violation
from auditor.rules.engine import AuditEngine
from copyaudit.core.managers.config_manager import config_manager
from parser.model import PageContent

logger = logging.getLogger(__name__)


class AuditController:
    """
    Runs the rule engine over a set of extracted pages and aggregates the
    findings into the capped, severity-ranked AuditResult.

    Also decides whether the pages held enough server-rendered copy for the
    result to mean anything (the content-sparseness check).
    """

    def __init__(self, engine: Optional[AuditEngine] = None):
        self.engine = engine or AuditEngine()

        self.max_display_violations = int(config_manager.get_nested("audit.max_display_violations", 10))
        self.max_top_issues = int(config_manager.get_nested("audit.max_top_issues", 3))
        self.sparse_paragraph_threshold = int(config_manager.get_nested("audit.sparse_paragraph_threshold", 5))
        self.sparse_content_threshold = int(config_manager.get_nested("audit.sparse_content_threshold", 1000))

    def audit(self, pages: List[PageContent]) -> AuditOutcome:
        """Audits the pages (homepage first) and classifies the run."""
        violations = self.engine.run(pages)
        result = self.build_result(pages, violations)
        stats = self.content_stats(pages)
        is_sparse = self.is_content_sparse(stats)

        logger.debug(
            "Audit details: pages=%d paragraphs=%d content_length=%d violations=%d top=%s",
            len(pages), stats.total_paragraphs, stats.total_content_length,
            result.summary.total_violations, [t.value for t in result.summary.top_issues]
        )
        if violations:
            breakdown = Counter((v.type.value, v.severity.value) for v in violations)
            logger.debug("Violation breakdown: %s", dict(breakdown))

        return AuditOutcome(result=result, stats=stats, is_sparse=is_sparse)

    def build_result(self, pages: List[PageContent], violations: List[Violation]) -> AuditResult:
        # sorted() is stable: equal severities keep discovery order
        ranked = sorted(violations, key=lambda v: v.severity.rank, reverse=True)

        top_issues = []
        for violation in ranked:
            if violation.type not in top_issues:
                top_issues.append(violation.type)
            if len(top_issues) >= self.max_top_issues:
                break

        return AuditResult(
            violations=ranked[:self.max_display_violations],
            summary=AuditSummary(
                total_violations=len(ranked),
                pages_crawled=len(pages),
                top_issues=top_issues,
            ),
        )

    @staticmethod
    def content_stats(pages: List[PageContent]) -> ContentStats:
        return ContentStats(
            total_paragraphs=sum(len(p.paragraphs) for p in pages),
            total_content_length=sum(len(p.main_content) for p in pages),
        )

    def is_content_sparse(self, stats: ContentStats) -> bool:
        """
        True when both paragraph count and main-content length fall below
        their thresholds, i.e. the copy was most likely rendered client-side.
        """
        return (
            stats.total_paragraphs < self.sparse_paragraph_threshold
            and stats.total_content_length < self.sparse_content_threshold
        )
