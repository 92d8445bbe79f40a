# src/auditor/rules/engine.py
import logging
from typing import List, Optional

from auditor.model import Violation
from parser.model import PageContent
from .core import AuditRule
from .registry import RuleRegistry

logger = logging.getLogger(__name__)


class AuditEngine:
    """
    Runs every registered copy rule over the paragraphs of each page.

    Output order is the discovery order: pages as given (homepage first),
    then rules in registration order, then each rule's own paragraph and
    sentence order.
    """

    def __init__(self, rules: Optional[List[AuditRule]] = None):
        """Uses the discovered rules unless an explicit list is given."""
        if rules is None:
            RuleRegistry.discover()
            rules = RuleRegistry.get_all_rules()
        self.rules = rules

    def run(self, pages: List[PageContent]) -> List[Violation]:
        findings: List[Violation] = []
        for page in pages:
            findings.extend(self.audit_page(page))
        return findings

    def audit_page(self, page: PageContent) -> List[Violation]:
        if not page.paragraphs:
            return []

        findings: List[Violation] = []
        for rule in self.rules:
            results = rule(page.paragraphs, page.url)
            if results:
                findings.extend(results)

        logger.debug("Audited %s: %d violation(s)", page.url, len(findings))
        return findings
