import re
from typing import Callable, List, Set

from auditor.model import Violation, ViolationType

# A rule is a pure function: (paragraphs, page_url) -> violations
AuditRule = Callable[[List[str], str], List[Violation]]

_SENTENCE_BREAK_RE = re.compile(r"[.!?]+")

# Sentences this short are fragments or UI labels, not prose
MIN_SENTENCE_LENGTH = 20


def audit_rule(types: List[ViolationType]):
    """
    Decorator to declare which violation types a specific audit rule emits.
    Facilitates auto-discovery by the RuleRegistry.
    """
    def decorator(func):
        func.defined_types = list(types)
        return func
    return decorator


def split_sentences(paragraph: str) -> List[str]:
    """
    Splits a paragraph on runs of sentence-terminal punctuation and keeps
    trimmed sentences longer than MIN_SENTENCE_LENGTH characters.
    """
    sentences = (s.strip() for s in _SENTENCE_BREAK_RE.split(paragraph))
    return [s for s in sentences if len(s) > MIN_SENTENCE_LENGTH]


def iter_sentences(paragraphs: List[str]):
    """Yields (position, sentence) for every auditable sentence, position = paragraph * 100 + sentence."""
    for paragraph_index, paragraph in enumerate(paragraphs):
        for sentence_index, sentence in enumerate(split_sentences(paragraph)):
            yield encode_position(paragraph_index, sentence_index), sentence


def encode_position(paragraph_index: int, sentence_index: int) -> int:
    return paragraph_index * 100 + sentence_index


class RuleDefinition:
    """
    Configuration object binding a named rule module to its rule functions.
    """

    def __init__(
            self,
            name: str,
            audit_rules: List[AuditRule],
            description: str = "",
    ):
        self.name = name
        self.description = description
        self.audit_rules = audit_rules

        # --- Auto-Discovery of Violation Types ---
        final_types: Set[ViolationType] = set()
        for rule in self.audit_rules:
            final_types.update(getattr(rule, 'defined_types', []))

        self.types = sorted(final_types, key=lambda t: t.value)
