import re
from typing import List

from auditor.model import Severity, Violation, ViolationType
from ..core import RuleDefinition, audit_rule, iter_sentences

# Lexical heuristic: a form of "to be" followed by a word ending in -ed.
# Misses irregular participles ("was written") and flags some adjectives
# ("is interested"); changing it changes audit output.
PASSIVE_PATTERN = re.compile(r"\b(was|were|is|are|been|being)\s+\w+ed\b", re.IGNORECASE)


# --- AUDIT RULES ---

@audit_rule(types=[ViolationType.PASSIVE_VOICE])
def check_passive_voice(paragraphs: List[str], page_url: str) -> List[Violation]:
    """
    Rule: Prefer active voice.
    Emits at most one violation per sentence, however many matches it holds.
    """
    return [
        Violation(
            type=ViolationType.PASSIVE_VOICE,
            severity=Severity.MEDIUM,
            text=sentence,
            suggestion="Rewrite in active voice.",
            page=page_url,
            position=position,
        )
        for position, sentence in iter_sentences(paragraphs)
        if PASSIVE_PATTERN.search(sentence)
    ]


# --- RULE DEFINITION ---

DEFINITION = RuleDefinition(
    name="passive_voice",
    description="Flags sentences that look like passive constructions.",
    audit_rules=[check_passive_voice]
)
