import math
from typing import List

from auditor.model import Severity, Violation, ViolationType
from ..core import RuleDefinition, audit_rule, iter_sentences

MAX_WORDS = 25
HIGH_SEVERITY_WORDS = 35
# Target length used to suggest how many sentences to split into
TARGET_WORDS = 15


# --- AUDIT RULES ---

@audit_rule(types=[ViolationType.LONG_SENTENCE])
def check_long_sentences(paragraphs: List[str], page_url: str) -> List[Violation]:
    """
    Rule: Sentences should not run past 25 words.
    Anything above 35 words is reported as high severity.
    """
    results = []

    for position, sentence in iter_sentences(paragraphs):
        words = len(sentence.split())
        if words <= MAX_WORDS:
            continue

        results.append(Violation(
            type=ViolationType.LONG_SENTENCE,
            severity=Severity.HIGH if words > HIGH_SEVERITY_WORDS else Severity.MEDIUM,
            text=sentence,
            suggestion=f"Break into {math.ceil(words / TARGET_WORDS)} shorter sentences.",
            page=page_url,
            position=position,
        ))

    return results


# --- RULE DEFINITION ---

DEFINITION = RuleDefinition(
    name="long_sentence",
    description="Flags sentences longer than 25 words.",
    audit_rules=[check_long_sentences]
)
