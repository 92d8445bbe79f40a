# tests/auditor/test_rules.py
import pytest

from auditor.model import Severity, ViolationType
from auditor.rules.core import encode_position, split_sentences
from auditor.rules.engine import AuditEngine
from auditor.rules.modules.long_sentence import check_long_sentences
from auditor.rules.modules.passive_voice import check_passive_voice
from auditor.rules.registry import RuleRegistry
from parser.model import PageContent

URL = "https://example.com/"


def words(n: int, word: str = "word") -> str:
    return " ".join([word] * n)


def test_split_sentences_drops_fragments_and_repeated_punctuation():
    paragraph = "Hi! This sentence is long enough to keep... Ok? And this one is also long enough!!"

    assert split_sentences(paragraph) == [
        "This sentence is long enough to keep",
        "And this one is also long enough",
    ]


def test_encode_position():
    assert encode_position(0, 0) == 0
    assert encode_position(2, 3) == 203


@pytest.mark.parametrize("count, severity, parts", [
    (26, Severity.MEDIUM, 2),
    (30, Severity.MEDIUM, 2),
    (35, Severity.MEDIUM, 3),
    (36, Severity.HIGH, 3),
    (40, Severity.HIGH, 3),
])
def test_long_sentence_severity_and_suggestion(count, severity, parts):
    violations = check_long_sentences([words(count) + "."], URL)

    assert len(violations) == 1
    violation = violations[0]
    assert violation.type is ViolationType.LONG_SENTENCE
    assert violation.severity is severity
    assert violation.suggestion == f"Break into {parts} shorter sentences."
    assert violation.page == URL
    assert violation.position == 0


def test_twenty_five_words_is_not_long():
    assert check_long_sentences([words(25) + "."], URL) == []


def test_passive_voice_detected_once_per_sentence():
    paragraphs = ["The cake was baked and the table was cleaned by the staff."]

    violations = check_passive_voice(paragraphs, URL)

    assert len(violations) == 1
    assert violations[0].type is ViolationType.PASSIVE_VOICE
    assert violations[0].severity is Severity.MEDIUM
    assert violations[0].suggestion == "Rewrite in active voice."
    assert violations[0].text == "The cake was baked and the table was cleaned by the staff"


def test_passive_voice_is_case_insensitive_and_ignores_short_sentences():
    assert check_passive_voice(["It was closed."], URL) == []
    assert len(check_passive_voice(["Mistakes WERE REPORTED by the previous owners."], URL)) == 1
    assert check_passive_voice(["Our team writes every article by hand."], URL) == []


def test_positions_count_kept_sentences_only():
    paragraphs = [
        "Short one. The homepage was designed by our lead designer. "
        "Another sentence was updated by the team today!",
        "Intro text that is fine and active. The pricing was changed last spring by management.",
    ]

    violations = check_passive_voice(paragraphs, URL)

    assert [v.position for v in violations] == [0, 1, 101]


def test_forty_word_sentence_without_passive_yields_single_high_violation():
    engine = AuditEngine()
    page_paragraphs = [words(40, "copy") + "."]

    violations = engine.audit_page(PageContent(url=URL, paragraphs=page_paragraphs))

    assert len(violations) == 1
    assert violations[0].type is ViolationType.LONG_SENTENCE
    assert violations[0].severity is Severity.HIGH


def test_engine_runs_long_sentence_rule_before_passive_rule(make_page):
    sentence = "The new pricing page was redesigned " + words(30, "carefully") + "."
    pages = [
        make_page(url="https://example.com/", paragraphs=[sentence]),
        make_page(url="https://example.com/about", paragraphs=["The team was founded in a garage downtown."]),
    ]

    violations = AuditEngine().run(pages)

    assert [(v.type, v.page) for v in violations] == [
        (ViolationType.LONG_SENTENCE, "https://example.com/"),
        (ViolationType.PASSIVE_VOICE, "https://example.com/"),
        (ViolationType.PASSIVE_VOICE, "https://example.com/about"),
    ]


def test_page_without_paragraphs_yields_nothing(make_page):
    assert AuditEngine().audit_page(make_page(main_content="x" * 2000)) == []


def test_registry_discovers_rule_modules_in_name_order():
    RuleRegistry.discover()

    assert [d.name for d in RuleRegistry.get_definitions()] == ["long_sentence", "passive_voice"]
    assert RuleRegistry.get_all_rules() == [check_long_sentences, check_passive_voice]
    assert RuleRegistry.get_produced_types() == [ViolationType.LONG_SENTENCE, ViolationType.PASSIVE_VOICE]
