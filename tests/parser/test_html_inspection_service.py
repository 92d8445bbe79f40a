# tests/parser/test_html_inspection_service.py
from parser.services.html_inspection_service import HtmlInspectionService

LONG_DIV = "This block is long enough to count as copy."


def test_counts_elements_and_samples_text(make_html):
    html = make_html(
        "<h1> Welcome </h1><h2>Plans</h2>"
        "<p> One </p><p>Two</p><p>Three</p><p>Four</p>"
        f"<div>{LONG_DIV}</div><div>tiny</div>"
        "<span>short</span><span>A span that reads like a full line.</span>"
        "<section></section><article></article>",
        title="Inspect me",
    )

    inspection = HtmlInspectionService(html, "https://example.com/").inspect()

    assert inspection.title == "Inspect me"
    assert inspection.html_length == len(html)
    assert inspection.element_counts == {
        "p": 4, "div": 2, "span": 2, "section": 1, "article": 1, "h1": 1, "h2": 1, "h3": 0,
    }
    assert inspection.sample_content.paragraphs == ["One", "Two", "Three"]
    assert inspection.sample_content.headings == ["Welcome", "Plans"]
    assert inspection.sample_content.divs == [LONG_DIV]
    assert inspection.sample_content.spans == ["A span that reads like a full line."]


def test_only_the_first_five_divs_are_sampled(make_html):
    divs = "".join(f"<div>Division number {i} has enough text.</div>" for i in range(7))

    inspection = HtmlInspectionService(make_html(divs), "https://example.com/").inspect()

    assert len(inspection.sample_content.divs) == 5
    assert inspection.sample_content.divs[0] == "Division number 0 has enough text."


def test_body_text_is_collapsed_and_truncated(make_html):
    html = make_html("<p>Hello\n\n   world </p>" + "<p>word </p>" * 200)

    inspection = HtmlInspectionService(html, "https://example.com/").inspect()

    assert inspection.body_text.startswith("Hello world word word")
    assert len(inspection.body_text) == 500
    assert inspection.html_sample == html[:1000]


def test_client_rendered_shell_reports_empty_samples():
    html = '<html><head></head><body><div id="root"></div><script>boot()</script></body></html>'

    wire = HtmlInspectionService(html, "https://spa.example.com/").inspect().to_wire()

    assert wire["title"] == ""
    assert wire["elementCounts"]["div"] == 1
    assert wire["sampleContent"] == {"paragraphs": [], "divs": [], "spans": [], "headings": []}
    assert set(wire) == {
        "url", "htmlLength", "title", "elementCounts", "sampleContent", "htmlSample", "bodyText",
    }


def test_missing_markup_is_an_empty_report():
    inspection = HtmlInspectionService(None, "https://example.com/").inspect()

    assert inspection.html_length == 0
    assert inspection.body_text == ""
    assert inspection.element_counts["p"] == 0
