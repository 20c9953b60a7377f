"""End-to-end crawls through the analyzer, driven like the host would."""

from a11y_statement.analyzer import HarAnalyzer
from a11y_statement.config import AnalyzerConfig
from a11y_statement.models import Severity

HOME_URL = "https://www.exempel.se/"
STATEMENT_URL = "https://www.exempel.se/tillganglighetsredogorelse"

LINK_PAGE_HTML = """<html><head><title>{title}</title></head>
<body><h1>{title}</h1><p>Inget att se här.</p>
<a href="/sida-{next}">Om sida {next}</a>
</body></html>
"""


def crawl(analyzer, group, pages, start_url):
    """Visit pages in the order the analyzer asks for, like the host loop."""
    analyzer.try_set_start_url(start_url, group)
    visited = []
    url = start_url
    while url is not None:
        visited.append(url)
        analyzer.analyze_data(url, pages[url], group)
        url = analyzer.get_next_interesting_url(group)
    return visited


def test_crawl_from_home_page_to_statement(make_har, home_html, statement_html, fixed_now):
    """A crawl should follow the best link from the home page to the statement."""
    analyzer = HarAnalyzer(clock=lambda: fixed_now)
    pages = {
        HOME_URL: make_har(HOME_URL, home_html),
        STATEMENT_URL: make_har(STATEMENT_URL, statement_html),
    }

    visited = crawl(analyzer, "exempel", pages, HOME_URL)

    assert visited == [HOME_URL, STATEMENT_URL]
    state = analyzer.get_summary()["exempel"]
    assert state.has_statement is True
    assert state.statement_url == STATEMENT_URL

    home, statement = state.knowledge_data
    assert home.interesting_links == {STATEMENT_URL: 0.55, "https://www.exempel.se/om-oss": 0.25}
    assert home.issue_rules() == ["no-compatible-word", "no-notification-function-link"]
    assert home.is_a11y_statement is False

    assert statement.is_a11y_statement is True
    assert statement.issue_rules() == ["compatible-word-partly", "updated-date-older-than-4years"]
    assert statement.notification_function_url == "https://www.digg.se/tdosanmalan"
    assert statement.evaluation_method_word == "självskattning"
    assert statement.h1 == "Tillgänglighetsredogörelse"
    assert [candidate.date.year for candidate in statement.dates] == [2019]
    assert all(
        issue.rule != "no-a11y-statement" for record in state.knowledge_data for issue in record.issues
    )


def test_crawl_stops_at_visit_budget(make_har):
    """A crawl should stop at the visit budget and report the missing statement."""
    pages = {}
    pages[HOME_URL] = make_har(HOME_URL, LINK_PAGE_HTML.format(title="Start", next=1))
    for index in range(1, 10):
        url = f"https://www.exempel.se/sida-{index}"
        pages[url] = make_har(url, LINK_PAGE_HTML.format(title=f"Sida {index}", next=index + 1))
    analyzer = HarAnalyzer(AnalyzerConfig(max_visits=3))

    visited = crawl(analyzer, "exempel", pages, HOME_URL)

    assert visited == [HOME_URL, "https://www.exempel.se/sida-1", "https://www.exempel.se/sida-2"]
    state = analyzer.get_summary()["exempel"]
    assert state.has_statement is False

    first = state.knowledge_data[0]
    not_found = [issue for issue in first.issues if issue.rule == "no-a11y-statement"]
    assert len(not_found) == 1
    assert not_found[0].severity == Severity.CRITICAL
    for record in state.knowledge_data[1:]:
        assert "no-a11y-statement" not in record.issue_rules()


def test_groups_are_isolated(make_har, home_html, statement_html, fixed_now):
    """Groups should keep separate crawl state."""
    analyzer = HarAnalyzer(clock=lambda: fixed_now)
    other = "https://www.annan.se/"

    analyzer.try_set_start_url(HOME_URL, "exempel")
    analyzer.try_set_start_url(other, "annan")
    analyzer.analyze_data(HOME_URL, make_har(HOME_URL, home_html), "exempel")
    analyzer.analyze_data(other, make_har(other, statement_html), "annan")

    assert analyzer.get_next_interesting_url("exempel") == STATEMENT_URL
    assert analyzer.get_next_interesting_url("annan") is None
    assert analyzer.get_next_interesting_url("okänd") is None

    summary = analyzer.get_summary()
    assert summary["annan"].has_statement is True
    assert summary["exempel"].has_statement is False
    assert summary["exempel"].knowledge_data[0].issue_rules()[-1] == "no-a11y-statement"


def test_first_start_url_wins():
    """The first start URL of a group should be kept."""
    analyzer = HarAnalyzer()

    assert analyzer.try_set_start_url(HOME_URL, "exempel") is True
    assert analyzer.try_set_start_url(STATEMENT_URL, "exempel") is False
    assert analyzer.store.get("exempel").start_url == HOME_URL


def test_non_html_and_empty_captures(make_har, make_entry):
    """Captures without HTML should produce empty records."""
    analyzer = HarAnalyzer()
    har = make_har(
        HOME_URL,
        "",
        [make_entry("https://www.exempel.se/style.css", "body{}", mime_type="text/css")],
    )

    result = analyzer.analyze_data(HOME_URL, har, "exempel")

    assert result.knowledge_data.issues == []
    assert result.knowledge_data.is_a11y_statement is False

    empty = analyzer.analyze_data("https://www.exempel.se/tom", None, "exempel")
    assert empty.analyzed_data.htmls == []


def test_extracted_text_has_no_markup(make_har, statement_html, fixed_now):
    """Extracted page text should contain no markup or link text."""
    analyzer = HarAnalyzer(clock=lambda: fixed_now)

    result = analyzer.analyze_data(STATEMENT_URL, make_har(STATEMENT_URL, statement_html), "exempel")

    text = result.knowledge_data.text
    assert "<" not in text and ">" not in text
    assert "tracking" not in text
    assert "anmälningsfunktionen" not in text
    assert "\n" not in text and "  " not in text
    assert text.startswith("Tillgänglighetsredogörelse")


def test_frame_documents_do_not_override_page(make_har, make_entry, statement_html, fixed_now):
    """Frame documents should not replace the page's text, heading or findings."""
    analyzer = HarAnalyzer(clock=lambda: fixed_now)
    frame = make_entry("https://video.exempel.se/embed", "<html><body><p>Video</p></body></html>")

    result = analyzer.analyze_data(STATEMENT_URL, make_har(STATEMENT_URL, statement_html, [frame]), "exempel")

    record = result.knowledge_data
    assert len(result.analyzed_data.htmls) == 2
    assert record.issue_rules() == ["compatible-word-partly", "updated-date-older-than-4years"]
    assert record.h1 == "Tillgänglighetsredogörelse"
    assert record.title == "Tillgänglighetsredogörelse - Exempelkommunen"
    assert record.text.startswith("Tillgänglighetsredogörelse")
    assert record.compatible_word == "delvis förenlig"
    assert record.is_a11y_statement is True


def test_facts_from_frame_complete_the_page(make_har, make_entry):
    """A notification link inside a frame should count for the page."""
    analyzer = HarAnalyzer()
    page = "<html><head><title>Start</title></head><body><h1>Start</h1><p>Välkommen.</p></body></html>"
    frame = make_entry(
        "https://www.exempel.se/ram",
        '<html><body><a href="https://www.digg.se/tdosanmalan">Anmäl</a></body></html>',
    )

    result = analyzer.analyze_data(HOME_URL, make_har(HOME_URL, page, [frame]), "exempel")

    record = result.knowledge_data
    assert record.issue_rules() == ["no-compatible-word"]
    assert record.notification_function_url == "https://www.digg.se/tdosanmalan"
    assert record.h1 == "Start"
    assert record.is_a11y_statement is False


def test_page_without_links_or_statement_text(make_har):
    """A bare page should report missing facts and never count as the statement."""
    analyzer = HarAnalyzer()
    page = "<html><head><title>Nyheter</title></head><body><h1>Nyheter</h1><p>Inget nytt idag.</p></body></html>"

    result = analyzer.analyze_data(HOME_URL, make_har(HOME_URL, page), "exempel")

    record = result.knowledge_data
    assert record.issue_rules() == ["no-compatible-word", "no-notification-function-link"]
    assert record.compatible_word is None
    assert record.notification_function_url is None
    assert record.unreasonably_burdensome_word is None
    assert record.is_a11y_statement is False
    assert record.interesting_links == {}
    assert analyzer.get_next_interesting_url("exempel") is None
    assert analyzer.store.get("exempel").has_statement is False
