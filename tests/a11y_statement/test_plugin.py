"""Tests for the host message adapter."""

import pytest

from a11y_statement.analyzer import HarAnalyzer
from a11y_statement.config import AnalyzerConfig
from a11y_statement.plugin import AccessibilityStatementPlugin

HOME_URL = "https://www.exempel.se/"
STATEMENT_URL = "https://www.exempel.se/tillganglighetsredogorelse"
PLUGIN_NAME = "webperf-plugin-accessibility-statement"


@pytest.fixture
def plugin(fixed_now):
    config = AnalyzerConfig()
    return AccessibilityStatementPlugin(config, HarAnalyzer(config, clock=lambda: fixed_now))


def url_message(url, group="exempel", source="browsertime"):
    return {"type": "url", "source": source, "url": url, "group": group, "data": {}}


def har_message(url, har, group="exempel"):
    return {"type": "browsertime.har", "source": "browsertime", "url": url, "group": group, "data": har}


def test_url_message_seeds_start_url(plugin):
    """A url message should seed the group's start URL."""
    assert plugin.process_message(url_message(HOME_URL)) == []

    state = plugin.analyzer.store.get("exempel")
    assert state.start_url == HOME_URL
    assert HOME_URL in state.visited_urls


def test_own_url_messages_do_not_reseed(plugin):
    """Url messages sent by the plugin itself should be ignored."""
    plugin.process_message(url_message(STATEMENT_URL, source=PLUGIN_NAME))

    assert "exempel" not in plugin.analyzer.store


def test_har_message_queues_next_url(plugin, make_har, home_html):
    """A HAR message should answer with a page summary and the next URL."""
    plugin.process_message(url_message(HOME_URL))

    messages = plugin.process_message(har_message(HOME_URL, make_har(HOME_URL, home_html)))

    assert [message["type"] for message in messages] == [f"{PLUGIN_NAME}.pageSummary", "url"]
    summary, follow_up = messages
    assert summary["source"] == PLUGIN_NAME
    assert summary["url"] == HOME_URL
    assert summary["group"] == "exempel"
    assert summary["data"]["knowledgeData"]["is-a11y-statement"] is False
    assert len(summary["data"]["analyzedData"]["htmls"]) == 1
    assert follow_up["url"] == STATEMENT_URL
    assert follow_up["group"] == "exempel"
    assert follow_up["source"] == PLUGIN_NAME

    # The queued message comes back through the host and must not reseed.
    assert plugin.process_message(follow_up) == []
    assert plugin.analyzer.store.get("exempel").start_url == HOME_URL


def test_statement_page_ends_crawl(plugin, make_har, home_html, statement_html):
    """The statement page should not queue another URL."""
    plugin.process_message(url_message(HOME_URL))
    plugin.process_message(har_message(HOME_URL, make_har(HOME_URL, home_html)))

    messages = plugin.process_message(har_message(STATEMENT_URL, make_har(STATEMENT_URL, statement_html)))

    assert [message["type"] for message in messages] == [f"{PLUGIN_NAME}.pageSummary"]
    knowledge = messages[0]["data"]["knowledgeData"]
    assert knowledge["is-a11y-statement"] is True
    assert [issue["rule"] for issue in knowledge["issues"]] == [
        "compatible-word-partly",
        "updated-date-older-than-4years",
    ]


def test_summarize_reports_every_group(plugin, make_har, home_html, statement_html):
    """Summarize should answer with one summary per group."""
    plugin.process_message(url_message(HOME_URL))
    plugin.process_message(har_message(HOME_URL, make_har(HOME_URL, home_html)))
    plugin.process_message(har_message(STATEMENT_URL, make_har(STATEMENT_URL, statement_html)))
    plugin.process_message(url_message("https://annan.se/", group="annan"))
    plugin.process_message(har_message("https://annan.se/", make_har("https://annan.se/", home_html), group="annan"))

    messages = plugin.process_message({"type": "sitespeedio.summarize", "source": "sitespeedio"})

    by_group = {message["group"]: message for message in messages}
    assert set(by_group) == {"exempel", "annan"}
    assert all(message["type"] == f"{PLUGIN_NAME}.summary" for message in messages)
    assert by_group["exempel"]["data"]["has-statement"] is True
    assert by_group["exempel"]["data"]["statement-url"] == STATEMENT_URL
    assert by_group["exempel"]["data"]["not-found-reported"] is False
    assert [capture["url"] for capture in by_group["exempel"]["data"]["analyzedData"]] == [HOME_URL, STATEMENT_URL]

    annan = by_group["annan"]["data"]
    assert annan["has-statement"] is False
    assert annan["not-found-reported"] is True
    first_issues = [issue["rule"] for issue in annan["knowledgeData"][0]["issues"]]
    assert first_issues.count("no-a11y-statement") == 1


def test_malformed_har_is_logged_and_skipped(plugin):
    """A HAR without entries should produce no messages."""
    plugin.process_message(url_message(HOME_URL))

    assert plugin.process_message(har_message(HOME_URL, {"log": {"pages": []}})) == []


def test_unknown_message_type_is_ignored(plugin):
    """Unknown message types should be ignored."""
    assert plugin.process_message({"type": "coach.summary", "source": "coach"}) == []
    assert len(plugin.analyzer.store) == 0


def test_name_follows_config():
    """The plugin name should come from configuration."""
    plugin = AccessibilityStatementPlugin(AnalyzerConfig(plugin_name="custom"))

    assert plugin.name == "custom"
    assert plugin.make("custom.summary", {}, group="g") == {
        "type": "custom.summary",
        "source": "custom",
        "data": {},
        "url": None,
        "group": "g",
    }
