"""Message adapter between the host crawler and the analyzer.

The host delivers messages one at a time and expects zero or more messages
back. Three message types matter:

``url``
    A page is about to be visited; seeds the group's start URL unless the
    message was queued by this plugin.
``browsertime.har``
    A page visit was captured; answers with a page summary and, if the
    frontier has one, a ``url`` message for the next page of the same group.
``sitespeedio.summarize``
    The run is over; answers with one summary per group.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from .analyzer import HarAnalyzer
from .config import AnalyzerConfig
from .logging_config import get_logger

logger = get_logger("plugin")

Message = Dict[str, Any]


class AccessibilityStatementPlugin:
    """Routes host messages to a :class:`HarAnalyzer`."""

    def __init__(
        self,
        config: Optional[AnalyzerConfig] = None,
        analyzer: Optional[HarAnalyzer] = None,
    ) -> None:
        self.config = config or AnalyzerConfig()
        self.analyzer = analyzer or HarAnalyzer(self.config)

    @property
    def name(self) -> str:
        return self.config.plugin_name

    def make(
        self,
        message_type: str,
        data: Any = None,
        *,
        url: Optional[str] = None,
        group: Optional[str] = None,
    ) -> Message:
        return {
            "type": message_type,
            "source": self.name,
            "data": data,
            "url": url,
            "group": group,
        }

    def process_message(self, message: Message) -> List[Message]:
        """Handle one host message and return the messages to post back."""
        message_type = message.get("type")
        if message_type == "url":
            return self._on_url(message)
        if message_type == "browsertime.har":
            return self._on_har(message)
        if message_type == "sitespeedio.summarize":
            return self._on_summarize()
        return []

    def _on_url(self, message: Message) -> List[Message]:
        if message.get("source") != self.name:
            self.analyzer.try_set_start_url(message["url"], message["group"])
        return []

    def _on_har(self, message: Message) -> List[Message]:
        url = message["url"]
        group = message["group"]
        try:
            result = self.analyzer.analyze_data(url, message.get("data"), group)
        except KeyError as exc:
            logger.error(f"Malformed HAR for {url} in group '{group}': missing {exc}")
            return []

        outgoing = [
            self.make(f"{self.name}.pageSummary", result.to_dict(), url=url, group=group)
        ]
        next_url = self.analyzer.get_next_interesting_url(group)
        if next_url:
            logger.info(f"Queueing {next_url} for group '{group}'")
            outgoing.append(self.make("url", {}, url=next_url, group=group))
        return outgoing

    def _on_summarize(self) -> List[Message]:
        summary = self.analyzer.get_summary()
        return [
            self.make(f"{self.name}.summary", state.to_dict(), group=name)
            for name, state in summary.items()
        ]
