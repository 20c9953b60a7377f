"""Per-group orchestration of page evaluations.

The :class:`HarAnalyzer` owns all crawl state through an explicit
:class:`GroupStore`. Every captured page goes through the same pipeline:
simplify the HAR, normalize each HTML body, run the detectors, classify the
page and feed its scored links to the group's frontier.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Callable, Dict, Iterator, List, Optional

from .classification import StatementClassifier
from .config import AnalyzerConfig
from .dates import check_updated_date
from .extractors import (
    check_compatible_text,
    check_evaluation_method,
    check_missing_facts,
    check_notification_function,
    check_unreasonably_burdensome_accommodation,
)
from .frontier import CrawlFrontier
from .har import simplify_har
from .links import LinkScorer, sort_by_precision
from .logging_config import get_logger
from .models import GroupState, HtmlEntry, KnowledgeRecord, PageResult, SimplifiedCapture
from .parser_utils import (
    get_body,
    get_heading_text,
    get_title_text,
    iter_anchors,
    normalize_text,
    parse_html,
)

logger = get_logger("analyzer")


class GroupStore:
    """Crawl state for every group, keyed by group identifier."""

    def __init__(self) -> None:
        self._groups: Dict[str, GroupState] = {}

    def get(self, name: str) -> Optional[GroupState]:
        return self._groups.get(name)

    def get_or_create(self, name: str) -> GroupState:
        group = self._groups.get(name)
        if group is None:
            group = GroupState(name=name)
            self._groups[name] = group
        return group

    def __contains__(self, name: object) -> bool:
        return name in self._groups

    def __iter__(self) -> Iterator[GroupState]:
        return iter(list(self._groups.values()))

    def __len__(self) -> int:
        return len(self._groups)


class HarAnalyzer:
    """Evaluates captured pages and decides where each group crawls next."""

    def __init__(
        self,
        config: Optional[AnalyzerConfig] = None,
        *,
        store: Optional[GroupStore] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.config = config or AnalyzerConfig()
        self.store = store if store is not None else GroupStore()
        self.clock = clock or self.config.now
        self.scorer = LinkScorer(min_precision=self.config.min_link_precision)
        self.classifier = StatementClassifier()
        self.frontier = CrawlFrontier(max_visits=self.config.max_visits)

    def try_set_start_url(self, url: str, group: str) -> bool:
        """Remember where a group's crawl started; the first call wins."""
        state = self.store.get_or_create(group)
        if state.start_url is not None:
            return False
        state.start_url = url
        self.frontier.mark_visited(state, url)
        logger.info(f"Group '{group}' starts at {url}")
        return True

    def analyze_data(self, url: str, har_data: Optional[Dict[str, Any]], group: str) -> PageResult:
        """Evaluate one captured page visit and fold it into the group's state."""
        state = self.store.get_or_create(group)
        self.frontier.mark_visited(state, url)

        capture = simplify_har(har_data, url)
        state.analyzed_data.append(capture)

        record = self.create_knowledge_from_data(capture, url, state)
        state.knowledge_data.append(record)

        logger.info(
            f"Analyzed {url} for group '{group}': {len(capture.htmls)} html documents, "
            f"{len(record.issues)} issues, statement={record.is_a11y_statement}"
        )
        return PageResult(url=url, analyzed_data=capture, knowledge_data=record)

    def create_knowledge_from_data(
        self, capture: SimplifiedCapture, url: str, state: GroupState
    ) -> KnowledgeRecord:
        """Evaluate every HTML document of a capture into one record.

        The first document with a body is the page itself; later documents
        (frames) only add facts and links. Missing facts are reported once,
        after all documents were seen.
        """
        record = KnowledgeRecord(url=url, group=state.name)
        texts: List[str] = []
        for entry in capture.htmls:
            text = self._evaluate_html(entry, url, record, state, primary=not texts)
            if text is not None:
                texts.append(text)

        if not texts:
            return record

        record.add_issues(check_missing_facts(url, record))
        if record.is_a11y_statement:
            full_text = " ".join(text for text in texts if text)
            record.add_issues(
                check_updated_date(url, full_text, record, self.clock(), self.config.date_selection)
            )
            record.add_issues(check_evaluation_method(url, full_text, record))
            self._mark_statement_found(state, url)
        return record

    def _evaluate_html(
        self,
        entry: HtmlEntry,
        url: str,
        record: KnowledgeRecord,
        state: GroupState,
        *,
        primary: bool,
    ) -> Optional[str]:
        if not entry.content:
            return None

        soup = parse_html(entry.content)
        body = get_body(soup)
        if body is None:
            logger.debug(f"No body in html document {entry.index} of {url}")
            return None

        text = normalize_text(body)
        anchors = list(iter_anchors(body))

        record.add_issues(check_compatible_text(url, text, record, report_missing=False))
        record.add_issues(check_notification_function(url, anchors, record, report_missing=False))
        record.add_issues(check_unreasonably_burdensome_accommodation(url, text, record))

        if primary:
            record.text = text
            heading, title = get_heading_text(soup), get_title_text(soup)
        else:
            heading, title = record.h1, record.title
        self.classifier.classify(record, heading=heading, title=title)

        links = self.scorer.score_anchors(url, anchors)
        if links:
            record.interesting_links = sort_by_precision({**record.interesting_links, **links})
            self.frontier.merge(state, links)
        return text

    def _mark_statement_found(self, state: GroupState, url: str) -> None:
        if state.has_statement:
            return
        state.has_statement = True
        state.statement_url = url
        logger.info(f"Accessibility statement for group '{state.name}' found at {url}")

    def get_next_interesting_url(self, group: str) -> Optional[str]:
        """Return the next URL to visit for ``group``, or None when done."""
        state = self.store.get(group)
        if state is None:
            return None
        return self.frontier.next_url(state)

    def peek_next_interesting_url(self, group: str) -> Optional[str]:
        """Return the URL the group would visit next, leaving the crawl state untouched."""
        state = self.store.get(group)
        if state is None:
            return None
        return self.frontier.peek(state)

    def get_summary(self) -> Dict[str, GroupState]:
        """Finish every group and return its accumulated state."""
        for state in self.store:
            self.frontier.check_not_found(state, force=True)
        return {state.name: state for state in self.store}
