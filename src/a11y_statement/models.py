"""Data models for the accessibility statement analyzer."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional, Set

ISSUE_CATEGORY = "a11y-statement"


class Severity:
    """Issue severities, from confirmatory to disqualifying."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"

    ALL = (INFO, WARNING, ERROR, CRITICAL)


@dataclass(frozen=True)
class Issue:
    """A single finding reported for a page."""

    url: str
    rule: str
    severity: str
    text: str
    category: str = ISSUE_CATEGORY
    data: Optional[Dict[str, Any]] = None

    def __post_init__(self) -> None:
        if self.severity not in Severity.ALL:
            raise ValueError(f"Unknown severity '{self.severity}'")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "url": self.url,
            "rule": self.rule,
            "category": self.category,
            "severity": self.severity,
            "text": self.text,
            "data": dict(self.data) if self.data else None,
        }


@dataclass(frozen=True)
class DateCandidate:
    """A date found near an update/review keyword in the statement text.

    Candidates are compared by value, so two matches of the same keyword,
    sentence and date collapse into one when collected in a dict or set.
    """

    word: str
    sentence: str
    type: str
    date: date
    weight: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "word": self.word,
            "sentence": self.sentence,
            "type": self.type,
            "date": [self.date.year, self.date.month, self.date.day],
            "weight": self.weight,
        }


@dataclass
class HtmlEntry:
    """HTML response body kept from a captured exchange."""

    url: str
    content: str
    index: int

    def to_dict(self) -> Dict[str, Any]:
        return {"url": self.url, "content": self.content, "index": self.index}


@dataclass
class SimplifiedCapture:
    """The HTML exchanges of one page visit, in capture order."""

    url: str
    htmls: List[HtmlEntry] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"url": self.url, "htmls": [entry.to_dict() for entry in self.htmls]}


@dataclass
class KnowledgeRecord:
    """Everything learned from evaluating one visited page."""

    url: str
    group: str
    issues: List[Issue] = field(default_factory=list)
    resolved_rules: List[str] = field(default_factory=list)
    interesting_links: Dict[str, float] = field(default_factory=dict)
    compatible_word: Optional[str] = None
    compatible_sentence: Optional[str] = None
    notification_function_text: Optional[str] = None
    notification_function_url: Optional[str] = None
    unreasonably_burdensome_word: Optional[str] = None
    unreasonably_burdensome_sentence: Optional[str] = None
    evaluation_method_word: Optional[str] = None
    evaluation_method_sentence: Optional[str] = None
    dates: List[DateCandidate] = field(default_factory=list)
    is_a11y_statement: bool = False
    h1: Optional[str] = None
    title: Optional[str] = None
    text: Optional[str] = None

    def add_issues(self, issues: List[Issue]) -> None:
        self.issues.extend(issues)

    def issue_rules(self) -> List[str]:
        """Return the rule identifiers of all issues, in emission order."""
        return [issue.rule for issue in self.issues]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "url": self.url,
            "group": self.group,
            "issues": [issue.to_dict() for issue in self.issues],
            "resolved-rules": list(self.resolved_rules),
            "interesting-links": dict(self.interesting_links),
            "compatible-word": self.compatible_word,
            "compatible-sentence": self.compatible_sentence,
            "notification-function-text": self.notification_function_text,
            "notification-function-url": self.notification_function_url,
            "unreasonably-burdensome-accommodation-word": self.unreasonably_burdensome_word,
            "unreasonably-burdensome-accommodation-sentence": self.unreasonably_burdensome_sentence,
            "evaluation-method-word": self.evaluation_method_word,
            "evaluation-method-sentence": self.evaluation_method_sentence,
            "dates": [candidate.to_dict() for candidate in self.dates],
            "is-a11y-statement": self.is_a11y_statement,
            "h1": self.h1,
            "title": self.title,
            "text": self.text,
        }


@dataclass
class PageResult:
    """Per-page result handed back to the host."""

    url: str
    analyzed_data: SimplifiedCapture
    knowledge_data: KnowledgeRecord

    def to_dict(self) -> Dict[str, Any]:
        return {
            "url": self.url,
            "analyzedData": self.analyzed_data.to_dict(),
            "knowledgeData": self.knowledge_data.to_dict(),
        }


@dataclass
class GroupState:
    """Crawl state for one site under test."""

    name: str
    start_url: Optional[str] = None
    visited_urls: Set[str] = field(default_factory=set)
    interesting_urls: Dict[str, float] = field(default_factory=dict)
    has_statement: bool = False
    statement_url: Optional[str] = None
    analyzed_data: List[SimplifiedCapture] = field(default_factory=list)
    knowledge_data: List[KnowledgeRecord] = field(default_factory=list)
    not_found_reported: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "group": self.name,
            "start-url": self.start_url,
            "visited-urls": sorted(self.visited_urls),
            "interesting-urls": dict(self.interesting_urls),
            "has-statement": self.has_statement,
            "statement-url": self.statement_url,
            "not-found-reported": self.not_found_reported,
            "analyzedData": [capture.to_dict() for capture in self.analyzed_data],
            "knowledgeData": [record.to_dict() for record in self.knowledge_data],
        }
