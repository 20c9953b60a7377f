"""Heuristic detectors for the facts an accessibility statement must contain.

Each ``check_*`` function records what it found on the given
:class:`KnowledgeRecord` and returns the issues the finding (or its absence)
implies. Detectors are independent and never raise on a missing match.
"""

from __future__ import annotations

import re
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .models import Issue, KnowledgeRecord, Severity
from .parser_utils import get_sentence

NOTIFICATION_URL_SHORT = "https://www.digg.se/tdosanmalan"
NOTIFICATION_URL_CANONICAL = (
    "https://www.digg.se/analys-och-uppfoljning/"
    "lagen-om-tillganglighet-till-digital-offentlig-service-dos-lagen/"
    "anmal-bristande-tillganglighet"
)

COMPATIBLE_RE = re.compile(r"(?P<level>helt|delvis|inte) förenlig", re.IGNORECASE)

OLD_NOTIFICATION_RE = re.compile(
    r"^https?://([a-z0-9\-]+\.)*digg\.se/([^?#]*/)?anmal-bristande-tillganglighet",
    re.IGNORECASE,
)

UNREASONABLY_BURDENSOME_RE = re.compile(
    r"12\s?§[^.]{0,20}?lagen|oskäligt betungande anpassning",
    re.IGNORECASE,
)

EVALUATION_METHOD_PATTERNS: Tuple[str, ...] = (
    r"självskattning",
    r"självutvärdering",
    r"egen granskning",
    r"egen utvärdering",
    r"intern(?:a)? (?:kontroll|granskning|test(?:ning|er)?)",
    r"tester(?:na)? (?:har )?genomförts internt",
    r"tredje part",
    r"oberoende (?:granskning|granskare|part)",
    r"extern(?:a)? (?:granskning|granskare|konsult(?:er)?|part)",
    r"tillgänglighetskonsult(?:er)?",
    r"konsult(?:er|företag)?",
    r"funka",
    r"axess lab",
    r"siteimprove",
    r"webperf",
    r"wave",
    r"axe(?: devtools| core)?",
    r"lighthouse",
    r"pa11y",
    r"checklist(?:a|or)",
    r"intervju(?:er)?",
    r"automatiserad(?:e)? (?:test(?:er)?|granskning|verktyg)",
    r"automatiska (?:test(?:er)?|verktyg)",
    r"maskinell(?:a)? (?:test(?:er)?|granskning)",
    r"manuell(?:a)? (?:test(?:er)?|granskning)",
    r"användartest(?:er)?",
    r"expertgranskning",
)

EVALUATION_METHOD_RE = re.compile(
    r"\b(?:" + "|".join(EVALUATION_METHOD_PATTERNS) + r")\b",
    re.IGNORECASE,
)


def _issue(
    url: str, rule: str, severity: str, text: str, data: Optional[Dict[str, Any]] = None
) -> Issue:
    return Issue(url=url, rule=rule, severity=severity, text=text, data=data)


def _no_compatible_word(url: str) -> Issue:
    return _issue(
        url,
        "no-compatible-word",
        Severity.ERROR,
        "No compliance wording ('helt', 'delvis' or 'inte förenlig') found",
    )


def _no_notification_function_link(url: str) -> Issue:
    return _issue(
        url,
        "no-notification-function-link",
        Severity.ERROR,
        "No link to the notification function for inaccessible content",
    )


def check_compatible_text(
    url: str, text: str, record: KnowledgeRecord, *, report_missing: bool = True
) -> List[Issue]:
    """Find the statement's compliance wording.

    Wording already recorded from an earlier document of the page is kept.
    """
    if record.compatible_word is not None:
        return []

    match = COMPATIBLE_RE.search(text)
    if match is None:
        return [_no_compatible_word(url)] if report_missing else []

    record.compatible_word = match.group(0)
    record.compatible_sentence = get_sentence(match.group(0), text)

    level = match.group("level").lower()
    if level == "inte":
        return [
            _issue(
                url,
                "compatible-word-not",
                Severity.ERROR,
                "Website states it is not compliant with the accessibility requirements",
                {"word": record.compatible_word},
            )
        ]
    if level == "delvis":
        return [
            _issue(
                url,
                "compatible-word-partly",
                Severity.ERROR,
                "Website states it is only partially compliant with the accessibility requirements",
                {"word": record.compatible_word},
            )
        ]
    return []


def _is_url(href: str, expected: str) -> bool:
    return href == expected or href == expected + "/"


def check_notification_function(
    url: str,
    anchors: Iterable[Tuple[str, str]],
    record: KnowledgeRecord,
    *,
    report_missing: bool = True,
) -> List[Issue]:
    """Find the link to the regulator's reporting function.

    ``anchors`` is a sequence of ``(href, text)`` pairs.
    """
    issues: List[Issue] = []
    for href, anchor_text in anchors:
        if _is_url(href, NOTIFICATION_URL_SHORT):
            record.notification_function_text = anchor_text
            record.notification_function_url = href
        elif _is_url(href, NOTIFICATION_URL_CANONICAL):
            record.notification_function_text = anchor_text
            record.notification_function_url = href
            issues.append(
                _issue(
                    url,
                    "has-canonical-notification-function-link",
                    Severity.INFO,
                    "Links to the canonical notification function",
                    {"text": anchor_text, "url": href},
                )
            )
        elif OLD_NOTIFICATION_RE.match(href):
            record.notification_function_text = anchor_text
            record.notification_function_url = href
            issues.append(
                _issue(
                    url,
                    "has-old-notification-function-link",
                    Severity.WARNING,
                    "Links to an outdated address of the notification function",
                    {"text": anchor_text, "url": href},
                )
            )

    if report_missing and record.notification_function_url is None:
        issues.append(_no_notification_function_link(url))
    return issues


def check_unreasonably_burdensome_accommodation(
    url: str, text: str, record: KnowledgeRecord
) -> List[Issue]:
    """Find a claimed exemption for unreasonably burdensome accommodation."""
    if record.unreasonably_burdensome_word is not None:
        return []

    match = UNREASONABLY_BURDENSOME_RE.search(text)
    if match is None:
        return []

    record.unreasonably_burdensome_word = match.group(0)
    record.unreasonably_burdensome_sentence = get_sentence(match.group(0), text)
    return [
        _issue(
            url,
            "has-unreasonably-burdensome-accommodation",
            Severity.ERROR,
            "Website claims an exemption for unreasonably burdensome accommodation",
            {"word": record.unreasonably_burdensome_word},
        )
    ]


def check_evaluation_method(url: str, text: str, record: KnowledgeRecord) -> List[Issue]:
    """Find how the website was evaluated."""
    match = EVALUATION_METHOD_RE.search(text)
    if match is None:
        return [
            _issue(
                url,
                "no-evaluation-method",
                Severity.ERROR,
                "No evaluation method described",
            )
        ]

    record.evaluation_method_word = match.group(0)
    record.evaluation_method_sentence = get_sentence(match.group(0), text)
    return []


def check_missing_facts(url: str, record: KnowledgeRecord) -> List[Issue]:
    """Report compliance wording and notification link absent from every document."""
    issues: List[Issue] = []
    if record.compatible_word is None:
        issues.append(_no_compatible_word(url))
    if record.notification_function_url is None:
        issues.append(_no_notification_function_link(url))
    return issues
