"""Update-date extraction and statement staleness.

Dates are only trusted when they appear next to a keyword telling what
happened at that date (assessment, statement, review, update). Each match
becomes a weighted :class:`DateCandidate`; one of them decides how old the
statement is.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Dict, List, Optional, Pattern, Sequence, Tuple, Union

from .config import DATE_SELECTION_HIGHEST, DATE_SELECTION_LOWEST
from .logging_config import get_logger
from .models import DateCandidate, Issue, KnowledgeRecord, Severity
from .parser_utils import get_sentence, get_word

logger = get_logger("dates")

TRIGGER_STEMS: Tuple[str, ...] = ("bedömning", "redogörelse", "gransk", "uppdater")

# First matching keyword wins, so the order is the priority order.
KEYWORD_WEIGHTS: Tuple[Tuple[str, float], ...] = (
    ("bedömning", 1.0),
    ("redogörelse", 0.9),
    ("gransk", 0.7),
    ("uppdater", 0.5),
)
BASE_WEIGHT = 0.3
MISSING_DAY_WEIGHT = 0.1

MONTH_PREFIXES: Dict[str, int] = {
    "jan": 1,
    "feb": 2,
    "mar": 3,
    "apr": 4,
    "maj": 5,
    "jun": 6,
    "jul": 7,
    "aug": 8,
    "sep": 9,
    "sept": 9,
    "okt": 10,
    "nov": 11,
    "dec": 12,
}

DAYS_PER_YEAR = 365
MAX_AGE_YEARS = 5

_STEMS = "|".join(TRIGGER_STEMS)
_TRIGGER = rf"(?P<trigger>(?P<typ>{_STEMS})[a-zåäö]*)"
_MONTH_NAME = (
    r"(?P<month>jan(?:uari)?|feb(?:ruari)?|mar(?:s)?|apr(?:il)?|maj|jun(?:i)?|jul(?:i)?"
    r"|aug(?:usti)?|sep(?:t(?:ember)?)?|okt(?:ober)?|nov(?:ember)?|dec(?:ember)?)\.?"
)
_NAMED_DATE = rf"(?:(?P<day>[0-3]?[0-9])(?::e)? )?{_MONTH_NAME} (?P<year>20[0-9]{{2}})"
_ISO_DATE = r"(?P<year>20[0-9]{2})-(?P<month>[01]?[0-9])-(?P<day>[0-3]?[0-9])"

# Only filler words between keyword and date
_ADJACENT_GAP = r"[\s:,]+(?:(?:den|per|på|senast|till)\s+)?"
# Anything up to 80 characters within the sentence, but never another keyword
_SENTENCE_GAP = rf"[\s:,](?:(?!{_STEMS})[^.]){{0,80}}?"


def _build_patterns() -> List[Pattern[str]]:
    patterns = []
    for date_pattern in (_NAMED_DATE, _ISO_DATE):
        for gap in (_ADJACENT_GAP, _SENTENCE_GAP):
            patterns.append(rf"{_TRIGGER}{gap}\b{date_pattern}\b")
            patterns.append(rf"\b{date_pattern}{gap}{_TRIGGER}")
    return [re.compile(pattern, re.IGNORECASE) for pattern in patterns]


DATE_PATTERNS: Sequence[Pattern[str]] = _build_patterns()

DateLike = Union[date, datetime]


def parse_month(value: str) -> Optional[int]:
    """Map a Swedish month name or number to 1-12."""
    token = value.strip().rstrip(".").lower()
    if token.isdigit():
        month = int(token)
        return month if 1 <= month <= 12 else None
    return MONTH_PREFIXES.get(token[:4]) or MONTH_PREFIXES.get(token[:3])


def get_keyword_weight(typ: str) -> float:
    for keyword, weight in KEYWORD_WEIGHTS:
        if keyword in typ:
            return weight
    return BASE_WEIGHT


def _candidate_from_match(match: re.Match, text: str) -> Optional[DateCandidate]:
    typ = match.group("typ").lower()
    month = parse_month(match.group("month"))
    if month is None:
        return None

    weight = get_keyword_weight(typ)
    day_text = match.group("day")
    if day_text:
        day = int(day_text)
    else:
        day = 1
        weight = MISSING_DAY_WEIGHT

    try:
        found = date(int(match.group("year")), month, day)
    except ValueError:
        logger.debug(f"Ignoring impossible date in '{match.group(0)}'")
        return None

    return DateCandidate(
        word=get_word(typ, text, match.start("typ")),
        sentence=get_sentence(match.group(0), text),
        type=typ,
        date=found,
        weight=weight,
    )


def extract_dates(text: str) -> List[DateCandidate]:
    """Return unique date candidates, highest weight first."""
    unique: Dict[DateCandidate, None] = {}
    for pattern in DATE_PATTERNS:
        for match in pattern.finditer(text):
            candidate = _candidate_from_match(match, text)
            if candidate is not None:
                unique.setdefault(candidate, None)
    return sorted(unique, key=lambda candidate: candidate.weight, reverse=True)


def select_date(
    candidates: Sequence[DateCandidate], policy: str = DATE_SELECTION_HIGHEST
) -> Optional[DateCandidate]:
    """Pick the candidate that decides the statement age.

    ``candidates`` must be sorted by weight, highest first. The ``lowest``
    policy keeps the historical behaviour of trusting the last candidate.
    """
    if not candidates:
        return None
    if policy == DATE_SELECTION_LOWEST:
        return candidates[-1]
    return candidates[0]


def get_age_in_years(found: date, now: DateLike) -> int:
    """Whole 365-day years between ``found`` and ``now``."""
    today = now.date() if isinstance(now, datetime) else now
    return (today - found).days // DAYS_PER_YEAR


def check_age(url: str, candidate: DateCandidate, now: DateLike) -> List[Issue]:
    years = get_age_in_years(candidate.date, now)
    if years < 1:
        return []

    years = min(years, MAX_AGE_YEARS)
    severity = Severity.WARNING if years == 1 else Severity.ERROR
    return [
        Issue(
            url=url,
            rule=f"updated-date-older-than-{years}years",
            severity=severity,
            text=f"Accessibility statement was last updated more than {years} year(s) ago",
            data={"date": candidate.date.isoformat(), "sentence": candidate.sentence},
        )
    ]


def check_updated_date(
    url: str,
    text: str,
    record: KnowledgeRecord,
    now: DateLike,
    policy: str = DATE_SELECTION_HIGHEST,
) -> List[Issue]:
    """Extract update dates and report how stale the statement is."""
    candidates = extract_dates(text)
    record.dates = candidates

    selected = select_date(candidates, policy)
    if selected is None:
        return [
            Issue(
                url=url,
                rule="no-updated-date",
                severity=Severity.ERROR,
                text="No date telling when the statement was last updated or reviewed",
            )
        ]
    return check_age(url, selected, now)
