"""Rank in-origin links by how likely they lead to the accessibility statement."""

from __future__ import annotations

import re
from typing import Dict, Iterable, List, Optional, Pattern, Tuple
from urllib.parse import urlparse

from .logging_config import get_logger

logger = get_logger("links")

_A = r"(?:ä|&auml;|&#228;|.{1,6})"
_O = r"(?:ö|&ouml;|&#246;|.{1,6})"
_WS = r"^[ \t\r\n]*"

EXCLUDED_PREFIXES: Tuple[str, ...] = ("#", "mailto:", "tel:", "javascript:", "data:")

DEFAULT_MIN_PRECISION = 0.1


def get_origin(url: str) -> str:
    """Return ``scheme://host`` for ``url``."""
    parsed = urlparse(url)
    return f"{parsed.scheme}://{parsed.hostname or ''}"


def sort_by_precision(links: Dict[str, float]) -> Dict[str, float]:
    """Return a copy of ``links`` ordered by precision, highest first."""
    return dict(sorted(links.items(), key=lambda item: item[1], reverse=True))


class LinkScorer:
    """Scores anchors by their text, most specific pattern first."""

    INTERESTING_TEXT = rf"(om [a-z]+|tillg{_A}nglighet(sredog{_O}relse)?)"

    PRECISION_RULES: List[Tuple[str, float]] = [
        (rf"{_WS}tillg{_A}nglighetsredog{_O}relse$", 0.55),
        (rf"{_WS}tillg{_A}nglighetsredog{_O}relse", 0.5),
        (rf"{_WS}tillg{_A}nglighet$", 0.4),
        (rf"{_WS}tillg{_A}nglighet", 0.35),
        (rf"tillg{_A}nglighet", 0.3),
        (r"om webbplats", 0.29),
        (rf"{_WS}om [a-z]+$", 0.25),
        (rf"{_WS}om [a-z]+", 0.2),
    ]

    def __init__(self, min_precision: float = DEFAULT_MIN_PRECISION) -> None:
        self.min_precision = min_precision
        self._interesting_re = re.compile(self.INTERESTING_TEXT, re.IGNORECASE)
        self._rules: List[Tuple[Pattern[str], float]] = [
            (re.compile(pattern, re.IGNORECASE), precision)
            for pattern, precision in self.PRECISION_RULES
        ]

    def get_text_precision(self, text: str) -> float:
        for pattern, precision in self._rules:
            if pattern.search(text):
                return precision
        return DEFAULT_MIN_PRECISION

    def normalize_href(self, href: Optional[str], origin: str) -> Optional[str]:
        """Return an absolute same-origin href, or None if it should be skipped."""
        if not href:
            return None
        if href.endswith(".pdf"):
            return None
        if href.startswith("//"):
            return None
        if href.startswith("/"):
            href = origin + href
        if href.startswith(EXCLUDED_PREFIXES):
            return None
        if not href.startswith(origin):
            return None
        # https://example.se must not accept https://example.se.other.net
        rest = href[len(origin):]
        if rest and rest[0] not in "/?#:":
            return None
        return href

    def score_anchors(self, page_url: str, anchors: Iterable[Tuple[str, str]]) -> Dict[str, float]:
        """Score ``(href, text)`` anchors found on ``page_url``.

        Returns href -> precision for links above the minimum precision,
        ordered by precision, highest first. Later anchors overwrite earlier
        ones sharing the same href.
        """
        origin = get_origin(page_url)
        urls: Dict[str, float] = {}
        for raw_href, text in anchors:
            href = self.normalize_href(raw_href, origin)
            if href is None:
                continue

            text = text.strip()
            if not self._interesting_re.search(text):
                continue

            precision = self.get_text_precision(text)
            if precision > self.min_precision:
                urls[href] = precision

        if urls:
            logger.debug(f"Found {len(urls)} interesting links on {page_url}")
        return sort_by_precision(urls)
