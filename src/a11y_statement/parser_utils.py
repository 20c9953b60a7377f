"""Parsing utilities shared by the extractors and the link scorer.

DOM access lives here so the detectors can work on plain strings and
``(href, text)`` anchor pairs.
"""

from __future__ import annotations

import copy
import re
from typing import Iterator, Optional, Sequence, Tuple

from bs4 import BeautifulSoup
from bs4.element import Tag

SOFT_HYPHEN = "\u00ad"

STRIPPED_TAGS: Sequence[str] = (
    "script",
    "nav",
    "form",
    "input",
    "button",
    "a",
)

SENTENCE_MAX_LENGTH = 200
SENTENCE_PADDING = 100
WORD_PADDING = 10
ELLIPSIS = "..."

_LINE_BREAKS_RE = re.compile(r"[\r\n\t]+")
_MULTI_SPACE_RE = re.compile(r" {2,}")
_CAPITAL_RE = re.compile(r"[A-ZÅÄÖÉÜ]")


def parse_html(html: Optional[str]) -> BeautifulSoup:
    """Parse an HTML document with lxml."""
    return BeautifulSoup(html or "", "lxml")


def get_body(soup: BeautifulSoup) -> Optional[Tag]:
    return soup.body


def strip_soft_hyphens(value: Optional[str]) -> str:
    if not value:
        return ""
    return value.replace(SOFT_HYPHEN, "")


def normalize_text(body: Tag) -> str:
    """Return the canonical plain text of a document body.

    Navigation, forms, buttons, links and scripts are dropped before the text
    is joined. The given tag is left untouched.
    """
    body_copy = copy.copy(body)
    for tag in body_copy.find_all(list(STRIPPED_TAGS)):
        tag.extract()

    text = body_copy.get_text()
    text = _LINE_BREAKS_RE.sub(" ", text)
    text = _MULTI_SPACE_RE.sub(" ", text)
    text = strip_soft_hyphens(text)
    return text.strip()


def iter_anchors(body: Tag) -> Iterator[Tuple[str, str]]:
    """Yield ``(href, text)`` for every anchor with an href attribute."""
    for anchor in body.find_all("a", href=True):
        href = anchor.get("href")
        if not isinstance(href, str):
            continue
        yield href, strip_soft_hyphens(anchor.get_text()).strip()


def _tag_text(tag: Optional[Tag]) -> Optional[str]:
    if tag is None:
        return None
    return strip_soft_hyphens(tag.get_text()).strip()


def get_heading_text(soup: BeautifulSoup) -> Optional[str]:
    """Return the text of the first ``h1``, if any."""
    return _tag_text(soup.find("h1"))


def get_title_text(soup: BeautifulSoup) -> Optional[str]:
    return _tag_text(soup.find("title"))


def _window(text: str, start: int, end: int, lower: int, upper: int) -> str:
    snippet = text[start:end].strip()
    if start > lower:
        snippet = ELLIPSIS + snippet
    if end < upper:
        snippet = snippet + ELLIPSIS
    return snippet


def get_sentence(match_text: str, text: str) -> str:
    """Return the sentence of ``text`` containing ``match_text``.

    The sentence starts at the first capital letter after the preceding
    period and ends at the next period. Sentences longer than 200 characters
    are cut to 100 characters on each side of the match.
    """
    index = text.lower().find(match_text.lower())
    if index == -1:
        return match_text
    match_end = index + len(match_text)

    period = text.find(".", match_end)
    if period == -1:
        return match_text
    end = period + 1

    previous_period = text.rfind(".", 0, index)
    capital = _CAPITAL_RE.search(text, previous_period + 1, index + 1)
    if capital is not None:
        start = capital.start()
    elif previous_period != -1:
        start = previous_period + 1
    else:
        return match_text

    sentence = text[start:end].strip()
    if len(sentence) <= SENTENCE_MAX_LENGTH:
        return sentence

    window_start = max(start, index - SENTENCE_PADDING)
    window_end = min(end, match_end + SENTENCE_PADDING)
    return _window(text, window_start, window_end, start, end)


def get_word(match_text: str, text: str, start: Optional[int] = None) -> str:
    """Return the word of ``text`` containing ``match_text``, as written.

    ``start`` is the position of the match in ``text``; without it the first
    occurrence is used. Only 10 characters on each side of the match are
    considered, so ``get_word("uppdater", "Texten uppdaterades 2020")`` gives
    ``"uppdaterades"``.
    """
    index = text.lower().find(match_text.lower()) if start is None else start
    if index == -1:
        return match_text

    match_end = index + len(match_text)
    window_start = max(0, index - WORD_PADDING)
    window_end = min(len(text), match_end + WORD_PADDING)
    prefix = re.search(r"\w*$", text[window_start:index]).group(0)
    suffix = re.match(r"\w*", text[match_end:window_end]).group(0)
    return prefix + text[index:match_end] + suffix
