"""Decide whether a page is the website's accessibility statement.

A page only qualifies when it already carries at least one statement fact
(compliance wording, notification link or burdensome accommodation claim)
and its heading, or failing that its title, names it a
"tillgänglighetsredogörelse".
"""

from __future__ import annotations

import re
from typing import Optional

from .models import KnowledgeRecord
from .parser_utils import strip_soft_hyphens

STATEMENT_PATTERN = r"tillg(?:ä|&auml;|&#228;|.{1,6})nglighetsredog(?:ö|&ouml;|&#246;|.{1,6})relse"


class StatementClassifier:
    """Classifies pages as the accessibility statement or not."""

    def __init__(self, pattern: str = STATEMENT_PATTERN) -> None:
        self._statement_re = re.compile(pattern, re.IGNORECASE)

    @staticmethod
    def is_eligible(record: KnowledgeRecord) -> bool:
        return bool(
            record.compatible_word
            or record.notification_function_url
            or record.unreasonably_burdensome_word
        )

    def names_statement(self, value: Optional[str]) -> bool:
        if not value:
            return False
        return self._statement_re.search(strip_soft_hyphens(value).strip()) is not None

    def classify(
        self,
        record: KnowledgeRecord,
        *,
        heading: Optional[str],
        title: Optional[str],
    ) -> bool:
        """Record heading and title, then classify the page.

        Returns True when the page is the accessibility statement. The result
        is also stored on ``record.is_a11y_statement``.
        """
        record.h1 = strip_soft_hyphens(heading).strip() if heading is not None else None
        record.title = strip_soft_hyphens(title).strip() if title is not None else None

        if not self.is_eligible(record):
            return False

        if self.names_statement(record.h1) or self.names_statement(record.title):
            record.is_a11y_statement = True
        return record.is_a11y_statement
