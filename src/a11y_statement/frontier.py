"""Bounded best-first crawl frontier, one per group."""

from __future__ import annotations

from typing import Dict, Optional

from .logging_config import get_logger
from .links import sort_by_precision
from .models import GroupState, Issue, Severity

logger = get_logger("frontier")

DEFAULT_MAX_VISITS = 15


class CrawlFrontier:
    """Hands out the most promising unvisited URL of a group, each at most once."""

    def __init__(self, max_visits: int = DEFAULT_MAX_VISITS) -> None:
        self.max_visits = max_visits

    def mark_visited(self, group: GroupState, url: str) -> None:
        group.visited_urls.add(url)
        group.interesting_urls.pop(url, None)

    def merge(self, group: GroupState, links: Dict[str, float]) -> None:
        """Merge scored links into the group's candidates, keeping them sorted."""
        merged = dict(group.interesting_urls)
        for href, precision in links.items():
            if href in group.visited_urls:
                continue
            merged[href] = precision
        group.interesting_urls = sort_by_precision(merged)

    def budget_exhausted(self, group: GroupState) -> bool:
        return len(group.visited_urls) >= self.max_visits

    def check_not_found(self, group: GroupState, *, force: bool = False) -> bool:
        """Report the missing statement on the group's first page.

        Without ``force`` the issue is only added once the visit budget is
        spent. Returns True if the issue was added by this call.
        """
        if group.has_statement or group.not_found_reported:
            return False
        if not force and not self.budget_exhausted(group):
            return False
        if not group.knowledge_data:
            return False

        first = group.knowledge_data[0]
        first.issues.append(
            Issue(
                url=first.url,
                rule="no-a11y-statement",
                severity=Severity.CRITICAL,
                text="No accessibility statement found",
                data={"visited": len(group.visited_urls)},
            )
        )
        group.not_found_reported = True
        logger.warning(
            f"No accessibility statement found for group '{group.name}' "
            f"after {len(group.visited_urls)} visited urls"
        )
        return True

    def peek(self, group: GroupState) -> Optional[str]:
        """Return the best unvisited candidate without taking it."""
        if group.has_statement:
            return None
        return next(
            (candidate for candidate in group.interesting_urls if candidate not in group.visited_urls),
            None,
        )

    def next_url(self, group: GroupState) -> Optional[str]:
        """Return the next URL to visit for ``group``, or None to stop."""
        if group.has_statement:
            return None
        if self.budget_exhausted(group):
            self.check_not_found(group)
            return None

        href = self.peek(group)
        if href is None:
            return None
        self.mark_visited(group, href)
        return href
