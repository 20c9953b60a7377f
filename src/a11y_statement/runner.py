"""Replay captured HAR files through the analyzer.

Useful for checking a site offline: capture the pages with any HAR-producing
browser tooling, then run ``a11y-statement page1.har page2.har ...``. Files
are grouped by host unless ``--group`` is given.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import urlparse

from .analyzer import HarAnalyzer
from .config import AnalyzerConfig
from .logging_config import setup_logging
from .models import GroupState

EXIT_OK = 0
EXIT_NOT_FOUND = 1
EXIT_INPUT_ERROR = 2


def load_har(path: Path) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as handle:
        return json.load(handle)


def get_page_url(har_data: Dict[str, Any]) -> Optional[str]:
    """Return the URL of the page a HAR file captured."""
    log = har_data.get("log", har_data)
    for page in log.get("pages") or []:
        title = page.get("title") or ""
        if title.startswith(("http://", "https://")):
            return title
    for entry in log.get("entries") or []:
        url = (entry.get("request") or {}).get("url")
        if url:
            return url
    return None


def format_group(state: GroupState) -> List[str]:
    if state.has_statement:
        lines = [f"Group {state.name}: statement found at {state.statement_url}"]
    else:
        lines = [f"Group {state.name}: statement NOT found"]
    for record in state.knowledge_data:
        for issue in record.issues:
            lines.append(f"  [{issue.severity}] {issue.rule} ({issue.url})")
    return lines


def run(
    paths: List[Path],
    analyzer: HarAnalyzer,
    *,
    group: Optional[str] = None,
    logger: Optional[logging.Logger] = None,
) -> Tuple[Dict[str, GroupState], List[str]]:
    """Analyze HAR files in order and return the group summary and input errors."""
    logger = logger or logging.getLogger(__name__)
    errors: List[str] = []

    for path in paths:
        try:
            har_data = load_har(path)
        except (OSError, ValueError) as exc:
            errors.append(f"{path}: {exc}")
            logger.error(f"Could not read {path}: {exc}")
            continue

        url = get_page_url(har_data)
        if not url:
            errors.append(f"{path}: no page url")
            logger.error(f"No page url in {path}")
            continue

        group_name = group or urlparse(url).hostname or str(path)
        analyzer.try_set_start_url(url, group_name)
        try:
            analyzer.analyze_data(url, har_data, group_name)
        except KeyError as exc:
            errors.append(f"{path}: missing {exc}")
            logger.error(f"Malformed HAR {path}: missing {exc}")
            continue

        next_url = analyzer.peek_next_interesting_url(group_name)
        if next_url:
            logger.info(f"Next page to capture for '{group_name}': {next_url}")

    return analyzer.get_summary(), errors


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point for the HAR replay runner."""
    parser = argparse.ArgumentParser(
        description="Find and check the accessibility statement in captured HAR files"
    )

    parser.add_argument(
        "har_files",
        nargs="+",
        type=Path,
        help="HAR files, in visit order",
    )

    parser.add_argument(
        "--config",
        type=Path,
        help="Path to analyzer configuration YAML (default: config/a11y_statement.yaml)",
    )

    parser.add_argument(
        "--group",
        help="Treat all files as one group with this name (default: group by host)",
    )

    parser.add_argument(
        "--now",
        help="Date to measure statement age against (YYYY-MM-DD, default: today)",
    )

    parser.add_argument(
        "--log-file",
        type=Path,
        help="Write logs to file",
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    parser.add_argument(
        "--json",
        action="store_true",
        help="Output summary as JSON",
    )

    args = parser.parse_args(argv)

    logger = setup_logging(
        log_file=args.log_file,
        level=logging.DEBUG if args.verbose else logging.INFO,
    )

    try:
        config = AnalyzerConfig.load(args.config)
        clock = None
        if args.now:
            fixed = datetime.strptime(args.now, "%Y-%m-%d").replace(tzinfo=config.get_tzinfo())
            clock = lambda: fixed  # noqa: E731
    except ValueError as exc:
        logger.error(f"Invalid configuration: {exc}")
        return EXIT_INPUT_ERROR

    analyzer = HarAnalyzer(config, clock=clock)
    summary, errors = run(args.har_files, analyzer, group=args.group, logger=logger)

    if args.json:
        print(json.dumps({name: state.to_dict() for name, state in summary.items()}, indent=2, ensure_ascii=False))
    else:
        for state in summary.values():
            for line in format_group(state):
                print(line)

    if errors:
        logger.error(f"Errors: {len(errors)}")
        return EXIT_INPUT_ERROR
    if not summary or not all(state.has_statement for state in summary.values()):
        return EXIT_NOT_FOUND
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
