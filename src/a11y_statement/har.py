"""Reduce captured HAR sessions to the HTML documents they contain."""

from __future__ import annotations

from typing import Any, Dict, Optional

from .logging_config import get_logger
from .models import HtmlEntry, SimplifiedCapture

logger = get_logger("har")


def _is_complete(response: Dict[str, Any]) -> bool:
    content = response.get("content") or {}
    if not content.get("text") or not content.get("mimeType"):
        return False
    size = content.get("size") or 0
    if size <= 0:
        return False
    return bool(response.get("status"))


def simplify_har(har_data: Optional[Dict[str, Any]], url: str) -> SimplifiedCapture:
    """Return the HTML exchanges of a HAR record in capture order.

    Exchanges without a body, MIME type, positive size or status are skipped.
    A record lacking ``entries`` raises ``KeyError``.
    """
    capture = SimplifiedCapture(url=url)
    if har_data is None:
        return capture

    if "log" in har_data:
        har_data = har_data["log"]

    index = 1
    for entry in har_data["entries"]:
        request = entry.get("request") or {}
        response = entry.get("response") or {}
        if not _is_complete(response):
            logger.debug(f"Skipping incomplete exchange for {request.get('url')}")
            continue

        content = response["content"]
        if "html" in content["mimeType"]:
            capture.htmls.append(
                HtmlEntry(url=request.get("url", ""), content=content["text"], index=index)
            )
        index += 1

    return capture
