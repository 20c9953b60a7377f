"""Shared fixtures for building captured sessions."""

from datetime import datetime
from typing import Any, Dict, List, Optional

import pytest
from dateutil import tz

STATEMENT_HTML = """<!DOCTYPE html>
<html lang="sv">
<head><title>Tillgänglighetsredogörelse - Exempelkommunen</title></head>
<body>
<nav><a href="/">Start</a> <a href="/om-oss">Om oss</a></nav>
<h1>Tillgänglighetsredogörelse</h1>
<p>Exempelkommunen står bakom den här webbplatsen. Vi vill att så många som möjligt ska kunna använda webbplatsen.</p>
<p>Den här webbplatsen är delvis förenlig med lagen om tillgänglighet till digital offentlig service, på grund av de brister som beskrivs nedan.</p>
<p>Om du upplever problem kan du kontakta tillsynsmyndigheten via
<a href="https://www.digg.se/tdosanmalan">anmälningsfunktionen</a>.</p>
<p>Vi har gjort en självskattning av webbplatsen.</p>
<p>Redogörelsen uppdaterades 12 mars 2019.</p>
<script>var tracking = "förenlig";</script>
</body>
</html>
"""

HOME_HTML = """<!DOCTYPE html>
<html lang="sv">
<head><title>Exempelkommunen</title></head>
<body>
<h1>Välkommen till Exempelkommunen</h1>
<p>Här hittar du information om kommunens tjänster.</p>
<footer>
<a href="/om-oss">Om oss</a>
<a href="/tillganglighetsredogorelse">Tillgänglighetsredogörelse</a>
<a href="https://annan.se/tillganglighet">Tillgänglighet</a>
<a href="mailto:info@exempel.se">Om e-post</a>
<a href="/kontakt">Kontakt</a>
</footer>
</body>
</html>
"""


def build_entry(
    url: str,
    text: Optional[str],
    *,
    mime_type: str = "text/html; charset=utf-8",
    size: Optional[int] = None,
    status: int = 200,
) -> Dict[str, Any]:
    content: Dict[str, Any] = {"mimeType": mime_type}
    if text is not None:
        content["text"] = text
        content["size"] = len(text) if size is None else size
    elif size is not None:
        content["size"] = size
    return {
        "request": {"method": "GET", "url": url},
        "response": {"status": status, "content": content},
    }


def build_har(url: str, html: str, extra_entries: Optional[List[Dict[str, Any]]] = None) -> Dict[str, Any]:
    entries = [build_entry(url, html)]
    entries.extend(extra_entries or [])
    return {
        "log": {
            "version": "1.2",
            "pages": [{"id": "page_1", "title": url}],
            "entries": entries,
        }
    }


@pytest.fixture
def make_har():
    """Factory building a HAR record around one HTML document."""
    return build_har


@pytest.fixture
def make_entry():
    return build_entry


@pytest.fixture
def statement_html():
    return STATEMENT_HTML


@pytest.fixture
def home_html():
    return HOME_HTML


@pytest.fixture
def fixed_now():
    return datetime(2024, 1, 1, 12, 0, tzinfo=tz.gettz("Europe/Stockholm"))
