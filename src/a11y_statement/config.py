"""Configuration loader for the accessibility statement analyzer."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, tzinfo
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dateutil import tz

DATE_SELECTION_HIGHEST = "highest"
DATE_SELECTION_LOWEST = "lowest"
DATE_SELECTION_POLICIES = (DATE_SELECTION_HIGHEST, DATE_SELECTION_LOWEST)

DEFAULT_PLUGIN_NAME = "webperf-plugin-accessibility-statement"


@dataclass
class AnalyzerConfig:
    """Settings shared by the extractors, the link scorer and the frontier."""

    max_visits: int = 15
    min_link_precision: float = 0.1
    date_selection: str = DATE_SELECTION_HIGHEST
    timezone: str = "Europe/Stockholm"
    plugin_name: str = DEFAULT_PLUGIN_NAME

    DEFAULT_CONFIG_PATH = Path("config/a11y_statement.yaml")

    def __post_init__(self) -> None:
        if self.date_selection not in DATE_SELECTION_POLICIES:
            raise ValueError(
                f"Unknown date_selection '{self.date_selection}', "
                f"expected one of {', '.join(DATE_SELECTION_POLICIES)}"
            )
        if self.max_visits < 1:
            raise ValueError(f"max_visits must be positive, got {self.max_visits}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> AnalyzerConfig:
        """Build configuration from a mapping, ignoring unknown keys."""
        settings = data.get("analyzer", data) or {}
        return cls(
            max_visits=int(settings.get("max_visits", 15)),
            min_link_precision=float(settings.get("min_link_precision", 0.1)),
            date_selection=settings.get("date_selection", DATE_SELECTION_HIGHEST),
            timezone=settings.get("timezone", "Europe/Stockholm"),
            plugin_name=settings.get("plugin_name", DEFAULT_PLUGIN_NAME),
        )

    @classmethod
    def load(cls, config_path: Optional[Path | str] = None) -> AnalyzerConfig:
        """Load configuration from YAML, falling back to defaults if absent."""
        path = Path(config_path) if config_path else cls.DEFAULT_CONFIG_PATH
        if not path.is_absolute():
            path = Path.cwd() / path
        if not path.exists():
            return cls()
        with open(path, "r", encoding="utf-8") as handle:
            return cls.from_dict(yaml.safe_load(handle) or {})

    def get_tzinfo(self) -> tzinfo:
        zone = tz.gettz(self.timezone)
        if zone is None:
            raise ValueError(f"Unknown timezone '{self.timezone}'")
        return zone

    def now(self) -> datetime:
        """Return the current time in the configured timezone."""
        return datetime.now(self.get_tzinfo())
