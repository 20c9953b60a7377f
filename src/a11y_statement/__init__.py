"""Accessibility statement analyzer package namespace."""

from importlib import import_module
from typing import Any

__all__ = [
    "AnalyzerConfig",
    "HarAnalyzer",
    "GroupStore",
    "AccessibilityStatementPlugin",
    "simplify_har",
]


def __getattr__(name: str) -> Any:
    if name == "AnalyzerConfig":
        module = import_module("a11y_statement.config")
        return getattr(module, name)
    elif name in ("HarAnalyzer", "GroupStore"):
        module = import_module("a11y_statement.analyzer")
        return getattr(module, name)
    elif name == "AccessibilityStatementPlugin":
        module = import_module("a11y_statement.plugin")
        return getattr(module, name)
    elif name == "simplify_har":
        module = import_module("a11y_statement.har")
        return getattr(module, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def __dir__() -> list[str]:
    return sorted(__all__)
