"""Reporting module for PyMemSpec."""

from pymemspec.reporting.formatters import (
    FORMATTERS,
    Formatter,
    JSONFormatter,
    TextFormatter,
    format_result,
    get_formatter,
)

__all__ = [
    "FORMATTERS",
    "Formatter",
    "JSONFormatter",
    "TextFormatter",
    "format_result",
    "get_formatter",
]
