"""
Permissive query-string parsing for the JSON views.

Dashboard filters arrive as loosely formatted query parameters. A value that
cannot be parsed is treated as absent rather than rejected.
"""

from __future__ import annotations

from datetime import date

from django.utils.dateparse import parse_date


def param_str(params, name: str) -> str | None:
    """Stripped string value, or None when missing or blank."""
    value = params.get(name)
    if value is None:
        return None
    value = value.strip()
    return value or None


def param_int(params, name: str, default: int | None = None) -> int | None:
    """Integer value, or default when missing or not an integer."""
    value = param_str(params, name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def param_date(params, name: str) -> date | None:
    """ISO date (YYYY-MM-DD), or None when missing or malformed."""
    value = param_str(params, name)
    if value is None:
        return None
    try:
        return parse_date(value)
    except ValueError:
        # Well formed but not a real date, e.g. 2025-02-30
        return None
