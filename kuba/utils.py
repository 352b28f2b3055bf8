"""Utility helpers for the Kuba service."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Mapping, Sequence


def is_blank(value: Any) -> bool:
    """Return ``True`` for missing cells and strings that trim to nothing."""

    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def cell_text(value: Any) -> str:
    """Render a raw spreadsheet cell as trimmed text."""

    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, datetime):
        if value.time() == datetime.min.time():
            return value.date().isoformat()
        return value.isoformat(sep=" ")
    if isinstance(value, date):
        return value.isoformat()
    return str(value).strip()


def first_present(
    row: Mapping[str, Any], aliases: Sequence[str], default: str = ""
) -> str:
    """Return the first non-blank value found under any alias, trimmed."""

    for alias in aliases:
        raw = row.get(alias)
        if is_blank(raw):
            continue
        text = cell_text(raw)
        if text:
            return text
    return default


def contains_ignore_case(haystack: str, needle: str) -> bool:
    return needle.lower() in haystack.lower()
