"""
Lenient readers for application record fields.

Application data comes straight from storage and may be missing or malformed.
Every reader here returns None (or False) for bad input instead of raising.
"""
from __future__ import annotations

from datetime import date, datetime, time, timezone
from typing import Any, Mapping, Optional


def text(app: Mapping[str, Any], field: str) -> Optional[str]:
    """Stripped string value, or None when empty/whitespace/not a string."""
    value = app.get(field)
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def is_filled(app: Mapping[str, Any], field: str) -> bool:
    value = app.get(field)
    if isinstance(value, str):
        return bool(value.strip())
    return bool(value)


def timestamp(app: Mapping[str, Any], field: str) -> Optional[datetime]:
    """Timezone-aware datetime; naive values are taken as UTC."""
    value = app.get(field)

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min)
    elif isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def integer(app: Mapping[str, Any], field: str) -> tuple[bool, Optional[int]]:
    """
    Returns (is_set, value).
    is_set is False for None / empty string; value is None when set but not an integer.
    """
    value = app.get(field)
    if value is None or (isinstance(value, str) and not value.strip()):
        return False, None
    if isinstance(value, bool):
        return True, None
    if isinstance(value, int):
        return True, value
    if isinstance(value, float):
        return True, int(value) if value.is_integer() else None
    if isinstance(value, str):
        try:
            return True, int(value.strip())
        except ValueError:
            return True, None
    return True, None


def flag(app: Mapping[str, Any], field: str) -> bool:
    value = app.get(field)
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return value is True
