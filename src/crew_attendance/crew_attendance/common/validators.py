from __future__ import annotations

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..core.constants import PIN_LENGTH
from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_pin_format(value: str) -> str:
    if value is None or len(value) != PIN_LENGTH or not value.isdigit():
        raise ValidationError(f"PIN must be {PIN_LENGTH} digits")
    return value


def require_timezone(value: str) -> str:
    """Reject an unknown IANA zone name; empty means the host's local time."""
    if not value:
        return value
    try:
        ZoneInfo(value)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValidationError(f"unknown timezone: {value!r}")
    return value
