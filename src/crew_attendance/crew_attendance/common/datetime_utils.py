from __future__ import annotations

import calendar
import math
from datetime import date, datetime, time, timedelta
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..core.constants import MINUTES_PER_DAY, SHIFT_ROLLOVER_HOUR
from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValidationError(f"invalid date (YYYY-MM-DD): {value!r}")


def parse_hhmm(value: str) -> time:
    try:
        return datetime.strptime((value or "").strip(), "%H:%M").time()
    except ValueError:
        raise ValidationError(f"invalid time (HH:MM): {value!r}")


def month_range(yyyymm: str) -> tuple[date, date]:
    """First and last calendar day of a YYYY-MM month."""
    try:
        first = datetime.strptime(yyyymm, "%Y-%m").date()
    except (TypeError, ValueError):
        raise ValidationError(f"invalid month (YYYY-MM): {yyyymm!r}")
    last_day = calendar.monthrange(first.year, first.month)[1]
    return first, first.replace(day=last_day)


def now_local(tz_name: Optional[str] = None) -> datetime:
    """Current wall-clock time at the venue, as a naive datetime.

    Note: Wrapped so tests can patch/inject a fixed clock.
    """
    if not tz_name:
        return datetime.now()
    try:
        return datetime.now(ZoneInfo(tz_name)).replace(tzinfo=None)
    except ZoneInfoNotFoundError:
        raise ValueError(f"unknown timezone: {tz_name!r}")


def shift_date(instant: datetime) -> str:
    """Logical attendance date for a check-in at `instant`.

    Check-ins from 22:00 onward belong to the next day's shift.
    """
    day = instant.date()
    if instant.hour >= SHIFT_ROLLOVER_HOUR:
        day += timedelta(days=1)
    return day.isoformat()


def elapsed_minutes(check_in: datetime, check_out: datetime) -> int:
    """Whole minutes between two instants, wrapping a negative span by one day."""
    millis = (check_out - check_in) / timedelta(milliseconds=1)
    minutes = millis / 60000
    if minutes < 0:
        minutes += MINUTES_PER_DAY
    return int(math.floor(minutes + 0.5))
