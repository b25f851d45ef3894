from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Optional

from ..common.datetime_utils import shift_date
from ..core.enums import Hall, Role
from ..core.exceptions import ConsistencyError
from .model import AttendanceEntry
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


def candidate_shift_dates(now: datetime) -> list[str]:
    """Shift dates an entry still running at `now` can carry.

    Yesterday covers a pre-22:00 check-in closed after midnight; the rolled
    date covers a 22:00+ check-in closed before midnight.
    """
    dates = [(now.date() - timedelta(days=1)).isoformat(), now.date().isoformat(), shift_date(now)]
    return list(dict.fromkeys(dates))


class OpenEntryLocator:
    """Finds the single in-progress entry of a slot.

    Uniqueness is also enforced by the store for one shift date; across
    dates it rests on this lookup, so more than one hit is reported, never
    resolved by picking one.
    """

    def __init__(self, entries: AttendanceRepository):
        self._entries = entries

    def find_open(self, shift_date: str, hall: Hall, role: Role) -> Optional[AttendanceEntry]:
        found = list(self._entries.find_open(shift_date, hall, role))
        return self._single(found, hall, role)

    def find_open_for_slot(self, hall: Hall, role: Role, now: datetime) -> Optional[AttendanceEntry]:
        found: list[AttendanceEntry] = []
        for day in candidate_shift_dates(now):
            found.extend(self._entries.find_open(day, hall, role))
        return self._single(found, hall, role)

    def list_open(self) -> list[AttendanceEntry]:
        return list(self._entries.list_open())

    @staticmethod
    def _single(found: list[AttendanceEntry], hall: Hall, role: Role) -> Optional[AttendanceEntry]:
        if not found:
            return None
        if len(found) > 1:
            ids = [e.entry_id for e in found]
            logger.error("slot %s/%s has %d open entries: %s", hall.value, role.value, len(found), ids)
            raise ConsistencyError(
                f"{hall.value}/{role.value} has {len(found)} in-progress records; fix them in the admin view.",
                entry_ids=ids,
            )
        return found[0]
