from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import EntryStatus, Hall, Role


@dataclass(frozen=True)
class AttendanceEntry:
    """One shift record for a (hall, role) slot.

    `shift_date` is fixed at check-in; `check_out` and `minutes` are set
    together with status DONE.
    """

    entry_id: int
    hall: Hall
    role: Role
    member_names: tuple[str, ...]
    shift_date: str
    check_in: Optional[datetime]
    check_out: Optional[datetime] = None
    minutes: Optional[int] = None
    status: EntryStatus = EntryStatus.IN_PROGRESS
    memo: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.status == EntryStatus.IN_PROGRESS

    @property
    def headcount(self) -> int:
        return len(self.member_names)


@dataclass(frozen=True)
class SlotStatus:
    """Kiosk status board cell.

    `problem_ids` lists open entries the admin view has to fix; `entry` is
    then None.
    """

    hall: Hall
    role: Role
    entry: Optional[AttendanceEntry]
    problem_ids: tuple[int, ...] = ()

    @property
    def needs_review(self) -> bool:
        return bool(self.problem_ids)


def entry_view(entry: AttendanceEntry) -> dict:
    """JSON-ready view used by the kiosk and admin endpoints."""
    return {
        "id": entry.entry_id,
        "hall": entry.hall.value,
        "hall_label": entry.hall.label,
        "role": entry.role.value,
        "role_label": entry.role.label,
        "member_names": list(entry.member_names),
        "headcount": entry.headcount,
        "date": entry.shift_date,
        "check_in": entry.check_in.isoformat(timespec="seconds") if entry.check_in else None,
        "check_out": entry.check_out.isoformat(timespec="seconds") if entry.check_out else None,
        "minutes": entry.minutes,
        "status": entry.status.value,
        "status_label": entry.status.label,
        "memo": entry.memo or "",
    }
