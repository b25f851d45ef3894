from __future__ import annotations

from datetime import date, datetime
from typing import Any, Mapping, Optional, Protocol, Sequence

from ..core.enums import Hall, Role
from .model import AttendanceEntry


class AttendanceRepository(Protocol):
    def get_by_id(self, entry_id: int) -> Optional[AttendanceEntry]:
        raise NotImplementedError

    def find_open(self, shift_date: str, hall: Hall, role: Role) -> Sequence[AttendanceEntry]:
        """Every IN_PROGRESS entry for the tuple (normally zero or one)."""
        raise NotImplementedError

    def list_open(self) -> Sequence[AttendanceEntry]:
        raise NotImplementedError

    def create_checkin(
        self,
        *,
        hall: Hall,
        role: Role,
        member_names: Sequence[str],
        shift_date: str,
        check_in: datetime,
    ) -> int:
        """Insert an IN_PROGRESS entry.

        Raises ConflictError when the store already holds an open entry for
        (shift_date, hall, role).
        """
        raise NotImplementedError

    def update_checkout(self, *, entry_id: int, check_out: datetime, minutes: int) -> bool:
        """Close the entry. False when it was no longer IN_PROGRESS."""
        raise NotImplementedError

    def update_open_members(self, *, entry_id: int, member_names: Sequence[str]) -> bool:
        """Replace members and keep status IN_PROGRESS. False when already closed."""
        raise NotImplementedError

    def update_open_check_in(self, *, entry_id: int, check_in: datetime) -> bool:
        """Replace check-in and keep status IN_PROGRESS. False when already closed."""
        raise NotImplementedError

    def admin_update_entry(self, *, entry_id: int, fields: Mapping[str, Any]) -> bool:
        """Admin-only override: merge the given columns regardless of status."""
        raise NotImplementedError

    def list_between(
        self,
        *,
        start_date: date,
        end_date: date,
        hall: Optional[Hall] = None,
        role: Optional[Role] = None,
    ) -> Sequence[AttendanceEntry]:
        raise NotImplementedError
