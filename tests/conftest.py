from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Optional

import pytest

from src.crew_attendance.crew_attendance.attendance.model import AttendanceEntry
from src.crew_attendance.crew_attendance.core.enums import EntryStatus, Hall, Role
from src.crew_attendance.crew_attendance.core.exceptions import ConflictError
from src.crew_attendance.crew_attendance.members.model import Member


class InMemoryEntries:
    """Entry store with the same open-slot uniqueness the MySQL schema enforces."""

    def __init__(self):
        self.by_id: dict[int, AttendanceEntry] = {}
        self._id = 0
        self.writes = 0

    def add(self, **kwargs) -> AttendanceEntry:
        """Insert a fixture entry directly, bypassing the uniqueness check."""
        self._id += 1
        entry = AttendanceEntry(entry_id=self._id, **kwargs)
        self.by_id[entry.entry_id] = entry
        return entry

    def get_by_id(self, entry_id: int) -> Optional[AttendanceEntry]:
        return self.by_id.get(entry_id)

    def find_open(self, shift_date: str, hall: Hall, role: Role):
        return [
            e
            for e in self.by_id.values()
            if e.shift_date == shift_date and e.hall == hall and e.role == role and e.is_open
        ]

    def list_open(self):
        return [e for e in self.by_id.values() if e.is_open]

    def create_checkin(self, *, hall, role, member_names, shift_date, check_in) -> int:
        if self.find_open(shift_date, hall, role):
            raise ConflictError("already checked in, please check out first.")
        self.writes += 1
        return self.add(
            hall=hall,
            role=role,
            member_names=tuple(member_names),
            shift_date=shift_date,
            check_in=check_in,
        ).entry_id

    def _update_open(self, entry_id: int, **changes) -> bool:
        entry = self.by_id.get(entry_id)
        if not entry or not entry.is_open:
            return False
        self.writes += 1
        self.by_id[entry_id] = replace(entry, **changes)
        return True

    def update_checkout(self, *, entry_id, check_out, minutes) -> bool:
        return self._update_open(entry_id, check_out=check_out, minutes=minutes, status=EntryStatus.DONE)

    def update_open_members(self, *, entry_id, member_names) -> bool:
        return self._update_open(entry_id, member_names=tuple(member_names), status=EntryStatus.IN_PROGRESS)

    def update_open_check_in(self, *, entry_id, check_in) -> bool:
        return self._update_open(entry_id, check_in=check_in, status=EntryStatus.IN_PROGRESS)

    def admin_update_entry(self, *, entry_id, fields) -> bool:
        entry = self.by_id.get(entry_id)
        if not entry:
            return False
        changes = dict(fields)
        if "member_names" in changes:
            changes["member_names"] = tuple(changes["member_names"])
        self.writes += 1
        self.by_id[entry_id] = replace(entry, **changes)
        return True

    def list_between(self, *, start_date: date, end_date: date, hall=None, role=None):
        rows = [
            e
            for e in self.by_id.values()
            if start_date.isoformat() <= e.shift_date <= end_date.isoformat()
            and (hall is None or e.hall == hall)
            and (role is None or e.role == role)
        ]
        return sorted(rows, key=lambda e: (e.shift_date, e.check_in or datetime.min))


class InMemoryMembers:
    def __init__(self, members: tuple[Member, ...] = ()):
        self.members: list[Member] = list(members)

    def list_active(self, role: Role):
        return sorted((m for m in self.members if m.role == role and m.active), key=lambda m: m.name)

    def create(self, *, name: str, role: Role) -> int:
        member_id = len(self.members) + 1
        self.members.append(Member(member_id=member_id, name=name, role=role, active=True))
        return member_id


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 2, 1, 9, 0, 0)


@pytest.fixture
def entries_repo() -> InMemoryEntries:
    return InMemoryEntries()


@pytest.fixture
def members_repo() -> InMemoryMembers:
    return InMemoryMembers(
        (
            Member(member_id=1, name="山田", role=Role.AUDIO),
            Member(member_id=2, name="Suzuki", role=Role.AUDIO),
            Member(member_id=3, name="佐藤", role=Role.LIGHTING),
            Member(member_id=4, name="Retired", role=Role.AUDIO, active=False),
        )
    )
