from __future__ import annotations

import hmac
import logging
from collections import defaultdict
from dataclasses import replace
from datetime import datetime
from typing import Callable, Iterable, Optional, Sequence

from ..common.datetime_utils import elapsed_minutes, now_local, parse_hhmm, shift_date
from ..common.names import dedupe_names, toggle_name
from ..core.enums import EntryStatus, Hall, Role
from ..core.exceptions import AuthorizationError, ConflictError, ValidationError
from ..members.service import MemberService
from .locator import OpenEntryLocator, candidate_shift_dates
from .model import AttendanceEntry, SlotStatus
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

ALREADY_OPEN = "already checked in, please check out first."
NO_OPEN = "no in-progress record."
NO_MEMBERS = "select or add at least one member."
CLOSED_MEANWHILE = "the record was checked out in the meantime."
WRONG_PIN = "incorrect PIN."


class AttendanceService:
    """Check-in/check-out state machine for each (hall, role) slot.

    A slot is CLOSED (no open entry) or OPEN (exactly one IN_PROGRESS entry).
    Check-in opens it, check-out closes the entry for good; member-list and
    PIN-gated check-in time corrections keep it OPEN.
    """

    def __init__(
        self,
        entries: AttendanceRepository,
        members: MemberService,
        *,
        correction_pin: str,
        clock: Optional[Callable[[], datetime]] = None,
        locator: Optional[OpenEntryLocator] = None,
    ):
        self._entries = entries
        self._members = members
        self._pin = str(correction_pin)
        self._clock = clock or now_local
        self._locator = locator or OpenEntryLocator(entries)

    def _now(self, now: Optional[datetime]) -> datetime:
        return now or self._clock()

    def snapshot(self, hall: Hall, role: Role, *, now: Optional[datetime] = None) -> Optional[AttendanceEntry]:
        return self._locator.find_open_for_slot(hall, role, self._now(now))

    def status_board(self, *, now: Optional[datetime] = None) -> list[SlotStatus]:
        """One cell per (hall, role).

        A slot with more than one open entry, or with an open entry outside the
        dates the kiosk looks at, shows no entry and lists the ids to fix.
        """
        window = set(candidate_shift_dates(self._now(now)))
        by_slot: dict[tuple[Hall, Role], list[AttendanceEntry]] = defaultdict(list)
        for entry in self._locator.list_open():
            by_slot[(entry.hall, entry.role)].append(entry)

        board: list[SlotStatus] = []
        for h in Hall:
            for r in Role:
                found = by_slot.get((h, r), [])
                if len(found) == 1 and found[0].shift_date in window:
                    board.append(SlotStatus(hall=h, role=r, entry=found[0]))
                elif found:
                    ids = tuple(e.entry_id for e in found)
                    logger.warning("status board: %s/%s needs review, open entries %s", h.value, r.value, list(ids))
                    board.append(SlotStatus(hall=h, role=r, entry=None, problem_ids=ids))
                else:
                    board.append(SlotStatus(hall=h, role=r, entry=None))
        return board

    def check_in(
        self,
        hall: Hall,
        role: Role,
        *,
        selected: Sequence[str],
        free_names: Sequence[str] = (),
        now: Optional[datetime] = None,
    ) -> AttendanceEntry:
        now = self._now(now)

        # Re-read right before deciding; the store's unique key backs this up.
        if self._locator.find_open_for_slot(hall, role, now):
            logger.warning("check-in rejected, %s/%s already open", hall.value, role.value)
            raise ConflictError(ALREADY_OPEN)

        names = dedupe_names([*selected, *free_names])
        if not names:
            raise ValidationError(NO_MEMBERS)

        self._members.register_new(role, free_names)

        day = shift_date(now)
        entry_id = self._entries.create_checkin(
            hall=hall,
            role=role,
            member_names=names,
            shift_date=day,
            check_in=now,
        )
        logger.info("check-in %s/%s entry=%s date=%s members=%d", hall.value, role.value, entry_id, day, len(names))
        return AttendanceEntry(
            entry_id=entry_id,
            hall=hall,
            role=role,
            member_names=tuple(names),
            shift_date=day,
            check_in=now,
        )

    def check_out(self, hall: Hall, role: Role, *, now: Optional[datetime] = None) -> AttendanceEntry:
        now = self._now(now)

        entry = self._locator.find_open_for_slot(hall, role, now)
        if not entry:
            raise ValidationError(NO_OPEN)

        minutes = elapsed_minutes(entry.check_in or now, now)
        if not self._entries.update_checkout(entry_id=entry.entry_id, check_out=now, minutes=minutes):
            raise ValidationError(NO_OPEN)

        logger.info("check-out %s/%s entry=%s minutes=%d", hall.value, role.value, entry.entry_id, minutes)
        return self._closed(entry, check_out=now, minutes=minutes)

    def toggle_member(self, hall: Hall, role: Role, name: str, *, now: Optional[datetime] = None) -> AttendanceEntry:
        entry = self._require_open(hall, role, now)
        return self._save_members(entry, toggle_name(entry.member_names, name))

    def correct_member_list(
        self,
        hall: Hall,
        role: Role,
        names: Iterable[str],
        *,
        now: Optional[datetime] = None,
    ) -> AttendanceEntry:
        entry = self._require_open(hall, role, now)
        return self._save_members(entry, dedupe_names(names))

    def correct_check_in_time(
        self,
        hall: Hall,
        role: Role,
        hhmm: str,
        pin: str,
        *,
        now: Optional[datetime] = None,
    ) -> AttendanceEntry:
        if not hmac.compare_digest(str(pin or "").encode(), self._pin.encode()):
            logger.warning("check-in time correction for %s/%s: wrong PIN", hall.value, role.value)
            raise AuthorizationError(WRONG_PIN)

        new_time = parse_hhmm(hhmm)
        entry = self._require_open(hall, role, now)
        base = entry.check_in or self._now(now)
        corrected = base.replace(hour=new_time.hour, minute=new_time.minute, second=0, microsecond=0)

        if not self._entries.update_open_check_in(entry_id=entry.entry_id, check_in=corrected):
            raise ConflictError(CLOSED_MEANWHILE)

        logger.info("check-in corrected %s/%s entry=%s -> %s", hall.value, role.value, entry.entry_id, corrected)
        return replace(entry, check_in=corrected)

    def _require_open(self, hall: Hall, role: Role, now: Optional[datetime]) -> AttendanceEntry:
        entry = self._locator.find_open_for_slot(hall, role, self._now(now))
        if not entry:
            raise ValidationError(NO_OPEN)
        return entry

    def _save_members(self, entry: AttendanceEntry, names: list[str]) -> AttendanceEntry:
        if not self._entries.update_open_members(entry_id=entry.entry_id, member_names=names):
            raise ConflictError(CLOSED_MEANWHILE)
        logger.info("members of entry=%s now %s", entry.entry_id, names)
        return replace(entry, member_names=tuple(names))

    @staticmethod
    def _closed(entry: AttendanceEntry, *, check_out: datetime, minutes: int) -> AttendanceEntry:
        return replace(entry, check_out=check_out, minutes=minutes, status=EntryStatus.DONE)
