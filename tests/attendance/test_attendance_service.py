from __future__ import annotations

from datetime import datetime

import pytest

from src.crew_attendance.crew_attendance.attendance.service import AttendanceService
from src.crew_attendance.crew_attendance.core.enums import EntryStatus, Hall, Role
from src.crew_attendance.crew_attendance.core.exceptions import (
    AuthorizationError,
    ConflictError,
    ValidationError,
)
from src.crew_attendance.crew_attendance.members.service import MemberService

PIN = "1103"


@pytest.fixture
def svc(entries_repo, members_repo, fixed_now):
    return AttendanceService(
        entries_repo,
        MemberService(members_repo),
        correction_pin=PIN,
        clock=lambda: fixed_now,
    )


def test_check_in_creates_open_entry_with_deduped_members(svc, entries_repo, fixed_now):
    entry = svc.check_in(Hall.HALL_A, Role.AUDIO, selected=["山田", "Suzuki"], free_names=["ｓｕｚｕｋｉ", "Tanaka"])

    stored = entries_repo.get_by_id(entry.entry_id)
    assert stored.status == EntryStatus.IN_PROGRESS
    assert stored.member_names == ("山田", "Suzuki", "Tanaka")
    assert stored.check_in == fixed_now
    assert stored.shift_date == "2026-02-01"
    assert stored.check_out is None and stored.minutes is None


def test_check_in_registers_only_new_free_names(svc, members_repo):
    svc.check_in(Hall.HALL_A, Role.AUDIO, selected=[], free_names=["ＳＵＺＵＫＩ", "Tanaka", "tanaka"])

    audio = [m.name for m in members_repo.list_active(Role.AUDIO)]
    assert audio.count("Tanaka") == 1
    assert "ＳＵＺＵＫＩ" not in audio


def test_late_check_in_belongs_to_next_days_shift(svc):
    entry = svc.check_in(Hall.HALL_B, Role.VIDEO, selected=["A"], now=datetime(2026, 2, 1, 23, 50))

    assert entry.shift_date == "2026-02-02"


def test_check_in_when_open_is_a_conflict_and_writes_nothing(svc, entries_repo):
    svc.check_in(Hall.HALL_A, Role.AUDIO, selected=["山田"])
    writes = entries_repo.writes

    with pytest.raises(ConflictError, match="already checked in"):
        svc.check_in(Hall.HALL_A, Role.AUDIO, selected=["Suzuki"])

    assert entries_repo.writes == writes
    assert len(entries_repo.list_open()) == 1


def test_other_slots_stay_independent(svc, entries_repo):
    svc.check_in(Hall.HALL_A, Role.AUDIO, selected=["山田"])
    svc.check_in(Hall.HALL_B, Role.AUDIO, selected=["山田"])
    svc.check_in(Hall.HALL_A, Role.LIGHTING, selected=["佐藤"])

    assert len(entries_repo.list_open()) == 3


def test_check_in_with_no_members_fails(svc, entries_repo, members_repo):
    roster_size = len(members_repo.members)

    with pytest.raises(ValidationError):
        svc.check_in(Hall.HALL_A, Role.AUDIO, selected=[" ", ""], free_names=["　"])

    assert entries_repo.by_id == {}
    assert len(members_repo.members) == roster_size


def test_check_out_computes_minutes_and_closes(svc, entries_repo):
    entry = svc.check_in(Hall.HALL_A, Role.AUDIO, selected=["山田"], now=datetime(2026, 2, 1, 9, 0))

    done = svc.check_out(Hall.HALL_A, Role.AUDIO, now=datetime(2026, 2, 1, 17, 30))

    stored = entries_repo.get_by_id(entry.entry_id)
    assert done.minutes == stored.minutes == 510
    assert stored.status == EntryStatus.DONE
    assert stored.check_out == datetime(2026, 2, 1, 17, 30)
    assert svc.snapshot(Hall.HALL_A, Role.AUDIO, now=datetime(2026, 2, 1, 17, 31)) is None


def test_check_out_past_midnight(svc):
    svc.check_in(Hall.HALL_A, Role.AUDIO, selected=["山田"], now=datetime(2026, 2, 1, 23, 50))

    done = svc.check_out(Hall.HALL_A, Role.AUDIO, now=datetime(2026, 2, 2, 0, 10))

    assert done.minutes == 20


def test_check_out_without_open_entry_fails(svc, entries_repo):
    with pytest.raises(ValidationError, match="no in-progress record"):
        svc.check_out(Hall.HALL_A, Role.AUDIO)

    assert entries_repo.writes == 0


def test_toggle_member_adds_and_removes_by_key(svc, entries_repo):
    entry = svc.check_in(Hall.HALL_A, Role.AUDIO, selected=["山田"])

    svc.toggle_member(Hall.HALL_A, Role.AUDIO, "Suzuki")
    svc.toggle_member(Hall.HALL_A, Role.AUDIO, "山 田")

    stored = entries_repo.get_by_id(entry.entry_id)
    assert stored.member_names == ("Suzuki",)
    assert stored.status == EntryStatus.IN_PROGRESS


def test_correct_member_list_replaces_with_deduped_names(svc, entries_repo):
    entry = svc.check_in(Hall.HALL_A, Role.AUDIO, selected=["山田"])

    svc.correct_member_list(Hall.HALL_A, Role.AUDIO, ["Suzuki", "suzuki", "Tanaka"])

    assert entries_repo.get_by_id(entry.entry_id).member_names == ("Suzuki", "Tanaka")


class _StaleLocator:
    """Keeps answering with a snapshot taken before another kiosk checked out."""

    def __init__(self, entry):
        self.entry = entry

    def find_open_for_slot(self, hall, role, now):
        return self.entry


def test_member_update_after_checkout_is_rejected(svc, entries_repo, members_repo, fixed_now):
    svc.check_in(Hall.HALL_A, Role.AUDIO, selected=["山田"])
    stale = svc.snapshot(Hall.HALL_A, Role.AUDIO)
    svc.check_out(Hall.HALL_A, Role.AUDIO)

    other_kiosk = AttendanceService(
        entries_repo,
        MemberService(members_repo),
        correction_pin=PIN,
        clock=lambda: fixed_now,
        locator=_StaleLocator(stale),
    )
    with pytest.raises(ConflictError):
        other_kiosk.toggle_member(Hall.HALL_A, Role.AUDIO, "Suzuki")

    stored = entries_repo.get_by_id(stale.entry_id)
    assert stored.status == EntryStatus.DONE
    assert stored.member_names == ("山田",)



def test_wrong_pin_leaves_check_in_untouched(svc, entries_repo):
    entry = svc.check_in(Hall.HALL_A, Role.AUDIO, selected=["山田"])

    with pytest.raises(AuthorizationError, match="incorrect PIN"):
        svc.correct_check_in_time(Hall.HALL_A, Role.AUDIO, "08:30", "0000")

    assert entries_repo.get_by_id(entry.entry_id).check_in == entry.check_in


def test_correct_pin_changes_only_hour_and_minute(svc, entries_repo):
    entry = svc.check_in(Hall.HALL_A, Role.AUDIO, selected=["山田"], now=datetime(2026, 2, 1, 23, 40, 15))

    svc.correct_check_in_time(Hall.HALL_A, Role.AUDIO, "21:05", PIN, now=datetime(2026, 2, 1, 23, 45))

    stored = entries_repo.get_by_id(entry.entry_id)
    assert stored.check_in == datetime(2026, 2, 1, 21, 5)
    assert stored.shift_date == "2026-02-02"
    assert stored.status == EntryStatus.IN_PROGRESS


def test_correction_without_open_entry_fails(svc):
    with pytest.raises(ValidationError):
        svc.correct_check_in_time(Hall.HALL_A, Role.AUDIO, "08:30", PIN)


def test_status_board_lists_every_slot(svc):
    svc.check_in(Hall.HALL_B, Role.VIDEO, selected=["A"])

    board = svc.status_board()

    assert len(board) == 6
    open_slots = [(s.hall, s.role) for s in board if s.entry]
    assert open_slots == [(Hall.HALL_B, Role.VIDEO)]
    assert not any(s.needs_review for s in board)


def _cell(board, hall, role):
    return next(s for s in board if s.hall == hall and s.role == role)


def test_status_board_flags_slot_with_two_open_entries(svc, entries_repo):
    for day in ("2026-01-20", "2026-02-01"):
        entries_repo.add(
            hall=Hall.HALL_A,
            role=Role.AUDIO,
            member_names=("山田",),
            shift_date=day,
            check_in=datetime.fromisoformat(f"{day}T09:00"),
        )

    cell = _cell(svc.status_board(), Hall.HALL_A, Role.AUDIO)

    assert cell.entry is None
    assert cell.problem_ids == (1, 2)


def test_status_board_flags_open_entry_older_than_the_lookup_window(svc, entries_repo):
    entries_repo.add(
        hall=Hall.HALL_A,
        role=Role.AUDIO,
        member_names=("山田",),
        shift_date="2026-01-29",
        check_in=datetime(2026, 1, 29, 9, 0),
    )

    cell = _cell(svc.status_board(), Hall.HALL_A, Role.AUDIO)

    assert svc.snapshot(Hall.HALL_A, Role.AUDIO) is None
    assert cell.entry is None
    assert cell.problem_ids == (1,)


def test_status_board_shows_shift_still_running_after_midnight(svc, entries_repo):
    entries_repo.add(
        hall=Hall.HALL_B,
        role=Role.LIGHTING,
        member_names=("佐藤",),
        shift_date="2026-01-31",
        check_in=datetime(2026, 1, 31, 18, 0),
    )

    cell = _cell(svc.status_board(now=datetime(2026, 2, 1, 1, 0)), Hall.HALL_B, Role.LIGHTING)

    assert cell.entry.entry_id == 1
    assert not cell.needs_review


def test_store_rejects_second_open_entry_when_both_kiosks_saw_closed(svc, entries_repo, members_repo, fixed_now):
    svc.check_in(Hall.HALL_A, Role.AUDIO, selected=["山田"])

    other_kiosk = AttendanceService(
        entries_repo,
        MemberService(members_repo),
        correction_pin=PIN,
        clock=lambda: fixed_now,
        locator=_StaleLocator(None),
    )
    with pytest.raises(ConflictError, match="already checked in"):
        other_kiosk.check_in(Hall.HALL_A, Role.AUDIO, selected=["Suzuki"])

    assert len(entries_repo.list_open()) == 1
