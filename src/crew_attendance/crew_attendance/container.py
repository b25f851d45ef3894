from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from functools import partial
from typing import Callable, Iterable

from .admin.service import ReviewService
from .attendance.locator import OpenEntryLocator
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .common.datetime_utils import now_local
from .common.validators import require_pin_format, require_timezone
from .database.connection import DBConfig, DatabaseConnection
from .members.mysql_member_repository import MySQLMemberRepository
from .members.service import MemberService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection
    clock: Callable[[], datetime]

    members_repo: MySQLMemberRepository
    entries_repo: MySQLAttendanceRepository

    member_service: MemberService
    attendance_service: AttendanceService
    review_service: ReviewService


def build_container(
    *,
    db_config: dict,
    correction_pin: str,
    timezone: str,
    priority_members: Iterable[str] = (),
) -> Container:
    correction_pin = require_pin_format(correction_pin)
    timezone = require_timezone(timezone)

    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
        connection_timeout=int(db_config.get("connection_timeout", 10)),
    )
    conn = DatabaseConnection.get_instance(config)
    clock = partial(now_local, timezone)

    members_repo = MySQLMemberRepository(conn)
    entries_repo = MySQLAttendanceRepository(conn)

    member_service = MemberService(members_repo, priority_names=priority_members)
    attendance_service = AttendanceService(
        entries_repo,
        member_service,
        correction_pin=correction_pin,
        clock=clock,
        locator=OpenEntryLocator(entries_repo),
    )
    review_service = ReviewService(entries_repo)

    return Container(
        conn=conn,
        clock=clock,
        members_repo=members_repo,
        entries_repo=entries_repo,
        member_service=member_service,
        attendance_service=attendance_service,
        review_service=review_service,
    )
