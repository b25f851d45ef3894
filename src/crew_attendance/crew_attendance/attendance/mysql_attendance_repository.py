from __future__ import annotations

from datetime import date, datetime
from typing import Any, Mapping, Optional, Sequence

import mysql.connector
from mysql.connector import errorcode

from ..core.enums import EntryStatus, Hall, Role
from ..core.exceptions import ConflictError, ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_names, fetchall, fetchone, load_names
from .model import AttendanceEntry
from .repository import AttendanceRepository

_COLUMNS = "entry_id, hall, role, member_names, shift_date, check_in, check_out, minutes, status, memo"

_ADMIN_COLUMNS = ("member_names", "check_in", "check_out", "minutes", "memo")


def _to_entry(r: dict) -> AttendanceEntry:
    shift_date = r["shift_date"]
    return AttendanceEntry(
        entry_id=int(r["entry_id"]),
        hall=Hall(r["hall"]),
        role=Role(r["role"]),
        member_names=tuple(load_names(r.get("member_names"))),
        shift_date=shift_date.isoformat() if isinstance(shift_date, date) else str(shift_date),
        check_in=r.get("check_in"),
        check_out=r.get("check_out"),
        minutes=int(r["minutes"]) if r.get("minutes") is not None else None,
        status=EntryStatus(r["status"]),
        memo=r.get("memo"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, entry_id: int) -> Optional[AttendanceEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM entries WHERE entry_id=%s", (int(entry_id),))
            r = fetchone(cur)
            return _to_entry(r) if r else None

    def find_open(self, shift_date: str, hall: Hall, role: Role) -> Sequence[AttendanceEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM entries
                WHERE shift_date=%s AND hall=%s AND role=%s AND status=%s
                ORDER BY check_in DESC
                """,
                (shift_date, hall.value, role.value, EntryStatus.IN_PROGRESS.value),
            )
            return [_to_entry(r) for r in fetchall(cur)]

    def list_open(self) -> Sequence[AttendanceEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM entries WHERE status=%s ORDER BY hall, role",
                (EntryStatus.IN_PROGRESS.value,),
            )
            return [_to_entry(r) for r in fetchall(cur)]

    def create_checkin(
        self,
        *,
        hall: Hall,
        role: Role,
        member_names: Sequence[str],
        shift_date: str,
        check_in: datetime,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            try:
                cur.execute(
                    """
                    INSERT INTO entries(hall, role, member_names, shift_date, check_in, status)
                    VALUES(%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        hall.value,
                        role.value,
                        dump_names(member_names),
                        shift_date,
                        check_in,
                        EntryStatus.IN_PROGRESS.value,
                    ),
                )
            except mysql.connector.IntegrityError as e:
                if e.errno == errorcode.ER_DUP_ENTRY:
                    raise ConflictError("already checked in, please check out first.") from e
                raise
            return int(cur.lastrowid)

    def update_checkout(self, *, entry_id: int, check_out: datetime, minutes: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE entries
                SET check_out=%s, minutes=%s, status=%s
                WHERE entry_id=%s AND status=%s
                """,
                (
                    check_out,
                    int(minutes),
                    EntryStatus.DONE.value,
                    int(entry_id),
                    EntryStatus.IN_PROGRESS.value,
                ),
            )
            return cur.rowcount > 0

    def update_open_members(self, *, entry_id: int, member_names: Sequence[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE entries
                SET member_names=%s, status=%s
                WHERE entry_id=%s AND status=%s
                """,
                (
                    dump_names(member_names),
                    EntryStatus.IN_PROGRESS.value,
                    int(entry_id),
                    EntryStatus.IN_PROGRESS.value,
                ),
            )
            return cur.rowcount > 0

    def update_open_check_in(self, *, entry_id: int, check_in: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE entries
                SET check_in=%s, status=%s
                WHERE entry_id=%s AND status=%s
                """,
                (check_in, EntryStatus.IN_PROGRESS.value, int(entry_id), EntryStatus.IN_PROGRESS.value),
            )
            return cur.rowcount > 0

    def admin_update_entry(self, *, entry_id: int, fields: Mapping[str, Any]) -> bool:
        unknown = set(fields) - set(_ADMIN_COLUMNS)
        if unknown:
            raise ValidationError(f"fields not editable: {', '.join(sorted(unknown))}")
        if not fields:
            return True

        assignments: list[str] = []
        params: list[object] = []
        for column in _ADMIN_COLUMNS:
            if column not in fields:
                continue
            value = fields[column]
            if column == "member_names":
                value = dump_names(value)
            assignments.append(f"{column}=%s")
            params.append(value)
        params.append(int(entry_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE entries SET {', '.join(assignments)} WHERE entry_id=%s", tuple(params))
            return cur.rowcount > 0

    def list_between(
        self,
        *,
        start_date: date,
        end_date: date,
        hall: Optional[Hall] = None,
        role: Optional[Role] = None,
    ) -> Sequence[AttendanceEntry]:
        clauses = ["shift_date BETWEEN %s AND %s"]
        params: list[object] = [start_date, end_date]

        if hall is not None:
            clauses.append("hall=%s")
            params.append(hall.value)
        if role is not None:
            clauses.append("role=%s")
            params.append(role.value)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM entries
                WHERE {where}
                ORDER BY shift_date ASC, check_in ASC
                """,
                tuple(params),
            )
            return [_to_entry(r) for r in fetchall(cur)]
