from __future__ import annotations

from typing import Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import Member
from .repository import MemberRepository


class MySQLMemberRepository(MemberRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_active(self, role: Role) -> Sequence[Member]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT member_id, name, role, active
                FROM members
                WHERE role=%s AND active=1
                ORDER BY name
                """,
                (role.value,),
            )
            return [
                Member(
                    member_id=int(r["member_id"]),
                    name=r["name"],
                    role=Role(r["role"]),
                    active=bool(r["active"]),
                )
                for r in fetchall(cur)
            ]

    def create(self, *, name: str, role: Role) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO members(name, role, active) VALUES(%s,%s,1)",
                (name, role.value),
            )
            return int(cur.lastrowid)
