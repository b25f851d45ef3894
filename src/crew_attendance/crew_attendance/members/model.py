from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import Role


@dataclass(frozen=True)
class Member:
    """Roster entry offered on the kiosk selection grid."""

    member_id: int
    name: str
    role: Role
    active: bool = True
