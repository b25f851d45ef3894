from __future__ import annotations

from typing import Protocol, Sequence

from ..core.enums import Role
from .model import Member


class MemberRepository(Protocol):
    """Roster storage. Services depend on this interface, not on MySQL."""

    def list_active(self, role: Role) -> Sequence[Member]:
        """Active members of a role, ordered by name."""
        raise NotImplementedError

    def create(self, *, name: str, role: Role) -> int:
        raise NotImplementedError
