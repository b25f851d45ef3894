from __future__ import annotations

import logging
from typing import Iterable, Sequence

from ..common.names import dedupe_names, normalize_name
from ..common.validators import require_non_empty
from ..core.enums import Role
from .model import Member
from .repository import MemberRepository

logger = logging.getLogger(__name__)


class MemberService:
    """Use case: read the kiosk roster and grow it from free-typed names."""

    def __init__(self, members: MemberRepository, *, priority_names: Iterable[str] = ()):
        self._members = members
        self._priority = {normalize_name(n) for n in priority_names if normalize_name(n)}

    def list_for_kiosk(self, role: Role) -> list[Member]:
        """Active roster with priority names first, each group by name."""
        roster = list(self._members.list_active(role))
        return sorted(roster, key=lambda m: (normalize_name(m.name) not in self._priority, m.name))

    def register_new(self, role: Role, names: Sequence[str]) -> list[str]:
        """Add every name whose key is not on the active roster yet.

        Returns the names actually created.
        """
        known = {normalize_name(m.name) for m in self._members.list_active(role)}
        created: list[str] = []
        for name in dedupe_names(names):
            if normalize_name(name) in known:
                continue
            name = require_non_empty(name, "member name")
            self._members.create(name=name, role=role)
            known.add(normalize_name(name))
            created.append(name)
        if created:
            logger.info("roster %s: added %s", role.value, ", ".join(created))
        return created
