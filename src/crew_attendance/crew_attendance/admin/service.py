from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional, Sequence, Union

from ..attendance.model import AttendanceEntry
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import elapsed_minutes, month_range, parse_hhmm, parse_iso_date
from ..common.names import dedupe_names
from ..core.constants import MEMBER_SEPARATOR
from ..core.enums import Hall, Role
from ..core.exceptions import ValidationError

logger = logging.getLogger(__name__)

_UNSET: Any = object()


@dataclass(frozen=True)
class ReviewData:
    rows: list[AttendanceEntry]
    summary: dict = field(default_factory=dict)


class ReviewService:
    """Use case: month review, administrative edits and CSV export input.

    Edits here bypass the kiosk state machine on purpose.
    """

    def __init__(self, entries: AttendanceRepository):
        self._entries = entries

    def list_month(self, yyyymm: str, *, hall: Optional[Hall] = None, role: Optional[Role] = None) -> ReviewData:
        start, end = month_range(yyyymm)
        rows = list(self._entries.list_between(start_date=start, end_date=end, hall=hall, role=role))

        total_minutes = sum(r.minutes or 0 for r in rows)
        summary = {
            "count": len(rows),
            "total_minutes": total_minutes,
            "approx_hours": int(total_minutes / 60 + 0.5),
        }
        return ReviewData(rows=rows, summary=summary)

    def update_record(
        self,
        entry_id: int,
        *,
        member_names: Union[Sequence[str], str] = _UNSET,
        check_in: Optional[str] = _UNSET,
        check_out: Optional[str] = _UNSET,
        memo: Optional[str] = _UNSET,
    ) -> AttendanceEntry:
        """Merge the given fields into an entry.

        Times are "HH:MM" on the entry's shift date; "" or None clears them.
        Minutes are recomputed when a time changes, and cleared when either
        time ends up empty.
        """
        entry = self._entries.get_by_id(int(entry_id))
        if not entry:
            raise ValidationError("record not found.")

        fields: dict[str, Any] = {}
        if member_names is not _UNSET:
            if member_names is None:
                member_names = []
            elif isinstance(member_names, str):
                member_names = member_names.split(MEMBER_SEPARATOR)
            elif not isinstance(member_names, (list, tuple)) or not all(isinstance(n, str) for n in member_names):
                raise ValidationError("member_names must be a list of names")
            fields["member_names"] = dedupe_names(n.strip() for n in member_names)
        if check_in is not _UNSET:
            fields["check_in"] = self._on_shift_date(entry, check_in, "check_in")
        if check_out is not _UNSET:
            fields["check_out"] = self._on_shift_date(entry, check_out, "check_out")
        if memo is not _UNSET:
            if memo is not None and not isinstance(memo, str):
                raise ValidationError("memo must be text")
            fields["memo"] = memo or ""

        if "check_in" in fields or "check_out" in fields:
            new_in = fields.get("check_in", entry.check_in)
            new_out = fields.get("check_out", entry.check_out)
            fields["minutes"] = elapsed_minutes(new_in, new_out) if new_in and new_out else None

        if not self._entries.admin_update_entry(entry_id=entry.entry_id, fields=fields):
            raise ValidationError("record not found.")

        logger.info("admin updated entry=%s fields=%s", entry.entry_id, sorted(fields))
        return self._entries.get_by_id(entry.entry_id) or entry

    @staticmethod
    def _on_shift_date(entry: AttendanceEntry, hhmm: Optional[str], field_name: str) -> Optional[datetime]:
        if hhmm is not None and not isinstance(hhmm, str):
            raise ValidationError(f"{field_name} must be HH:MM")
        if not hhmm:
            return None
        return datetime.combine(parse_iso_date(entry.shift_date), parse_hhmm(hhmm))
