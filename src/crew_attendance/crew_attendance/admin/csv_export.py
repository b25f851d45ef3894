"""Spreadsheet export of the admin table.

UTF-8 with BOM and CRLF rows so Excel opens Japanese text correctly.
"""
from __future__ import annotations

import csv
import io
from datetime import datetime
from typing import Iterable, Optional

from ..attendance.model import AttendanceEntry
from ..core.constants import MEMBER_SEPARATOR

HEADER = ["日付", "ホール", "役割", "メンバー", "人数", "開始", "退勤", "ステータス", "メモ"]


def _hhmm(value: Optional[datetime]) -> str:
    return value.strftime("%H:%M") if value else ""


def to_row(entry: AttendanceEntry) -> list:
    return [
        entry.shift_date,
        entry.hall.label,
        entry.role.label,
        MEMBER_SEPARATOR.join(entry.member_names),
        entry.headcount,
        _hhmm(entry.check_in),
        _hhmm(entry.check_out),
        entry.status.label,
        entry.memo or "",
    ]


def export_csv(entries: Iterable[AttendanceEntry]) -> bytes:
    out = io.StringIO()
    writer = csv.writer(out, quoting=csv.QUOTE_MINIMAL, lineterminator="\r\n")
    writer.writerow(HEADER)
    for entry in entries:
        writer.writerow(to_row(entry))
    return out.getvalue().encode("utf-8-sig")


def export_filename(yyyymm: str) -> str:
    return f"CREW_{yyyymm}.csv"
