from __future__ import annotations

from enum import Enum

from .exceptions import ValidationError


class Hall(str, Enum):
    """Venue hall a kiosk slot belongs to."""

    HALL_A = "HallA"
    HALL_B = "HallB"

    @property
    def label(self) -> str:
        return _HALL_LABELS[self]


class Role(str, Enum):
    """Crew section checking in together."""

    AUDIO = "AUDIO"
    LIGHTING = "LIGHTING"
    VIDEO = "VIDEO"

    @property
    def label(self) -> str:
        return _ROLE_LABELS[self]


class EntryStatus(str, Enum):
    """Lifecycle of an attendance entry: IN_PROGRESS -> DONE, never back."""

    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"

    @property
    def label(self) -> str:
        return _STATUS_LABELS[self]


_HALL_LABELS = {Hall.HALL_A: "ホールA", Hall.HALL_B: "ホールB"}
_ROLE_LABELS = {Role.AUDIO: "音響", Role.LIGHTING: "照明", Role.VIDEO: "映像"}
_STATUS_LABELS = {EntryStatus.IN_PROGRESS: "出勤中", EntryStatus.DONE: "退勤済"}


def parse_hall(value: str) -> Hall:
    try:
        return Hall(value)
    except ValueError:
        raise ValidationError(f"unknown hall: {value!r}")


def parse_role(value: str) -> Role:
    try:
        return Role(str(value).upper())
    except ValueError:
        raise ValidationError(f"unknown role: {value!r}")
