"""Member-name canonicalization.

Names are typed by hand on a touch keyboard, so width (full/half), casing and
spacing vary between entries of the same person. Comparison always goes
through `normalize_name`; the first spelling seen is the one displayed.
"""
from __future__ import annotations

import re
import unicodedata
from typing import Iterable

_WHITESPACE = re.compile(r"\s+")


def normalize_name(name: str) -> str:
    """NFKC, trim, drop all whitespace, lower-case."""
    return _WHITESPACE.sub("", unicodedata.normalize("NFKC", name or "").strip()).lower()


def dedupe_names(names: Iterable[str]) -> list[str]:
    seen: dict[str, str] = {}
    for name in names:
        key = normalize_name(name)
        if key and key not in seen:
            seen[key] = name
    return list(seen.values())


def contains_name(names: Iterable[str], name: str) -> bool:
    key = normalize_name(name)
    return any(normalize_name(n) == key for n in names)


def toggle_name(names: Iterable[str], name: str) -> list[str]:
    """Remove `name` if present under its key, otherwise append it."""
    names = list(names)
    key = normalize_name(name)
    if any(normalize_name(n) == key for n in names):
        return [n for n in names if normalize_name(n) != key]
    return names + [name]
