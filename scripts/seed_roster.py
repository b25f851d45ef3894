"""Load roster names for one role from a text file (one name per line).

Names already on the active roster (compared after normalization) are skipped.

    python scripts/seed_roster.py AUDIO names.txt
"""
from __future__ import annotations

import argparse
import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.crew_attendance.crew_attendance.container import build_container
from src.crew_attendance.crew_attendance.core.enums import parse_role


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("role", help="AUDIO, LIGHTING or VIDEO")
    parser.add_argument("names_file", type=Path)
    args = parser.parse_args()

    settings = importlib.import_module(get_settings_module())
    container = build_container(
        db_config=settings.DB_CONFIG,
        correction_pin=settings.CORRECTION_PIN,
        timezone=settings.VENUE_TIMEZONE,
    )

    names = [line.strip() for line in args.names_file.read_text(encoding="utf-8").splitlines() if line.strip()]
    created = container.member_service.register_new(parse_role(args.role), names)
    print(f"OK: {len(created)} new member(s), {len(names) - len(created)} already on the roster")


if __name__ == "__main__":
    main()
