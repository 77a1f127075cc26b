"""Seed roster entries and user profiles from a CSV.

Columns: external_id, roll_class, email, role, uid (role/uid optional).
Rows with a uid get a user profile; every row with an external_id gets a roster entry.

    python scripts/seed_db.py roster.csv
"""

from __future__ import annotations

import argparse
import csv
import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.attendance_trends.attendance_trends.container import build_container, build_store
from src.attendance_trends.attendance_trends.core.enums import Role
from src.attendance_trends.attendance_trends.roster.model import RosterEntry
from src.attendance_trends.attendance_trends.users.model import UserProfile


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("csv_path", type=Path)
    args = parser.parse_args()

    settings = importlib.import_module(get_settings_module())
    container = build_container(
        store=build_store(backend=settings.STORE_BACKEND, db_config=settings.DB_CONFIG),
        school_id=settings.SCHOOL_ID,
        secret_key=settings.SECRET_KEY,
    )

    entries: list[RosterEntry] = []
    profiles = 0
    with args.csv_path.open(encoding="utf-8-sig", newline="") as f:
        for record in csv.DictReader(f):
            external_id = (record.get("external_id") or "").strip()
            roll_class = (record.get("roll_class") or "").strip()
            email = (record.get("email") or "").strip().lower() or None
            if external_id and roll_class:
                entries.append(RosterEntry(external_id=external_id, roll_class=roll_class, email=email))

            uid = (record.get("uid") or "").strip()
            if uid:
                role = Role((record.get("role") or Role.STUDENT.value).strip().lower())
                container.users_repo.upsert(
                    UserProfile(uid=uid, role=role, external_id=external_id or None, email=email)
                )
                profiles += 1

    written = container.roster_repo.upsert_many(entries)
    print(f"OK: Seeded school={settings.SCHOOL_ID} roster={written} profiles={profiles}")


if __name__ == "__main__":
    main()
