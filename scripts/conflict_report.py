# scripts/conflict_report.py
"""
Print a user's schedule conflicts for a time window.

Handy for checking a report from an attendee ("the app says I'm double
booked") without going through the HTTP API.

Example:
    python -m scripts.conflict_report --user-id <id> \
        --start 2025-07-31T10:00:00 --end 2025-07-31T14:00:00
"""

from __future__ import annotations

import argparse
import sys

from app.db.session import SessionLocal
from app.services.conflict_service import check_conflicts
from app.services.errors import ScheduleError


def run_once(user_id: str, start: str, end: str) -> int:
    db = SessionLocal()
    try:
        try:
            result = check_conflicts(db, user_id, start, end)
        except ScheduleError as e:
            print(f"[conflict_report] {e}", file=sys.stderr)
            return 1

        if not result.has_conflicts:
            print(f"[conflict_report] No conflicts for user {user_id}")
            return 0

        print(f"[conflict_report] {len(result.conflicts)} conflict(s) for user {user_id}:")
        for c in result.conflicts:
            start_s = c.window.start.isoformat() if c.window.start else "?"
            end_s = c.window.end.isoformat() if c.window.end else "?"
            print(f"  [{c.source_kind.value}] {c.title} ({start_s} - {end_s}) {c.source_label}")
        return 0
    finally:
        db.close()


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("--user-id", required=True, help="User to check")
    parser.add_argument("--start", required=True, help="Window start, ISO-8601")
    parser.add_argument("--end", required=True, help="Window end, ISO-8601")
    args = parser.parse_args()
    sys.exit(run_once(user_id=args.user_id, start=args.start, end=args.end))


if __name__ == "__main__":
    main()
