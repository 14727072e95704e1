# app/services/time_window.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional


def parse_instant(value: Any) -> Optional[datetime]:
    """
    Normalize a timestamp to an aware UTC datetime.

    Accepts datetimes (naive ones are taken as UTC) and ISO-8601 strings,
    including a trailing "Z". Anything else, including empty or malformed
    strings, comes back as None.
    """
    if value is None:
        return None

    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_naive_utc(value: datetime) -> datetime:
    """Convert to the naive UTC form stored in DateTime columns."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def overlaps(a_start: Any, a_end: Any, b_start: Any, b_end: Any) -> bool:
    """
    True if window A and window B share any instant.

    Windows that only touch (one ends exactly when the other starts) do not
    overlap. If any bound is missing or unparseable the answer is False.
    """
    a0 = parse_instant(a_start)
    a1 = parse_instant(a_end)
    b0 = parse_instant(b_start)
    b1 = parse_instant(b_end)

    if a0 is None or a1 is None or b0 is None or b1 is None:
        return False

    return a0 < b1 and a1 > b0


@dataclass(frozen=True)
class TimeWindow:
    start: Optional[datetime] = None
    end: Optional[datetime] = None

    @classmethod
    def from_raw(cls, start: Any, end: Any) -> "TimeWindow":
        return cls(start=parse_instant(start), end=parse_instant(end))

    @property
    def is_complete(self) -> bool:
        return self.start is not None and self.end is not None

    @property
    def is_valid(self) -> bool:
        return self.is_complete and self.start < self.end

    def overlaps(self, other: "TimeWindow") -> bool:
        return overlaps(self.start, self.end, other.start, other.end)
