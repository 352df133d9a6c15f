from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional

# All timestamps are stored as naive UTC and rendered with a trailing "Z".


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _as_naive_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(timezone.utc).replace(tzinfo=None)


def parse_iso_datetime(value: Optional[str]) -> Optional[datetime]:
    """
    "2024-03-01T09:30", "2024-03-01T09:30:00Z" or "...+08:00" -> naive UTC.
    Blank input gives None; anything unparseable raises ValueError.
    """
    s = (value or "").strip()
    if not s:
        return None
    if s[-1] in "Zz":
        s = s[:-1] + "+00:00"
    return _as_naive_utc(datetime.fromisoformat(s))


def parse_iso_date(value: Optional[str]) -> Optional[date]:
    """
    Report bound: "YYYY-MM-DD", or a full timestamp truncated to its UTC day.
    """
    s = (value or "").strip()
    if not s:
        return None
    if len(s) == 10:
        return date.fromisoformat(s)
    return parse_iso_datetime(s).date()


def to_utc_z(dt: Optional[datetime]) -> Optional[str]:
    """Whole-second ISO-8601 in UTC, e.g. "2024-03-01T09:30:00Z"."""
    if dt is None:
        return None
    stamp = _as_naive_utc(dt).replace(microsecond=0)
    return stamp.isoformat() + "Z"
