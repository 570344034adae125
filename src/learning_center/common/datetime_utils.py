from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import Tuple


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_iso_datetime(value: str) -> datetime:
    """Parse an ISO 8601 timestamp into a naive UTC datetime.

    Browsers send ``2025-03-01T09:00:00.000Z``; offsets are converted to UTC
    and dropped so every stored timestamp is comparable.
    """
    v = value.strip()
    if v.endswith(("Z", "z")):
        v = v[:-1] + "+00:00"
    parsed = datetime.fromisoformat(v)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def parse_range_bound(value: str, *, end: bool) -> datetime:
    """Parse a list filter bound; a bare date as ``end`` covers the whole day."""
    v = value.strip()
    if len(v) == 10:
        d = parse_iso_date(v)
        if end:
            return datetime.combine(d, time.max)
        return datetime.combine(d, time.min)
    return parse_iso_datetime(v)


def day_bounds(day: date) -> Tuple[datetime, datetime]:
    """[00:00 of ``day``, 00:00 of the next day)."""
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)


def month_bounds(month: str) -> Tuple[datetime, datetime]:
    """[first instant, first instant of next month) for ``YYYY-MM``."""
    first = datetime.strptime(month, "%Y-%m")
    if first.month == 12:
        nxt = first.replace(year=first.year + 1, month=1)
    else:
        nxt = first.replace(month=first.month + 1)
    return first, nxt


def now_utc() -> datetime:
    """Current naive UTC time.

    Note: Wrapped so tests can patch/mock easier.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)
