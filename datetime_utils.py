"""Timestamp helpers for task creation times.

Everything stored is UTC. The JSON task tree keeps RFC3339 strings with
microseconds so that two tasks created in the same second still sort in
creation order after a round trip.
"""
from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Optional


UTC = timezone.utc

_FRACTION = re.compile(r"\.(\d+)")


def utc_now() -> datetime:
    return datetime.now(UTC)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """Naive values are taken as UTC (SQLite drops the offset)."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def parse_rfc3339(s: Optional[str]) -> Optional[datetime]:
    value = (s or "").strip()
    if not value:
        return None
    if value[-1] in "zZ":
        value = value[:-1] + "+00:00"
    # fromisoformat wants exactly 3 or 6 fraction digits on older interpreters
    value = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), value, count=1)
    try:
        return ensure_utc(datetime.fromisoformat(value))
    except ValueError:
        return None


def to_rfc3339_utc(dt: Optional[datetime]) -> Optional[str]:
    value = ensure_utc(dt)
    if value is None:
        return None
    return value.isoformat().replace("+00:00", "Z")


def format_local(dt: Optional[datetime], fmt: str = "%Y-%m-%d %H:%M") -> str:
    if dt is None:
        return "—"
    return ensure_utc(dt).astimezone().strftime(fmt)


__all__ = [
    "UTC",
    "ensure_utc",
    "format_local",
    "parse_rfc3339",
    "to_rfc3339_utc",
    "utc_now",
]
