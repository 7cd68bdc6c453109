"""
Clock and formatting helpers for the translator.

The current time is the only non-deterministic input of a translation, so
it is always read through an injectable Clock.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta, timezone


Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Default clock: the current time in UTC."""
    return datetime.now(timezone.utc)


def frozen_clock(moment: datetime) -> Clock:
    """
    Create a clock that always returns the same moment.

    Naive datetimes are taken as UTC.
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)

    def clock() -> datetime:
        return moment

    return clock


def format_timestamp(moment: datetime) -> str:
    """
    Format a moment as a compact RFC3339-like timestamp.

    Examples:
        2024-03-05 14:07:09 UTC   -> 20240305T140709Z
        2024-03-05 14:07:09 +0200 -> 20240305T140709+02:00
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)

    offset = moment.utcoffset() or timedelta(0)
    if offset == timedelta(0):
        zone = "Z"
    else:
        total_minutes = int(offset.total_seconds()) // 60
        sign = "+" if total_minutes >= 0 else "-"
        hours, minutes = divmod(abs(total_minutes), 60)
        zone = f"{sign}{hours:02d}:{minutes:02d}"

    return moment.strftime("%Y%m%dT%H%M%S") + zone


def format_duration(seconds: int) -> str:
    """
    Format whole seconds as a duration string understood by Consul.

    Uses the Go duration notation Consul parses: "0s", "10s", "1m30s",
    "2h0m0s". Negative values keep a leading minus sign.
    """
    if seconds == 0:
        return "0s"

    sign = "-" if seconds < 0 else ""
    remaining = abs(seconds)
    hours, remaining = divmod(remaining, 3600)
    minutes, secs = divmod(remaining, 60)

    if hours:
        return f"{sign}{hours}h{minutes}m{secs}s"
    if minutes:
        return f"{sign}{minutes}m{secs}s"
    return f"{sign}{secs}s"
