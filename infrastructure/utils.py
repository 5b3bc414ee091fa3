"""Date formatting helpers for cluster and item labels.

Timestamps in the domain are epoch milliseconds. These helpers never raise;
they return an empty string for values that cannot be represented.
"""

from __future__ import annotations

from datetime import datetime

LABEL_DT_FMT = "%Y-%m-%d %H:%M"
DAY_FMT = "%a %d %b %Y"


def to_datetime(timestamp_ms: int) -> datetime | None:
    """Convert epoch millis to a local `datetime`; None when out of range."""
    try:
        return datetime.fromtimestamp(timestamp_ms / 1000)
    except (OverflowError, OSError, ValueError):
        return None


def format_timestamp(timestamp_ms: int) -> str:
    dt = to_datetime(timestamp_ms)
    return dt.strftime(LABEL_DT_FMT) if dt else ""


def format_cluster_label(first_ms: int, last_ms: int, count: int) -> str:
    """Human label for a cluster, e.g. ``Fri 01 Jul 2022 09:00-10:15 (12)``."""
    first = to_datetime(first_ms)
    last = to_datetime(last_ms)
    if first is None or last is None:
        return f"({count})"
    if first.date() == last.date():
        span = f"{first.strftime(DAY_FMT)} {first:%H:%M}-{last:%H:%M}"
    else:
        span = f"{first.strftime(LABEL_DT_FMT)} - {last.strftime(LABEL_DT_FMT)}"
    return f"{span} ({count})"
