"""Epoch-nanosecond timestamp conversion."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def timestamp_to_datetime(ns: int) -> Optional[datetime]:
    """
    Convert an OTLP epoch-nanosecond timestamp to a UTC datetime.

    Args:
        ns: Nanoseconds since 1970-01-01T00:00:00Z

    Returns:
        Timezone-aware datetime (truncated to microseconds), or None when
        ns is 0 (unset)
    """
    if ns == 0:
        return None
    return _EPOCH + timedelta(microseconds=ns // 1000)


def format_timestamp(ts: datetime) -> str:
    """Format a UTC datetime as RFC3339 with a trailing Z."""
    return ts.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")
