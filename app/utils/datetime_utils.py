# app/utils/datetime_utils.py
"""Timestamp parsing shared by the feed parser and normalizers. All results are naive UTC."""

import time
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime


def parse_iso_datetime(value: str | None) -> datetime | None:
    if not value or not isinstance(value, str):
        return None
    v = value.strip()
    # Handle trailing Z
    if v.endswith("Z"):
        v = v[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(v)
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def parse_feed_datetime(value: str | None) -> datetime | None:
    """ISO 8601, or the RFC 822 form RSS uses for pubDate (e.g. "Mon, 04 Mar 2024 09:30:00 GMT")."""
    parsed = parse_iso_datetime(value)
    if parsed is not None or not value or not isinstance(value, str):
        return parsed
    try:
        parsed = parsedate_to_datetime(value.strip())
    except (TypeError, ValueError, IndexError):
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def from_struct_time(value: time.struct_time | None) -> datetime | None:
    """feedparser's *_parsed fields are already UTC."""
    if not value:
        return None
    try:
        return datetime(*value[:6])
    except (TypeError, ValueError):
        return None


def from_epoch_millis(value) -> datetime | None:
    if value is None:
        return None
    try:
        return datetime.fromtimestamp(int(value) / 1000, tz=timezone.utc).replace(tzinfo=None)
    except (TypeError, ValueError, OverflowError, OSError):
        return None
