from __future__ import annotations

from datetime import datetime, timedelta, timezone

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# 9999-12-31T23:59:59.999Z, the last instant datetime can represent.
MAX_EPOCH_MILLIS: int = 253402300799999


def parse_rfc3339(value: str) -> datetime:
    """
    Parse RFC3339 timestamp string into tz-aware UTC datetime.

    Accepts strings like:
      - 2025-01-01T12:34:56Z
      - 2025-01-01T12:34:56.123Z
      - 2025-01-01T12:34:56+09:00
    """
    if not isinstance(value, str) or not value:
        raise ValueError("RFC3339 value must be a non-empty string")

    s = value.strip()
    # Python's fromisoformat doesn't accept 'Z' in 3.9/3.10, so normalize.
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"

    dt = datetime.fromisoformat(s)  # raises ValueError if invalid
    dt = normalize_dt(dt)
    return dt.astimezone(timezone.utc)


def to_rfc3339(dt: datetime) -> str:
    """Convert tz-aware datetime to RFC3339 (UTC, millisecond precision, with 'Z')."""
    dt = normalize_dt(dt).astimezone(timezone.utc)
    s = dt.isoformat(timespec="milliseconds")
    return s.replace("+00:00", "Z")


def normalize_dt(dt: datetime) -> datetime:
    """Ensure datetime is tz-aware. Raises if naive."""
    if not isinstance(dt, datetime):
        raise TypeError("dt must be a datetime")
    if dt.tzinfo is None:
        raise ValueError("naive datetime is not allowed; timezone-aware required")
    return dt


def to_epoch_millis(dt: datetime) -> int:
    """Convert tz-aware datetime to integer epoch milliseconds."""
    return int(normalize_dt(dt).timestamp() * 1000)


def epoch_millis_to_rfc3339(millis: int) -> str:
    """Render epoch milliseconds as RFC3339 UTC ('2022-06-01T10:00:00.000Z')."""
    if isinstance(millis, bool) or not isinstance(millis, int):
        raise TypeError("millis must be an int")
    dt = _EPOCH + timedelta(milliseconds=millis)
    return to_rfc3339(dt)
