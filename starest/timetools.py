"""Conversions between ISO 8601 and PostgreSQL time and period notations."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

_POSTGRES_TIME = re.compile(
    r"^(\d{4})-(\d{2})-(\d{2}) (\d{2}):(\d{2}):(\d{2})(?:\.(\d+))?([+-])(\d{2})$"
)
_RFC3339 = re.compile(
    r"^(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})(?:\.(\d+))?"
    r"(Z|[+-]\d{2}:\d{2})$"
)


@dataclass(frozen=True)
class Period:
    """A time period given by its start and end as text."""

    start: str
    end: str


def _microseconds(fraction: str | None) -> int:
    if not fraction:
        return 0
    return int(fraction[:6].ljust(6, "0"))


def get_period_from_postgres_string(period: str) -> Period:
    """Parse a PostgreSQL period such as '["a","b"]' into a Period."""
    fields = json.loads(period)
    if not isinstance(fields, list):
        raise ValueError("Period must be a JSON array")
    if len(fields) != 2:
        raise ValueError(f"wrong number of fields in Period: {len(fields)} != 2")
    if not all(isinstance(field, str) for field in fields):
        raise ValueError("Period fields must be strings")
    return Period(start=fields[0], end=fields[1])


def parse_postgres_time(text: str) -> datetime:
    """Parse a time such as '2014-03-01 13:00:00+00'."""
    match = _POSTGRES_TIME.match(text)
    if match is None:
        raise ValueError(f"invalid PostgreSQL time: {text!r}")
    year, month, day, hour, minute, second, fraction, sign, offset = match.groups()
    hours = int(offset)
    tz = timezone(timedelta(hours=-hours if sign == "-" else hours))
    return datetime(
        int(year), int(month), int(day), int(hour), int(minute), int(second),
        _microseconds(fraction), tzinfo=tz,
    )


def time_to_iso8601(moment: datetime) -> str:
    """Format a time with millisecond precision and a trailing 'Z'."""
    millis = moment.microsecond // 1000
    return f"{moment.strftime('%Y-%m-%dT%H:%M:%S')}.{millis:03d}Z"


def time_to_postgres_format(moment: datetime) -> str:
    """Format a time as PostgreSQL does, with the offset in whole hours."""
    offset = moment.utcoffset() or timedelta(0)
    minutes = int(offset.total_seconds()) // 60 if offset >= timedelta(0) else -(
        int(-offset.total_seconds()) // 60
    )
    sign = "-" if minutes < 0 else "+"
    hours = abs(minutes) // 60
    return f"{moment.strftime('%Y-%m-%d %H:%M:%S')}{sign}{hours:02d}"


def to_time(text: str) -> datetime:
    """Parse an RFC 3339 time, with optional fractional seconds."""
    match = _RFC3339.match(text)
    if match is None:
        raise ValueError(f"invalid RFC 3339 time: {text!r}")
    year, month, day, hour, minute, second, fraction, zone = match.groups()
    if zone == "Z":
        tz = timezone.utc
    else:
        sign = -1 if zone[0] == "-" else 1
        offset_hours, offset_minutes = int(zone[1:3]), int(zone[4:6])
        if offset_hours > 23 or offset_minutes > 59:
            raise ValueError(f"invalid time zone offset in {text!r}")
        tz = timezone(sign * timedelta(hours=offset_hours, minutes=offset_minutes))
    return datetime(
        int(year), int(month), int(day), int(hour), int(minute), int(second),
        _microseconds(fraction), tzinfo=tz,
    )


def iso8601_to_postgres_period(text: str) -> str:
    """Convert 'start/end' in ISO 8601 to a PostgreSQL period string."""
    parts = text.split("/")
    if len(parts) < 2:
        raise ValueError(f"not an ISO 8601 period: {text!r}")
    start = time_to_postgres_format(to_time(parts[0]))
    end = time_to_postgres_format(to_time(parts[1]))
    return f'["{start}","{end}"]'


def postgres_to_iso8601_period(period: str) -> str:
    """Convert a PostgreSQL period string to 'start/end' in ISO 8601."""
    parsed = get_period_from_postgres_string(period)
    start = parse_postgres_time(parsed.start)
    end = parse_postgres_time(parsed.end)
    return f"{time_to_iso8601(start)}/{time_to_iso8601(end)}"