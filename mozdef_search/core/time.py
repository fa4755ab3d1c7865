from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Any

from pydantic import TypeAdapter, ValidationError


ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)

CLI_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_DATETIME = TypeAdapter(datetime)

# RFC3339 allows any number of fractional digits; datetime keeps microseconds
_EXCESS_FRACTION = re.compile(r"(\.\d{6})\d+")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_rfc3339(dt: datetime, *, timespec: str = "seconds") -> str:
    return as_utc(dt).isoformat(timespec=timespec).replace("+00:00", "Z")


def parse_cli_date(value: str) -> datetime:
    """Parse ``yyyy-mm-dd hh:mm:ss`` as a UTC instant; raises ValueError."""
    return datetime.strptime(value, CLI_DATE_FORMAT).replace(tzinfo=timezone.utc)


def parse_datetime(value: Any) -> datetime | None:
    """
    Decode a document timestamp: RFC3339 / ISO 8601 strings with any
    fractional precision, epoch numbers, or datetimes. Naive values are UTC.
    Returns None for anything else.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = _EXCESS_FRACTION.sub(r"\1", value.strip())
        if not value:
            return None
    try:
        dt = _DATETIME.validate_python(value)
    except ValidationError:
        return None
    return as_utc(dt)
