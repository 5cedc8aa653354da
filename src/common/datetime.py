"""Datetime utilities."""

import math
from datetime import datetime, timedelta, timezone
from typing import Any

from dateutil.parser import parse as parse_date

# Timezone abbreviations for date parsing
TZINFOS = {
    "EST": timezone(timedelta(hours=-5)),
    "EDT": timezone(timedelta(hours=-4)),
    "CST": timezone(timedelta(hours=-6)),
    "CDT": timezone(timedelta(hours=-5)),
    "MST": timezone(timedelta(hours=-7)),
    "MDT": timezone(timedelta(hours=-6)),
    "PST": timezone(timedelta(hours=-8)),
    "PDT": timezone(timedelta(hours=-7)),
    "GMT": timezone.utc,
    "UTC": timezone.utc,
    "BST": timezone(timedelta(hours=1)),
}

# Epoch values above this are treated as milliseconds
_MILLISECOND_THRESHOLD = 1e11


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_publish_date(value: Any) -> datetime | None:
    """Parse a publication date from an upstream payload.

    Accepts epoch seconds or milliseconds (int, float or numeric string) and
    any date string dateutil understands. Naive results are assumed UTC.
    Returns None when the value cannot be parsed.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, (int, float)) or (isinstance(value, str) and _is_number(value)):
        number = float(value)
        if not math.isfinite(number):
            return None
        if abs(number) > _MILLISECOND_THRESHOLD:
            number /= 1000
        try:
            return datetime.fromtimestamp(number, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(value, str) and value.strip():
        try:
            dt = parse_date(value, tzinfos=TZINFOS)
        except (ValueError, OverflowError):
            return None
    else:
        return None

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def _is_number(value: str) -> bool:
    try:
        float(value)
    except ValueError:
        return False
    return True
