"""Month-year token handling.

Subscriptions are tracked with month granularity. Callers send ``MM-YYYY``
tokens; the domain stores the two canonical boundaries of that month in UTC.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from typing import Tuple

from .errors import InvalidDateFormat

MONTH_TOKEN_FORMAT = "MM-YYYY"

# ASCII digits only; fullmatch also refuses a trailing newline.
_TOKEN_PATTERN = re.compile(r"([0-9]{2})-([0-9]{4})")


def _parse(token: str) -> Tuple[int, int]:
    match = _TOKEN_PATTERN.fullmatch(token or "")
    if not match:
        raise InvalidDateFormat(token)
    month, year = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12 or year < 1:
        raise InvalidDateFormat(token)
    return year, month


def normalize_start(token: str) -> datetime:
    """Return the first instant of the month named by ``token``."""
    year, month = _parse(token)
    return datetime(year, month, 1, tzinfo=timezone.utc)


def normalize_end(token: str) -> datetime:
    """Return the last second of the month named by ``token``.

    Taken as one second before the first day of the following month, so month
    lengths and leap years need no lookup.
    """
    year, month = _parse(token)
    if month == 12:
        # December needs no rollover; also keeps 12-9999 inside datetime's range.
        return datetime(year, 12, 31, 23, 59, 59, tzinfo=timezone.utc)
    following = datetime(year, month + 1, 1, tzinfo=timezone.utc)
    return following - timedelta(seconds=1)


def format_month(value: datetime) -> str:
    """Render a datetime back into its ``MM-YYYY`` token."""
    return f"{value.month:02d}-{value.year:04d}"
