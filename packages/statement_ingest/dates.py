"""Date normalization for raw statement cells.

:func:`normalize_date` turns whatever a spreadsheet or CSV parser handed us
into ``YYYY-MM-DD``, or ``""`` when no strategy applies. Handled inputs:

- ``date``/``datetime`` objects (calendar fields are read directly, no
  timezone conversion, so a value never moves to the previous/next day);
- spreadsheet serial day numbers (1900 epoch, ``25569`` = 1970-01-01),
  as numbers or numeric strings;
- ISO dates and ISO datetimes;
- US and day-first slash/dash dates plus a handful of month-name layouts.
"""

from __future__ import annotations

import math
import re
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Any

# Serial day number of 1970-01-01 in the 1900 date system (includes the
# phantom 1900-02-29).
SERIAL_EPOCH_OFFSET = 25569
SERIAL_MAX = 100000

_UNIX_EPOCH = date(1970, 1, 1)
_MIN_YEAR = 1900
_MAX_YEAR = 2100  # exclusive

_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_ISO_DATETIME_RE = re.compile(r"^(\d{4}-\d{2}-\d{2})T")
_SLASH_RE = re.compile(r"(\d{1,2})/(\d{1,2})/(\d{4})")
_DASH_RE = re.compile(r"(\d{1,2})-(\d{1,2})-(\d{4})")
# strptime lets %Y%m%d take fewer digits ("2024315"), so the compact form is
# only tried on exactly eight.
_COMPACT_RE = re.compile(r"^\d{8}$")

# Formats tried against each candidate string, in order.
_FORMATS: tuple[str, ...] = (
    "%Y-%m-%d",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y %H:%M",
    "%m/%d/%y",
    "%d %b %Y",
    "%d %B %Y",
    "%b %d %Y",
    "%b %d, %Y",
    "%B %d %Y",
    "%B %d, %Y",
    "%d-%b-%Y",
    "%d-%b-%y",
    "%Y%m%d",
)


def is_serial_date(value: float | int | Decimal) -> bool:
    """Return whether ``value`` lies in the accepted serial-date range."""

    return SERIAL_EPOCH_OFFSET < value < SERIAL_MAX


def _from_serial(value: float | int | Decimal) -> str:
    days = math.floor(value - SERIAL_EPOCH_OFFSET)
    return (_UNIX_EPOCH + timedelta(days=days)).isoformat()


def _parse_candidate(s: str) -> date | None:
    for fmt in _FORMATS:
        if fmt == "%Y%m%d" and not _COMPACT_RE.match(s):
            continue
        try:
            d = datetime.strptime(s, fmt).date()
        except ValueError:
            continue
        if _MIN_YEAR <= d.year < _MAX_YEAR:
            return d
    return None


def _candidates(s: str) -> list[str]:
    # Month-first rewrite before day-first for both separators.
    return [
        s,
        _SLASH_RE.sub(r"\3-\1-\2", s),
        _SLASH_RE.sub(r"\3-\2-\1", s),
        _DASH_RE.sub(r"\3-\1-\2", s),
        _DASH_RE.sub(r"\3-\2-\1", s),
    ]


def _numeric_string(s: str) -> float | None:
    try:
        f = float(s)
    except ValueError:
        return None
    return f if math.isfinite(f) else None


def normalize_date(value: Any) -> str:
    """Return ``value`` as ``YYYY-MM-DD``, or ``""`` if it isn't a date."""

    if value is None or isinstance(value, bool):
        return ""

    # datetime before date: datetime is a date subclass.
    if isinstance(value, datetime):
        return date(value.year, value.month, value.day).isoformat()
    if isinstance(value, date):
        return value.isoformat()

    if isinstance(value, int | float | Decimal):
        try:
            in_range = is_serial_date(value)
        except (TypeError, ValueError, ArithmeticError):
            return ""
        return _from_serial(value) if in_range else ""

    s = str(value).strip()
    if not s:
        return ""

    if _ISO_DATE_RE.match(s):
        return s
    m = _ISO_DATETIME_RE.match(s)
    if m:
        return m.group(1)

    serial = _numeric_string(s)
    if serial is not None and is_serial_date(serial):
        return _from_serial(serial)

    seen: set[str] = set()
    for candidate in _candidates(s):
        if candidate in seen:
            continue
        seen.add(candidate)
        parsed = _parse_candidate(candidate)
        if parsed is not None:
            return parsed.isoformat()
    return ""


__all__ = ["SERIAL_EPOCH_OFFSET", "SERIAL_MAX", "is_serial_date", "normalize_date"]
