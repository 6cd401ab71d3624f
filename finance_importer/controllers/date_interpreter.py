# finance_importer/controllers/date_interpreter.py
"""
Strict date interpretation under an operator-chosen day/month/year ordering.

Every function here is total: bad input yields ``None`` (or an empty result),
never an exception, so a row-level date problem can always be turned into a
``FailedRow`` instead of a crash.
"""
from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta, timezone
from typing import Iterable, List, Optional, Sequence, Tuple

from finance_importer.data_model import DateFormat

_SEPARATORS = re.compile(r"[.\-/]")
_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")

_MIN_YEAR = 2000
_MAX_YEAR = 2100
_TWO_DIGIT_YEAR_BASE = 2000
_NOON = time(12, 0, 0)
_PREVIEW_LIMIT = 3

# Order used by format guessing (first match wins).
GUESS_ORDER: Tuple[DateFormat, ...] = (
    DateFormat.YYYY_MM_DD,
    DateFormat.DD_MM_YYYY,
    DateFormat.MM_DD_YYYY,
)

# Tie-break order when proposing a correction format.
SECONDARY_ORDER: Tuple[DateFormat, ...] = (
    DateFormat.DD_MM_YYYY,
    DateFormat.MM_DD_YYYY,
    DateFormat.YYYY_MM_DD,
)


def _leading_int(part: str) -> Optional[int]:
    """Integer prefix of ``part`` (``"15T10:00"`` -> 15), or None if there is none."""
    m = _LEADING_INT.match(part)
    return int(m.group(1)) if m else None


def _split_parts(raw: str, fmt: DateFormat) -> Optional[Tuple[int, int, int]]:
    """Return ``(day, month, year)`` as written, or None."""
    parts = _SEPARATORS.split(raw)
    if len(parts) != 3:
        return None
    nums = [_leading_int(p) for p in parts]
    if any(n is None for n in nums):
        return None
    a, b, c = nums
    if fmt is DateFormat.YYYY_MM_DD:
        return c, b, a
    if fmt is DateFormat.DD_MM_YYYY:
        return a, b, c
    return b, a, c  # MM-DD-YYYY


def parse_strict(raw: object, fmt: object) -> Optional[str]:
    """
    Parse ``raw`` under ``fmt`` and return an ISO-8601 UTC timestamp, or None.

    Rules:
      • exactly three integer parts separated by '.', '-' or '/';
      • month in [1, 12], day in [1, 31];
      • two-digit years get +2000, and the year must land in [2000, 2100].

    There is no per-month day-count check: a day past the end of its month rolls
    forward into the next month (``31-04-2024`` becomes 1 May 2024).

    The date is anchored at local noon before conversion to UTC so that
    serializing it never moves it to the previous or next calendar day.

    Examples:
        parse_strict("2024-01-31", DateFormat.YYYY_MM_DD)  # Jan 31 2024, 12:00 local
        parse_strict("31-01-2024", DateFormat.YYYY_MM_DD)  # None (day 2024)
        parse_strict("31.01.24", DateFormat.DD_MM_YYYY)    # Jan 31 2024
    """
    if not isinstance(raw, str):
        return None
    try:
        fmt = DateFormat(fmt)
        dmy = _split_parts(raw, fmt)
    except (TypeError, ValueError):
        return None
    if dmy is None:
        return None
    day, month, year = dmy

    if month < 1 or month > 12:
        return None
    if day < 1 or day > 31:
        return None
    if year < 100:
        year += _TWO_DIGIT_YEAR_BASE
    if year < _MIN_YEAR or year > _MAX_YEAR:
        return None

    try:
        calendar_day = date(year, month, 1) + timedelta(days=day - 1)
        local_noon = datetime.combine(calendar_day, _NOON)
        as_utc = local_noon.astimezone(timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None
    return as_utc.strftime("%Y-%m-%dT%H:%M:%S.000Z")


def iso_to_local_date(iso: str) -> Optional[date]:
    """Calendar date (local time) of a timestamp produced by ``parse_strict``."""
    if not isinstance(iso, str) or not iso:
        return None
    s = iso.strip()
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(s)
    except ValueError:
        return None
    if dt.tzinfo is not None:
        dt = dt.astimezone()
    return dt.date()


def guess_date_format(value: str) -> Optional[DateFormat]:
    """First format in ``GUESS_ORDER`` that parses ``value``, or None."""
    for fmt in GUESS_ORDER:
        if parse_strict(value, fmt) is not None:
            return fmt
    return None


def propose_secondary_format(primary: DateFormat, samples: Iterable[str]) -> DateFormat:
    """
    Suggest the correction format for rows that failed under ``primary``.

    Picks the format other than ``primary`` that parses the most samples; ties
    go to the earlier entry of ``SECONDARY_ORDER``.
    """
    values = list(samples)
    best: Optional[DateFormat] = None
    best_hits = -1
    for fmt in SECONDARY_ORDER:
        if fmt == primary:
            continue
        hits = sum(1 for v in values if parse_strict(v, fmt) is not None)
        if hits > best_hits:
            best, best_hits = fmt, hits
    return best or SECONDARY_ORDER[0]


def preview(
    samples: Sequence[str], fmt: DateFormat, limit: int = _PREVIEW_LIMIT
) -> List[Tuple[str, Optional[str]]]:
    """Re-parse the first ``limit`` samples under ``fmt`` for a live preview."""
    return [(s, parse_strict(s, fmt)) for s in list(samples)[:limit]]
