"""
academic_calendars.services.fiscal_year

Date arithmetic for a notebook's fiscal year (April 1 .. March 31).

The printed range is widened to whole weeks: it starts on the Monday on/before
April 1 of the fiscal year and ends on the Sunday on/after March 31 of the next
year, so the day list always splits into Monday-first weeks of 7.
"""
from __future__ import annotations

import re
from datetime import date, timedelta
from typing import List, Sequence, Tuple, TypeVar

T = TypeVar("T")

FISCAL_YEAR_RE = re.compile(r"^\d{4}$")


def parse_fiscal_year(raw) -> int:
    """'2025' -> 2025. Raises ValueError for anything that is not YYYY."""
    text = str(raw or "").strip()
    if not FISCAL_YEAR_RE.match(text):
        raise ValueError(f"fiscal year must be YYYY, got {raw!r}")
    return int(text)


def fiscal_year_range(fiscal_year: int) -> Tuple[date, date]:
    april_first = date(fiscal_year, 4, 1)
    start = april_first - timedelta(days=april_first.weekday())  # Mon=0

    march_31 = date(fiscal_year + 1, 3, 31)
    end = march_31 + timedelta(days=(6 - march_31.weekday()) % 7)  # 0 if already Sunday
    return start, end


def iter_dates(start: date, end: date) -> List[date]:
    """Every date from start to end, inclusive."""
    days = (end - start).days
    return [start + timedelta(days=i) for i in range(days + 1)]


def fiscal_year_dates(fiscal_year: int) -> List[date]:
    start, end = fiscal_year_range(fiscal_year)
    return iter_dates(start, end)


def partition_weeks(items: Sequence[T], size: int = 7) -> List[List[T]]:
    """Consecutive chunks of `size`; the last chunk may be short."""
    return [list(items[i:i + size]) for i in range(0, len(items), size)]
