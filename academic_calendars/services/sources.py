"""
academic_calendars.services.sources

Read-only calendar data source used by the notebook worker.

Lookup order for a date:
  1) CalendarDay row for that date (a soft-deleted row means "absent", no fallback)
  2) the date's entry inside the CalendarMonth JSON for its YYYY-MM
  3) absent

Everything a fiscal year needs is fetched in three bulk queries (months, days, terms),
so rendering ~370 dates does not turn into ~370 round trips.

========= CHANGE LOG =========
2026-02-03 • ADD: DayRecord value object + DatabaseCalendarSource (bulk prefetch).
2026-02-05 • FIX: A deleted day row no longer falls through to the month JSON.
2026-02-11 • FIX: term labels prefer CalendarTerm.term_name over name.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Iterable, Mapping, Optional

from django.db import DatabaseError

from notebook_orders.exceptions import CalendarSourceError

from academic_calendars.models import Calendar, CalendarDay, CalendarMonth, CalendarTerm

log = logging.getLogger("refillstore")


@dataclass(frozen=True)
class DayRecord:
    is_holiday: bool = False
    day_type: str = ""
    class_weekday: Optional[int] = None
    class_order: Optional[int] = None
    term_id: str = ""
    national_holiday_name: str = ""

    @classmethod
    def from_row(cls, row: CalendarDay) -> "DayRecord":
        return cls(
            is_holiday=bool(row.is_holiday),
            day_type=row.day_type or "",
            class_weekday=row.class_weekday,
            class_order=row.class_order,
            term_id=row.term_id or "",
            national_holiday_name=row.national_holiday_name or "",
        )

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "DayRecord":
        """Month-JSON entry -> DayRecord. Non-matching types are dropped, not coerced."""
        weekday = raw.get("classWeekday")
        order = raw.get("classOrder")
        term_id = raw.get("termId")
        holiday = raw.get("nationalHolidayName")
        day_type = raw.get("type")
        return cls(
            is_holiday=raw.get("isHoliday") is True,
            day_type=day_type if isinstance(day_type, str) else "",
            class_weekday=weekday if isinstance(weekday, int) and not isinstance(weekday, bool) else None,
            class_order=order if isinstance(order, int) and not isinstance(order, bool) else None,
            term_id=term_id if isinstance(term_id, str) else "",
            national_holiday_name=holiday if isinstance(holiday, str) else "",
        )


class CalendarSource:
    """
    Interface the worker depends on. Subclasses answer per-date and per-term lookups.
    """

    def day_record(self, day: date) -> Optional[DayRecord]:
        raise NotImplementedError

    def term_name(self, term_id: str) -> str:
        raise NotImplementedError


class InMemoryCalendarSource(CalendarSource):
    """Fixed lookups; handy for previews and tests."""

    def __init__(self, days: Optional[Dict[date, Optional[DayRecord]]] = None, terms: Optional[Dict[str, str]] = None):
        self._days = dict(days or {})
        self._terms = dict(terms or {})

    def day_record(self, day: date) -> Optional[DayRecord]:
        return self._days.get(day)

    def term_name(self, term_id: str) -> str:
        return self._terms.get(term_id, "")


class DatabaseCalendarSource(CalendarSource):
    def __init__(
        self,
        *,
        day_rows: Dict[date, Optional[DayRecord]],
        month_days: Dict[str, Mapping[str, Any]],
        terms: Dict[str, str],
    ):
        self._day_rows = day_rows
        self._month_days = month_days
        self._terms = terms

    @classmethod
    def load(cls, *, fiscal_year: str, calendar_id: str, dates: Iterable[date]) -> "DatabaseCalendarSource":
        """
        Prefetch everything needed for `dates`. A missing Calendar is not an error:
        every day is simply absent. Database failures raise CalendarSourceError.
        """
        dates = list(dates)
        month_ids = sorted({d.strftime("%Y-%m") for d in dates})

        try:
            calendar = Calendar.objects.filter(fiscal_year=str(fiscal_year), calendar_id=calendar_id).first()
            if calendar is None:
                log.warning(
                    "[calendars] calendar not found fiscal_year=%s calendar_id=%s; rendering without day data",
                    fiscal_year,
                    calendar_id,
                )
                return cls(day_rows={}, month_days={}, terms={})

            month_days: Dict[str, Mapping[str, Any]] = {}
            for month in CalendarMonth.objects.filter(calendar=calendar, month_id__in=month_ids):
                month_days[month.month_id] = month.days if isinstance(month.days, dict) else {}

            day_rows: Dict[date, Optional[DayRecord]] = {}
            if dates:
                rows = CalendarDay.objects.filter(calendar=calendar, date__gte=min(dates), date__lte=max(dates))
                for row in rows:
                    # None marks "row exists but deleted" so the month JSON is not consulted
                    day_rows[row.date] = None if row.is_deleted else DayRecord.from_row(row)

            terms = {
                t.term_id: t.display_name
                for t in CalendarTerm.objects.filter(calendar=calendar)
            }
        except DatabaseError as e:
            raise CalendarSourceError(f"Failed to load calendar {fiscal_year}/{calendar_id}: {e}") from e

        return cls(day_rows=day_rows, month_days=month_days, terms=terms)

    def day_record(self, day: date) -> Optional[DayRecord]:
        if day in self._day_rows:
            return self._day_rows[day]

        raw = (self._month_days.get(day.strftime("%Y-%m")) or {}).get(day.isoformat())
        if isinstance(raw, Mapping):
            if raw.get("isDeleted") is True:
                return None
            return DayRecord.from_mapping(raw)
        return None

    def term_name(self, term_id: str) -> str:
        return self._terms.get(term_id, "")
