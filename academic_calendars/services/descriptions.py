"""
academic_calendars.services.descriptions

Turns calendar records into the two free-text lines printed under each date.

  description_a : national holiday name (or "")
  description_b : term / class-day label
                  - Sundays: the term name
                  - class days with timetable weekday + order: "<term> 月曜授業日 (3)"
                  - otherwise: the term name

The renderer treats both strings as opaque text.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import List, Optional

from academic_calendars.models import CLASS_DAY_TYPE

from .fiscal_year import fiscal_year_dates, parse_fiscal_year
from .sources import CalendarSource, DayRecord

WEEKDAY_JA = {
    1: "月曜",
    2: "火曜",
    3: "水曜",
    4: "木曜",
    5: "金曜",
    6: "土曜",
    7: "日曜",
}


@dataclass(frozen=True)
class NotebookDay:
    date: date
    is_holiday: bool
    description_a: str
    description_b: str

    @property
    def iso(self) -> str:
        return self.date.isoformat()


def weekday_label(class_weekday: Optional[int]) -> str:
    return WEEKDAY_JA.get(class_weekday or 0, "")


def describe_day(day: date, record: Optional[DayRecord], source: CalendarSource) -> NotebookDay:
    if record is None:
        return NotebookDay(date=day, is_holiday=False, description_a="", description_b="")

    term_name = source.term_name(record.term_id) if record.term_id else ""

    if day.weekday() == 6:
        description_b = term_name
    elif record.day_type == CLASS_DAY_TYPE and record.class_weekday and record.class_order:
        prefix = f"{term_name} " if term_name else ""
        description_b = f"{prefix}{weekday_label(record.class_weekday)}授業日 ({record.class_order})"
    else:
        description_b = term_name

    return NotebookDay(
        date=day,
        is_holiday=record.is_holiday,
        description_a=record.national_holiday_name or "",
        description_b=description_b,
    )


def build_notebook_days(fiscal_year, source: CalendarSource) -> List[NotebookDay]:
    """Every day of the padded fiscal year, described. Length is a multiple of 7."""
    year = parse_fiscal_year(fiscal_year)
    return [describe_day(d, source.day_record(d), source) for d in fiscal_year_dates(year)]
