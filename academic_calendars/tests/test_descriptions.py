"""
CHANGE LOG
- 2026-02-03 • Day description rules (holiday line, Sunday/class-day/term line).
"""

from __future__ import annotations

from datetime import date

from django.test import SimpleTestCase

from academic_calendars.services.descriptions import build_notebook_days, describe_day, weekday_label
from academic_calendars.services.sources import DayRecord, InMemoryCalendarSource

TERMS = {"t1": "前期"}


class DescribeDayTests(SimpleTestCase):
    def setUp(self):
        self.source = InMemoryCalendarSource(terms=TERMS)

    def test_absent_record_is_blank(self):
        day = describe_day(date(2025, 4, 10), None, self.source)
        self.assertEqual((day.description_a, day.description_b, day.is_holiday), ("", "", False))

    def test_class_day_with_term(self):
        rec = DayRecord(day_type="授業日", class_weekday=1, class_order=3, term_id="t1")
        day = describe_day(date(2025, 4, 10), rec, self.source)
        self.assertEqual(day.description_b, "前期 月曜授業日 (3)")

    def test_class_day_without_known_term(self):
        rec = DayRecord(day_type="授業日", class_weekday=5, class_order=12, term_id="unknown")
        day = describe_day(date(2025, 4, 10), rec, self.source)
        self.assertEqual(day.description_b, "金曜授業日 (12)")

    def test_class_day_missing_order_falls_back_to_term(self):
        rec = DayRecord(day_type="授業日", class_weekday=1, term_id="t1")
        day = describe_day(date(2025, 4, 10), rec, self.source)
        self.assertEqual(day.description_b, "前期")

    def test_sunday_shows_term_even_on_class_day(self):
        rec = DayRecord(day_type="授業日", class_weekday=1, class_order=2, term_id="t1")
        day = describe_day(date(2025, 4, 6), rec, self.source)  # Sunday
        self.assertEqual(day.description_b, "前期")

    def test_holiday_name_on_line_a(self):
        rec = DayRecord(is_holiday=True, national_holiday_name="昭和の日", term_id="t1")
        day = describe_day(date(2025, 4, 29), rec, self.source)
        self.assertTrue(day.is_holiday)
        self.assertEqual(day.description_a, "昭和の日")
        self.assertEqual(day.description_b, "前期")

    def test_weekday_label(self):
        self.assertEqual(weekday_label(3), "水曜")
        self.assertEqual(weekday_label(None), "")
        self.assertEqual(weekday_label(9), "")


class BuildNotebookDaysTests(SimpleTestCase):
    def test_whole_weeks_and_lookups(self):
        source = InMemoryCalendarSource(
            days={date(2025, 4, 29): DayRecord(is_holiday=True, national_holiday_name="昭和の日")},
            terms=TERMS,
        )
        days = build_notebook_days("2025", source)
        self.assertEqual(len(days) % 7, 0)
        self.assertEqual(days[0].date, date(2025, 3, 31))
        by_date = {d.date: d for d in days}
        self.assertEqual(by_date[date(2025, 4, 29)].description_a, "昭和の日")
        self.assertEqual(by_date[date(2025, 4, 30)].description_a, "")
