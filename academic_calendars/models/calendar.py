"""
academic_calendars.models.calendar

One published academic calendar for a fiscal year, plus the records that make it up.

Day data can live in two places and the calendar source reads both:
- CalendarDay: one row per date (editor output, may be soft-deleted)
- CalendarMonth: one row per YYYY-MM holding a JSON map of ISO date -> day record
  (bulk imports). Keys follow the import format: isHoliday, type, classWeekday,
  classOrder, termId, nationalHolidayName, isDeleted.
"""
from django.db import models

from .base import CalendarChildModel, TimeStampedModel


# Value of CalendarDay.day_type / "type" that marks a class day.
CLASS_DAY_TYPE = "授業日"


class Calendar(TimeStampedModel):
    fiscal_year = models.CharField(max_length=4, db_index=True)
    calendar_id = models.CharField(max_length=128)
    university_code = models.CharField(max_length=32, db_index=True)
    name = models.CharField(max_length=200, blank=True, default="")
    is_publishable = models.BooleanField(default=True)
    order = models.IntegerField(default=0)

    class Meta:
        ordering = ("fiscal_year", "order")
        constraints = [
            models.UniqueConstraint(fields=["fiscal_year", "calendar_id"], name="cal_fy_calendar_uniq"),
        ]

    def __str__(self) -> str:
        return f"Calendar({self.fiscal_year}/{self.calendar_id})"


class CalendarDay(CalendarChildModel):
    date = models.DateField()
    is_holiday = models.BooleanField(default=False)
    day_type = models.CharField(max_length=32, blank=True, default="")
    class_weekday = models.PositiveSmallIntegerField(
        blank=True,
        null=True,
        help_text="Timetable weekday taught on this date (1=Mon ... 7=Sun).",
    )
    class_order = models.PositiveSmallIntegerField(
        blank=True,
        null=True,
        help_text="Nth occurrence of that timetable weekday in the term.",
    )
    term_id = models.CharField(max_length=128, blank=True, default="")
    national_holiday_name = models.CharField(max_length=128, blank=True, default="")
    is_deleted = models.BooleanField(default=False)

    class Meta:
        ordering = ("date",)
        constraints = [
            models.UniqueConstraint(fields=["calendar", "date"], name="calday_calendar_date_uniq"),
        ]

    def __str__(self) -> str:
        return f"CalendarDay({self.calendar_id}, {self.date.isoformat()})"


class CalendarMonth(CalendarChildModel):
    month_id = models.CharField(max_length=7, help_text="YYYY-MM")
    days = models.JSONField(default=dict, blank=True)

    class Meta:
        ordering = ("month_id",)
        constraints = [
            models.UniqueConstraint(fields=["calendar", "month_id"], name="calmonth_calendar_month_uniq"),
        ]

    def __str__(self) -> str:
        return f"CalendarMonth({self.calendar_id}, {self.month_id})"


class CalendarTerm(CalendarChildModel):
    term_id = models.CharField(max_length=128)
    name = models.CharField(max_length=128, blank=True, default="")
    # Display name used on the notebook when present (imports carry it as termName).
    term_name = models.CharField(max_length=128, blank=True, null=True, default=None)

    class Meta:
        ordering = ("term_id",)
        constraints = [
            models.UniqueConstraint(fields=["calendar", "term_id"], name="calterm_calendar_term_uniq"),
        ]

    def __str__(self) -> str:
        return self.display_name or self.term_id

    @property
    def display_name(self) -> str:
        return (self.term_name if self.term_name is not None else self.name or "").strip()
