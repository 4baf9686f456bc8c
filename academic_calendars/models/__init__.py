"""
Aggregate the concrete calendar models.
Django imports this package as `academic_calendars.models`.
"""
from .base import TimeStampedModel, CalendarChildModel  # abstract
from .university import University
from .calendar import CLASS_DAY_TYPE, Calendar, CalendarDay, CalendarMonth, CalendarTerm

__all__ = [
    # Abstracts
    "TimeStampedModel",
    "CalendarChildModel",
    # Concrete
    "University",
    "Calendar",
    "CalendarDay",
    "CalendarMonth",
    "CalendarTerm",
    # Constants
    "CLASS_DAY_TYPE",
]
