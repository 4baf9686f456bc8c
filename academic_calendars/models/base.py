"""
academic_calendars.models.base
Abstract base classes shared by the calendar models.
"""
from django.db import models


class TimeStampedModel(models.Model):
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True, db_index=True)

    class Meta:
        abstract = True


class CalendarChildModel(TimeStampedModel):
    """
    Anything that hangs off a single Calendar (days, months, terms).
    """
    calendar = models.ForeignKey(
        "academic_calendars.Calendar",
        on_delete=models.CASCADE,
        related_name="%(class)ss",
    )

    class Meta:
        abstract = True
