"""
academic_calendars.models.university
Universities that publish academic calendars (directory data, read-only for the API).
"""
from django.db import models

from .base import TimeStampedModel


class University(TimeStampedModel):
    code = models.CharField(max_length=32, unique=True)
    name = models.CharField(max_length=200, db_index=True)
    furigana = models.CharField(max_length=200, blank=True, default="")

    class Meta:
        ordering = ("name",)
        verbose_name_plural = "Universities"

    def __str__(self) -> str:
        return f"{self.name} ({self.code})"
