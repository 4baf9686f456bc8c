"""
notebook_orders.models.status

Order lifecycle shared by NotebookOrder and NotebookOwner.

  received -> paid_processing -> generating_artifact -> completed
  any non-terminal -> failed
"""
from __future__ import annotations

from django.db import models


class Status(models.TextChoices):
    RECEIVED = "received", "Received"
    PAID_PROCESSING = "paid_processing", "Paid, processing"
    GENERATING_ARTIFACT = "generating_artifact", "Generating artifact"
    COMPLETED = "completed", "Completed"
    FAILED = "failed", "Failed"


TERMINAL_STATUSES = frozenset({Status.COMPLETED, Status.FAILED})
