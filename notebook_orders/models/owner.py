"""
notebook_orders.models.owner

The paying user's aggregate record. Mirrors the status of their latest order and
keeps the append-only set of provider event ids already applied (webhook dedup).
"""
from __future__ import annotations

from django.db import models

from .base import MirroredStatusModel


class NotebookOwner(MirroredStatusModel):
    user_id = models.CharField(
        max_length=128,
        unique=True,
        help_text="Owner identifier from checkout metadata (userId).",
    )
    session_id = models.CharField(
        max_length=255,
        blank=True,
        default="",
        help_text="Checkout session id of the latest applied payment.",
    )
    processed_event_ids = models.JSONField(
        default=list,
        blank=True,
        help_text="Provider event ids already applied. Append-only.",
    )

    class Meta:
        ordering = ("-updated_at",)

    def __str__(self) -> str:
        return f"NotebookOwner({self.user_id})<{self.status}>"

    def has_processed(self, event_id: str) -> bool:
        return isinstance(self.processed_event_ids, list) and event_id in self.processed_event_ids
