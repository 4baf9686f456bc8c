"""
notebook_orders.models.order

One Stripe Checkout purchase of a notebook refill (keyed by checkout session id).

========= CHANGE LOG =========
2026-02-01 • ADD: NotebookOrder with mirrored status block (see models.base).
2026-02-08 • ADD: university_code captured at checkout (directory lookups / admin filtering).
"""
from __future__ import annotations

from django.db import models

from .base import MirroredStatusModel
from .owner import NotebookOwner


class NotebookOrder(MirroredStatusModel):
    session_id = models.CharField(
        max_length=255,
        unique=True,
        help_text="Stripe Checkout Session id (cs_...).",
    )
    owner = models.ForeignKey(
        NotebookOwner,
        on_delete=models.PROTECT,
        related_name="orders",
    )
    university_code = models.CharField(max_length=32, blank=True, default="")

    class Meta:
        ordering = ("-created_at",)
        indexes = [
            models.Index(fields=["status", "status_updated_at"]),
        ]

    def __str__(self) -> str:
        return f"NotebookOrder({self.session_id})<{self.status}>"
