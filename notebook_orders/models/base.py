"""
notebook_orders.models.base

Fields mirrored between NotebookOrder and NotebookOwner. Both rows carry the same
status block and download grant; `notebook_orders.state.StatusWriteSet` writes them
together so they never drift.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from django.db import models
from django.utils import timezone

from .status import Status


@dataclass(frozen=True)
class DownloadGrant:
    url: str
    expires_at: datetime
    path: str

    def as_dict(self) -> dict:
        return {"url": self.url, "expiresAt": self.expires_at.isoformat(), "path": self.path}


class MirroredStatusModel(models.Model):
    # ---- status ----
    status = models.CharField(
        max_length=32,
        choices=Status.choices,
        default=Status.RECEIVED,
        db_index=True,
    )
    status_updated_at = models.DateTimeField(default=timezone.now, db_index=True)
    error_message = models.TextField(blank=True, default="")

    # ---- generation request ----
    calendar_id = models.CharField(max_length=128, blank=True, default="")
    fiscal_year = models.CharField(max_length=4, blank=True, default="")
    buyer_email = models.EmailField(
        blank=True,
        null=True,
        help_text="Only used for the watermark on the cover page.",
    )
    storage_alias = models.CharField(
        max_length=64,
        blank=True,
        default="",
        help_text="Key in settings.STORAGES the artifact is written to.",
    )
    last_event_id = models.CharField(max_length=255, blank=True, default="", db_index=True)

    # ---- download grant (replaced on regeneration) ----
    download_url = models.URLField(max_length=1024, blank=True, default="")
    download_expires_at = models.DateTimeField(blank=True, null=True)
    download_path = models.CharField(max_length=512, blank=True, default="")
    download_updated_at = models.DateTimeField(blank=True, null=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True

    @property
    def download_grant(self) -> Optional[DownloadGrant]:
        if not self.download_url or not self.download_expires_at:
            return None
        return DownloadGrant(url=self.download_url, expires_at=self.download_expires_at, path=self.download_path)
