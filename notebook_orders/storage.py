"""
notebook_orders.storage

Blob store for generated refills, backed by a named entry in settings.STORAGES.

- put(path, data) writes through the Django storage backend (FileSystemStorage in
  the default setup; any STORAGES backend works).
- signed_url(path, ttl) returns an absolute /api/downloads/<token>/ URL. The token is
  a django.core.signing payload, so the link is tamper-proof and expires after ttl.
"""
from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Optional

from django.conf import settings
from django.core import signing
from django.core.files.base import ContentFile
from django.core.files.storage import InvalidStorageError, storages
from django.urls import reverse
from django.utils import timezone

from .exceptions import GenerationFailed
from .models import DownloadGrant

log = logging.getLogger("refillstore")

DOWNLOAD_SALT = "notebook_orders.download"


def artifact_path(owner_id: str, fiscal_year: str, calendar_id: str, epoch_ms: int) -> str:
    return f"system-notebook/{owner_id}/{fiscal_year}-{calendar_id}-{epoch_ms}.pdf"


def make_download_token(alias: str, path: str) -> str:
    return signing.dumps({"s": alias, "p": path}, salt=DOWNLOAD_SALT)


def read_download_token(token: str, max_age: int) -> dict:
    """Raises signing.SignatureExpired / signing.BadSignature."""
    return signing.loads(token, salt=DOWNLOAD_SALT, max_age=max_age)


class BlobStore:
    def __init__(self, alias: str):
        alias = (alias or "").strip()
        if not alias:
            raise GenerationFailed("Missing storage target")
        try:
            self.storage = storages[alias]
        except InvalidStorageError as e:
            raise GenerationFailed(f"Unknown storage target: {alias}") from e
        self.alias = alias

    def put(self, path: str, data: bytes, content_type: str = "application/pdf") -> str:
        # FileSystemStorage never overwrites; a collision gets a suffixed name back
        saved = self.storage.save(path, ContentFile(data))
        log.info("[storage] saved %s (%s bytes, %s) to '%s'", saved, len(data), content_type, self.alias)
        return saved

    def signed_url(self, path: str, ttl: timedelta, now: Optional[datetime] = None) -> DownloadGrant:
        now = now or timezone.now()
        token = make_download_token(self.alias, path)
        rel = reverse("notebook_orders:download", kwargs={"token": token})
        base = (getattr(settings, "SITE_BASE_URL", "") or "").rstrip("/")
        return DownloadGrant(url=f"{base}{rel}", expires_at=now + ttl, path=path)
