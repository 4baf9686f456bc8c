"""
notebook_orders.views.downloads

GET /api/downloads/<token>/ : streams a generated refill.

The token is what BlobStore.signed_url() issued: a signed {storage alias, path}
pair that expires after NOTEBOOK_DOWNLOAD_TTL_SECONDS.
  expired token          -> 410
  bad token / no blob    -> 404
"""

from __future__ import annotations

import logging
import posixpath

from django.conf import settings
from django.core import signing
from django.core.files.storage import InvalidStorageError, storages
from django.http import FileResponse, Http404, HttpRequest, HttpResponse
from django.views.decorators.http import require_GET

from notebook_orders.storage import read_download_token

from .utils import _json_error

log = logging.getLogger("refillstore")

__all__ = ["download_artifact"]


@require_GET
def download_artifact(request: HttpRequest, token: str) -> HttpResponse:
    ttl = int(getattr(settings, "NOTEBOOK_DOWNLOAD_TTL_SECONDS", 7 * 24 * 3600))
    try:
        claims = read_download_token(token, max_age=ttl)
    except signing.SignatureExpired:
        return _json_error("Download link expired", 410)
    except signing.BadSignature:
        log.info("[downloads] rejected token (len=%s)", len(token))
        raise Http404("Not found")

    alias = str(claims.get("s") or "")
    path = str(claims.get("p") or "")
    try:
        storage = storages[alias]
    except InvalidStorageError:
        log.warning("[downloads] token names unknown storage '%s'", alias)
        raise Http404("Not found")

    if not path or not storage.exists(path):
        raise Http404("Not found")

    log.info("[downloads] serving %s from '%s'", path, alias)
    return FileResponse(
        storage.open(path, "rb"),
        as_attachment=True,
        filename=posixpath.basename(path),
        content_type="application/pdf",
    )
