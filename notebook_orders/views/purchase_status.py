"""
notebook_orders.views.purchase_status

GET /api/purchase-status/?session_id=cs_...  (polled by /purchase/complete)
"""

from __future__ import annotations

import logging

from django.db import DatabaseError
from django.http import HttpRequest, JsonResponse
from django.views.decorators.http import require_GET

from notebook_orders.status import purchase_status

from .utils import _json_error, _json_response

log = logging.getLogger("refillstore")

__all__ = ["purchase_status_view"]


@require_GET
def purchase_status_view(request: HttpRequest) -> JsonResponse:
    session_id = (request.GET.get("session_id") or "").strip()
    if not session_id:
        return _json_error("session_id is required", 400)

    try:
        return _json_response(purchase_status(session_id))
    except DatabaseError:
        log.exception("[status] failed to fetch purchase status session=%s", session_id)
        return _json_error("Failed to fetch purchase status", 500)
