"""
notebook_orders.views.debug

Operator endpoints for exercising the pipeline without Stripe.

- POST /api/debug/trigger-session/ : creates a synthetic paid_processing order
  (debug owner, current year, "debug-calendar"). With {"run": true} the worker is
  run inline and its outcome is included.
- GET /api/debug/session-status/?sessionId=&userId= : order status + owner grant.

Gate: open when DEBUG, otherwise X-Debug-Token must equal NOTEBOOK_DEBUG_TRIGGER_TOKEN.
"""

from __future__ import annotations

import logging
import uuid

from django.conf import settings
from django.db import DatabaseError, transaction
from django.http import HttpRequest, JsonResponse
from django.utils import timezone
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST

from notebook_orders.models import NotebookOrder, NotebookOwner, Status
from notebook_orders.state import StatusWriteSet
from notebook_orders.status import debug_session_status
from notebook_orders.worker import ArtifactWorker

from .utils import _debug_access_ok, _json_error, _json_response, _parse_json_body

log = logging.getLogger("refillstore")

__all__ = ["debug_trigger_session", "debug_session_status_view"]

DEBUG_CALENDAR_ID = "debug-calendar"
DEBUG_BUYER_EMAIL = "debug@example.com"


@csrf_exempt
@require_POST
def debug_trigger_session(request: HttpRequest) -> JsonResponse:
    if not _debug_access_ok(request):
        return _json_error("Forbidden", 403)

    storage_alias = (getattr(settings, "NOTEBOOK_ARTIFACT_STORAGE", "") or "").strip()
    if not storage_alias:
        return _json_error("NOTEBOOK_ARTIFACT_STORAGE is not configured", 500)

    data = _parse_json_body(request) or {}
    session_id = str(uuid.uuid4())
    user_id = f"debug-user-{session_id[:8]}"
    fiscal_year = str(data.get("fiscalYear") or timezone.localdate().year)
    calendar_id = str(data.get("calendarId") or DEBUG_CALENDAR_ID)

    try:
        with transaction.atomic():
            owner = NotebookOwner.objects.create(user_id=user_id)
            order = NotebookOrder(session_id=session_id, owner=owner)
            (
                StatusWriteSet(owner, order)
                .set_status(Status.PAID_PROCESSING, error_message="")
                .set(
                    calendar_id=calendar_id,
                    fiscal_year=fiscal_year,
                    buyer_email=DEBUG_BUYER_EMAIL,
                    storage_alias=storage_alias,
                )
                .set_owner_only(session_id=session_id)
                .save()
            )
    except DatabaseError:
        log.exception("[debug] could not create synthetic order")
        return _json_error("Failed to create debug session", 500)

    log.info("[debug] synthetic order session=%s user=%s", session_id, user_id)
    payload = {"sessionId": session_id, "userId": user_id}
    if data.get("run") is True:
        payload["outcome"] = ArtifactWorker().run(session_id).as_dict()
    return _json_response(payload)


@require_GET
def debug_session_status_view(request: HttpRequest) -> JsonResponse:
    if not _debug_access_ok(request):
        return _json_error("Forbidden", 403)

    session_id = (request.GET.get("sessionId") or "").strip()
    user_id = (request.GET.get("userId") or "").strip()
    if not session_id or not user_id:
        return _json_error("sessionId and userId are required", 400)

    return _json_response(debug_session_status(session_id, user_id))
