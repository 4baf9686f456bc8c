"""
notebook_orders.views.jobs

POST /api/jobs/generate/ : the dispatch target. Runs the artifact worker for one
order synchronously and reports the outcome.

Auth: `Authorization: Bearer <NOTEBOOK_WORKER_TOKEN>`. With no token configured the
endpoint is closed (403), never open.
"""

from __future__ import annotations

import logging

from django.conf import settings
from django.http import HttpRequest, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

from notebook_orders.exceptions import StoreUnavailable
from notebook_orders.worker import ArtifactWorker

from .utils import _bearer_token_ok, _json_error, _json_response, _parse_json_body

log = logging.getLogger("refillstore")

__all__ = ["generate_job"]


@csrf_exempt
@require_POST
def generate_job(request: HttpRequest) -> JsonResponse:
    if not _bearer_token_ok(request, getattr(settings, "NOTEBOOK_WORKER_TOKEN", "")):
        return _json_error("Forbidden", 403)

    data = _parse_json_body(request)
    if data is None:
        return _json_error("Invalid request body", 400)

    session_id = str(data.get("sessionId") or "").strip()
    if not session_id:
        return _json_error("sessionId is required", 400)

    log.info("[jobs] generate requested session=%s source=%s", session_id, data.get("source") or "unknown")
    try:
        outcome = ArtifactWorker().run(session_id)
    except StoreUnavailable:
        log.exception("[jobs] state store unavailable session=%s", session_id)
        return _json_error("Failed to update order status", 500)

    # a failed generation is a recorded terminal state, not a transport error
    return _json_response(outcome.as_dict())
