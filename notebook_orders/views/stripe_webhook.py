"""
notebook_orders.views.stripe_webhook

Stripe webhook endpoint: payment success -> record the paid order -> hand off to
the artifact worker.

LOCKED INTENT
- Only checkout.session.completed is acted on; every other type is acknowledged.
- The ledger is applied at most once per Stripe event id (redeliveries are no-ops).
- Dispatch to the worker happens after the ledger commit and never rolls it back.

SETTINGS
- STRIPE_WEBHOOK_SECRET (required) : Stripe webhook signing secret (whsec_...)
- NOTEBOOK_ARTIFACT_STORAGE         : storage alias stamped on the order
- NOTEBOOK_DISPATCH_URL / _TOKEN    : worker endpoint (optional)

======== CHANGE LOG ========
2026-02-01
- ADD: Signature check (notebook_orders.signature) + ledger + dispatch.

2026-02-06
- CHANGE: A failed dispatch is logged and answered with 200. The order is durable in
  paid_processing and a Stripe retry would be deduplicated without redispatching,
  so a 500 here bought nothing. The process_notebook_orders command picks it up.
"""

from __future__ import annotations

import json
import logging

from django.conf import settings
from django.http import HttpRequest, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

from notebook_orders.dispatch import JobDispatcher
from notebook_orders.exceptions import DispatchFailed, MissingMetadata, SignatureInvalid, StoreUnavailable
from notebook_orders.ledger import PAID_EVENT_TYPE, apply_paid_event, extract_paid_event
from notebook_orders.signature import verify_signature

from .utils import _json_error, _json_response

log = logging.getLogger("refillstore")

__all__ = ["stripe_webhook"]


@csrf_exempt
@require_POST
def stripe_webhook(request: HttpRequest) -> JsonResponse:
    secret = (getattr(settings, "STRIPE_WEBHOOK_SECRET", "") or "").strip()
    if not secret:
        log.error("[webhook] misconfigured: STRIPE_WEBHOOK_SECRET is empty")
        return _json_error("Stripe webhook secret is not configured", 500)

    payload = request.body  # raw bytes
    try:
        verify_signature(payload, request.META.get("HTTP_STRIPE_SIGNATURE"), secret)
    except SignatureInvalid as e:
        return _json_error(str(e), 400)

    try:
        event = json.loads(payload.decode("utf-8"))
    except (UnicodeDecodeError, ValueError):
        log.warning("[webhook] signed payload is not valid JSON (len=%s)", len(payload))
        return _json_error("Invalid payload", 400)
    if not isinstance(event, dict):
        return _json_error("Invalid payload", 400)

    event_type = str(event.get("type") or "")
    log.info("[webhook] received id=%s type=%s", event.get("id"), event_type)
    if event_type != PAID_EVENT_TYPE:
        return _json_response({"received": True})

    try:
        paid = extract_paid_event(event)
    except MissingMetadata as e:
        log.warning("[webhook] event %s rejected: %s", event.get("id"), e)
        return _json_error(str(e), 400)

    try:
        result = apply_paid_event(paid, storage_alias=getattr(settings, "NOTEBOOK_ARTIFACT_STORAGE", ""))
    except StoreUnavailable:
        log.exception("[webhook] failed to record event %s", paid.event_id)
        return _json_error("Failed to update payment status", 500)

    if result.duplicate:
        return _json_response({"received": True})

    try:
        JobDispatcher.from_settings().dispatch(paid)
    except DispatchFailed as e:
        log.error("[webhook] dispatch failed for session=%s: %s (order stays paid_processing)", paid.session_id, e)

    return _json_response({"received": True})
