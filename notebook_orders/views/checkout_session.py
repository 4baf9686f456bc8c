"""
notebook_orders.views.checkout_session

Create Stripe Checkout Sessions for a refill notebook.

Purpose
- Finds (or creates) the Stripe customer for the buyer, opens a Checkout Session
  with userId / calendarId / fiscalYear / universityCode in its metadata, and
  returns { sessionUrl }.
- Records a `received` NotebookOrder keyed by the session id so the completion page
  has something to poll before the webhook lands.

SETTINGS
- STRIPE_SECRET_KEY + STRIPE_PRICE_ID (required)

========= CHANGE LOG =========
2026-02-01
- ADD: create_checkout_session (customer search/create + session create).
2026-02-08
- ADD: `received` order row at checkout time (university_code kept for admin).
- KEEP: A failed local write does not block checkout; the webhook creates the order.
2026-02-11
- FIX: customer search values are quoted with escapes (an apostrophe no longer breaks the lookup).
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import stripe
from django.conf import settings
from django.db import DatabaseError, transaction
from django.http import HttpRequest, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

from notebook_orders.models import NotebookOrder, NotebookOwner, Status

from .utils import _json_error, _json_response, _parse_json_body

log = logging.getLogger("refillstore")

__all__ = ["create_checkout_session"]

REQUIRED_FIELDS = ("userId", "email", "calendarId", "fiscalYear", "universityCode")


def _search_literal(value: str) -> str:
    """Quote a value for the Stripe search query language (backslash escapes)."""
    escaped = value.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


def _find_or_create_customer(user_id: str, email: str):
    query = f"email:{_search_literal(email)} AND metadata['uid']:{_search_literal(user_id)}"
    try:
        found = stripe.Customer.search(query=query, limit=1)
        if found.data:
            return found.data[0]
    except stripe.StripeError:
        log.exception("[checkout] customer search failed; creating a new customer")

    return stripe.Customer.create(email=email, metadata={"uid": user_id})


def _record_received_order(session_id: str, fields: Dict[str, str]) -> Optional[NotebookOrder]:
    try:
        with transaction.atomic():
            owner, _ = NotebookOwner.objects.get_or_create(user_id=fields["userId"])
            order, created = NotebookOrder.objects.get_or_create(
                session_id=session_id,
                defaults={
                    "owner": owner,
                    "status": Status.RECEIVED,
                    "calendar_id": fields["calendarId"],
                    "fiscal_year": fields["fiscalYear"],
                    "university_code": fields["universityCode"],
                    "buyer_email": fields["email"],
                    "storage_alias": getattr(settings, "NOTEBOOK_ARTIFACT_STORAGE", ""),
                },
            )
    except DatabaseError:
        log.exception("[checkout] could not record received order session=%s", session_id)
        return None
    log.info("[checkout] order session=%s recorded created=%s", session_id, created)
    return order


@csrf_exempt
@require_POST
def create_checkout_session(request: HttpRequest) -> JsonResponse:
    """
    POST JSON body:
      {
        "userId": "...",
        "email": "buyer@example.com",
        "calendarId": "...",
        "fiscalYear": "2025",
        "universityCode": "..."
      }
    """
    secret_key = (getattr(settings, "STRIPE_SECRET_KEY", "") or "").strip()
    price_id = (getattr(settings, "STRIPE_PRICE_ID", "") or "").strip()
    if not secret_key or not price_id:
        log.error("[checkout] misconfigured: secret_key=%s price_id=%s", bool(secret_key), bool(price_id))
        return _json_error("Stripe is not configured", 500)

    data = _parse_json_body(request)
    if data is None:
        return _json_error("Invalid request body", 400)

    fields: Dict[str, Any] = {k: str(data.get(k) or "").strip() for k in REQUIRED_FIELDS}
    if not all(fields.values()):
        return _json_error(", ".join(REQUIRED_FIELDS) + " are required", 400)

    stripe.api_key = secret_key
    origin = request.build_absolute_uri("/").rstrip("/")

    try:
        customer = _find_or_create_customer(fields["userId"], fields["email"])
        session = stripe.checkout.Session.create(
            customer=customer.id,
            mode="payment",
            line_items=[{"price": price_id, "quantity": 1}],
            metadata={
                "userId": fields["userId"],
                "calendarId": fields["calendarId"],
                "fiscalYear": fields["fiscalYear"],
                "universityCode": fields["universityCode"],
            },
            success_url=f"{origin}/purchase/complete?session_id={{CHECKOUT_SESSION_ID}}",
            cancel_url=f"{origin}/refill-edit",
        )
    except stripe.StripeError:
        log.exception("[checkout] Stripe checkout session create failed")
        return _json_error("Failed to start checkout", 500)

    url = getattr(session, "url", None)
    if not url:
        return _json_error("Failed to create checkout session", 500)

    log.info("[checkout] session=%s created for user=%s", session.id, fields["userId"])
    _record_received_order(session.id, fields)
    return _json_response({"sessionUrl": url})
