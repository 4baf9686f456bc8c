"""
notebook_orders.ledger

Idempotency ledger for paid checkout events.

A Stripe event is applied at most once per owner: its id is appended to
NotebookOwner.processed_event_ids in the same transaction that moves the owner
and the order to `paid_processing`. Redeliveries find the id and are reported as
duplicates without writing anything.

========= CHANGE LOG =========
2026-02-01 • ADD: extract_paid_event / apply_paid_event.
2026-02-05 • CHANGE: owner row locked with select_for_update() before the dedup check
             (two concurrent deliveries of the same event used to both pass).
2026-02-11 • FIX: events without an id are rejected; the dedup check no longer has a bypass.
2026-02-11 • FIX: a new session clears the owner's previous download grant.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from django.db import DatabaseError, transaction
from django.utils import timezone

from .exceptions import MissingMetadata, StoreUnavailable
from .models import NotebookOrder, NotebookOwner, Status
from .state import StatusWriteSet

log = logging.getLogger("refillstore")

PAID_EVENT_TYPE = "checkout.session.completed"


def _clean(val: Any) -> str:
    if val is None:
        return ""
    return str(val).strip()


@dataclass(frozen=True)
class PaidEvent:
    event_id: str
    session_id: str
    user_id: str
    calendar_id: str
    fiscal_year: str
    buyer_email: Optional[str] = None
    university_code: str = ""

    def dispatch_payload(self) -> Dict[str, Any]:
        return {
            "userId": self.user_id,
            "calendarId": self.calendar_id,
            "fiscalYear": self.fiscal_year,
            "sessionId": self.session_id,
            "buyerEmail": self.buyer_email,
            "source": "stripe_webhook",
        }


@dataclass(frozen=True)
class LedgerResult:
    duplicate: bool
    owner_id: str
    session_id: str


def extract_paid_event(event: Dict[str, Any]) -> PaidEvent:
    """
    Pull what the pipeline needs out of a checkout.session.completed event.

    The event id and metadata.userId / calendarId / fiscalYear are required. The session id is
    metadata.sessionId when present, else the checkout session object id.
    """
    event_id = _clean(event.get("id"))
    if not event_id:
        raise MissingMetadata("Missing event id")

    obj = (event.get("data") or {}).get("object") or {}
    metadata = obj.get("metadata") or {}

    user_id = _clean(metadata.get("userId"))
    calendar_id = _clean(metadata.get("calendarId"))
    fiscal_year = _clean(metadata.get("fiscalYear"))
    if not user_id or not calendar_id or not fiscal_year:
        raise MissingMetadata()

    session_id = _clean(metadata.get("sessionId")) or _clean(obj.get("id"))
    if not session_id:
        raise MissingMetadata("Missing session id")

    customer_details = obj.get("customer_details") or {}
    buyer_email = _clean(customer_details.get("email")) or _clean(obj.get("customer_email")) or None

    return PaidEvent(
        event_id=event_id,
        session_id=session_id,
        user_id=user_id,
        calendar_id=calendar_id,
        fiscal_year=fiscal_year,
        buyer_email=buyer_email,
        university_code=_clean(metadata.get("universityCode")),
    )


def apply_paid_event(event: PaidEvent, storage_alias: str) -> LedgerResult:
    """
    Record a paid event exactly once. Returns LedgerResult(duplicate=True) without
    writing when the owner already processed event.event_id.
    """
    now = timezone.now()
    try:
        with transaction.atomic():
            owner, _ = NotebookOwner.objects.select_for_update().get_or_create(user_id=event.user_id)
            if owner.has_processed(event.event_id):
                log.info("[ledger] duplicate event %s for owner %s", event.event_id, event.user_id)
                return LedgerResult(duplicate=True, owner_id=event.user_id, session_id=event.session_id)

            order = (
                NotebookOrder.objects.select_for_update()
                .filter(session_id=event.session_id)
                .first()
            )
            if order is None:
                order = NotebookOrder(session_id=event.session_id, owner=owner)
            elif order.owner_id != owner.pk:
                log.warning(
                    "[ledger] order %s re-pointed from owner pk=%s to %s",
                    event.session_id,
                    order.owner_id,
                    event.user_id,
                )

            order_only: Dict[str, Any] = {"owner": owner}
            if event.university_code:
                order_only["university_code"] = event.university_code

            processed = list(owner.processed_event_ids or []) + [event.event_id]

            ws = StatusWriteSet(owner, order)
            if owner.session_id != event.session_id:
                ws.clear_owner_grant()
            (
                ws.set_status(Status.PAID_PROCESSING, now=now, error_message="")
                .set(
                    calendar_id=event.calendar_id,
                    fiscal_year=event.fiscal_year,
                    buyer_email=event.buyer_email,
                    storage_alias=storage_alias,
                    last_event_id=event.event_id,
                )
                .set_owner_only(session_id=event.session_id, processed_event_ids=processed)
                .set_order_only(**order_only)
                .save()
            )
    except DatabaseError as e:
        raise StoreUnavailable(f"State store unavailable: {e}") from e

    log.info(
        "[ledger] applied event %s: owner=%s session=%s -> %s",
        event.event_id,
        event.user_id,
        event.session_id,
        Status.PAID_PROCESSING,
    )
    return LedgerResult(duplicate=False, owner_id=event.user_id, session_id=event.session_id)
