"""
notebook_orders.status

Read-only purchase status for the polling front end.

An order that does not exist yet is reported as "processing": the browser can
land on the completion page before Stripe's webhook has been delivered.

========= CHANGE LOG =========
2026-02-01 • ADD: purchase_status / debug_session_status.
2026-02-11 • FIX: `received` orders read as processing; the owner mirror is only
             trusted while owner.session_id is this session.
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from .models import NotebookOrder, NotebookOwner, Status

PROCESSING = "processing"


def _grant_url(record) -> Optional[str]:
    if record is None:
        return None
    grant = record.download_grant
    return grant.url if grant is not None else None


def _order(session_id: str) -> Optional[NotebookOrder]:
    session_id = (session_id or "").strip()
    if not session_id:
        return None
    return NotebookOrder.objects.select_related("owner").filter(session_id=session_id).first()


def purchase_status(session_id: str, user_id: Optional[str] = None) -> Dict[str, Any]:
    """
    -> {"status", "downloadUrl", "errorMessage"}

    An order that is missing, or only `received` (checkout opened, no paid webhook
    yet), reads as processing with no link.

    The owner record (the order's owner, or the owner named by user_id) is the
    source for status and grant only while it still describes this session. Once
    the buyer has started another purchase, the order's own copy answers, so an
    older notebook's link never leaks onto a different session.
    """
    order = _order(session_id)
    if order is None or order.status == Status.RECEIVED:
        return {"status": PROCESSING, "downloadUrl": None, "errorMessage": None}

    owner: Optional[NotebookOwner]
    if user_id:
        owner = NotebookOwner.objects.filter(user_id=user_id.strip()).first()
    else:
        owner = order.owner

    record = owner if owner is not None and owner.session_id == order.session_id else order
    return {
        "status": record.status,
        "downloadUrl": _grant_url(record),
        "errorMessage": (order.error_message or record.error_message) or None,
    }


def debug_session_status(session_id: str, user_id: str) -> Dict[str, Any]:
    """
    Operator view: status and error from the order itself, download URL from the
    owner. Missing rows yield None values rather than "processing".
    """
    order = _order(session_id)
    owner = NotebookOwner.objects.filter(user_id=(user_id or "").strip()).first()
    return {
        "status": order.status if order is not None else None,
        "errorMessage": (order.error_message or None) if order is not None else None,
        "downloadUrl": _grant_url(owner),
    }
