"""
Shared fixtures for notebook_orders tests (no network, no PDF engines).
"""

from __future__ import annotations

import hashlib
import hmac
import json
import time
from typing import Any, Dict, List, Optional

from notebook_orders.models import NotebookOrder, NotebookOwner, Status
from notebook_orders.services.renderer import RenderedNotebook
from notebook_orders.state import StatusWriteSet

WEBHOOK_SECRET = "whsec_unit_test"

TEST_STORAGES = {
    "default": {"BACKEND": "django.core.files.storage.InMemoryStorage"},
    "staticfiles": {"BACKEND": "django.contrib.staticfiles.storage.StaticFilesStorage"},
    "artifacts": {"BACKEND": "django.core.files.storage.InMemoryStorage"},
}

PIPELINE_SETTINGS = dict(
    STRIPE_WEBHOOK_SECRET=WEBHOOK_SECRET,
    STORAGES=TEST_STORAGES,
    NOTEBOOK_ARTIFACT_STORAGE="artifacts",
    NOTEBOOK_DISPATCH_URL="",
    NOTEBOOK_GENERATE_ON_COMMIT=False,
    SITE_BASE_URL="http://testserver",
)


def sign(payload: bytes, secret: str = WEBHOOK_SECRET, ts: Optional[int] = None) -> str:
    ts = int(time.time()) if ts is None else ts
    sig = hmac.new(secret.encode("utf-8"), f"{ts}.".encode("utf-8") + payload, hashlib.sha256).hexdigest()
    return f"t={ts},v1={sig}"


def checkout_event(
    event_id: str = "evt_1",
    session_id: str = "cs_test_1",
    user_id: str = "user-1",
    calendar_id: str = "cal-a",
    fiscal_year: str = "2025",
    email: Optional[str] = "buyer@example.com",
    event_type: str = "checkout.session.completed",
    **metadata: Any,
) -> Dict[str, Any]:
    meta = {"userId": user_id, "calendarId": calendar_id, "fiscalYear": fiscal_year}
    meta.update(metadata)
    return {
        "id": event_id,
        "type": event_type,
        "data": {
            "object": {
                "id": session_id,
                "object": "checkout.session",
                "metadata": meta,
                "customer_details": {"email": email} if email else {},
            }
        },
    }


def event_bytes(event: Dict[str, Any]) -> bytes:
    return json.dumps(event).encode("utf-8")


def make_order(
    session_id: str = "cs_test_1",
    user_id: str = "user-1",
    status: str = Status.PAID_PROCESSING,
    storage_alias: str = "artifacts",
    **fields: Any,
) -> NotebookOrder:
    owner, _ = NotebookOwner.objects.get_or_create(user_id=user_id)
    order = NotebookOrder(session_id=session_id, owner=owner)
    values = {
        "calendar_id": "cal-a",
        "fiscal_year": "2025",
        "buyer_email": "buyer@example.com",
        "storage_alias": storage_alias,
    }
    order_only = {"university_code": fields.pop("university_code")} if "university_code" in fields else {}
    values.update(fields)
    (
        StatusWriteSet(owner, order)
        .set_status(status, error_message="")
        .set(**values)
        .set_owner_only(session_id=session_id)
        .set_order_only(**order_only)
        .save()
    )
    return order


def reload(order: NotebookOrder):
    order = NotebookOrder.objects.select_related("owner").get(pk=order.pk)
    return order, order.owner


class FakeRenderer:
    """Stands in for NotebookRenderer; records the day lists it was given."""

    def __init__(self, error: Optional[Exception] = None):
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    def render(self, days, *, watermark=None, fiscal_year="", calendar_id=""):
        self.calls.append({"days": list(days), "watermark": watermark, "fiscal_year": fiscal_year, "calendar_id": calendar_id})
        if self.error is not None:
            raise self.error
        return RenderedNotebook(pdf=b"%PDF-1.4 unit-test", page_count=len(days) // 7 + 1, engine="fake")
