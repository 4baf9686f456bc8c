"""
CHANGE LOG
- 2026-02-01 • purchase_status(): processing before the webhook, owner mirror afterwards.
- 2026-02-11 • Checkout-recorded orders poll as processing; a repeat buyer never sees an older link.
"""

from __future__ import annotations

from datetime import timedelta

from django.test import TestCase, override_settings
from django.utils import timezone

from notebook_orders.ledger import apply_paid_event, extract_paid_event
from notebook_orders.models import DownloadGrant, NotebookOrder, Status
from notebook_orders.state import StatusWriteSet
from notebook_orders.status import debug_session_status, purchase_status
from notebook_orders.views.checkout_session import _record_received_order

from .helpers import PIPELINE_SETTINGS, checkout_event, make_order


class PurchaseStatusTests(TestCase):
    def test_unknown_session_is_processing(self):
        self.assertEqual(purchase_status("cs_nope"), {"status": "processing", "downloadUrl": None, "errorMessage": None})
        self.assertEqual(purchase_status(""), {"status": "processing", "downloadUrl": None, "errorMessage": None})

    def test_reports_owner_status_and_grant(self):
        order = make_order(status=Status.GENERATING_ARTIFACT)
        grant = DownloadGrant(url="http://testserver/api/downloads/t/", expires_at=timezone.now() + timedelta(days=7), path="p.pdf")
        StatusWriteSet(order.owner, order).set_status(Status.COMPLETED).set_grant(grant).save()

        self.assertEqual(
            purchase_status("cs_test_1"),
            {"status": "completed", "downloadUrl": "http://testserver/api/downloads/t/", "errorMessage": None},
        )

    def test_failed_reports_message(self):
        order = make_order()
        StatusWriteSet(order.owner, order).set_status(Status.FAILED, error_message="Missing storage target").save()
        result = purchase_status("cs_test_1")
        self.assertEqual(result["status"], "failed")
        self.assertEqual(result["errorMessage"], "Missing storage target")

    def test_is_read_only(self):
        make_order()
        before = NotebookOrder.objects.get().updated_at
        purchase_status("cs_test_1")
        self.assertEqual(NotebookOrder.objects.get().updated_at, before)


@override_settings(**PIPELINE_SETTINGS)
class PollAfterCheckoutTests(TestCase):
    """Checkout records a `received` order before Stripe confirms payment."""

    FIELDS = {
        "userId": "user-1",
        "email": "buyer@example.com",
        "calendarId": "cal-a",
        "fiscalYear": "2025",
        "universityCode": "U001",
    }
    PROCESSING = {"status": "processing", "downloadUrl": None, "errorMessage": None}

    def _complete_previous_purchase(self):
        order = make_order(session_id="cs_old", status=Status.GENERATING_ARTIFACT)
        grant = DownloadGrant(
            url="http://testserver/api/downloads/OLD/",
            expires_at=timezone.now() + timedelta(days=7),
            path="system-notebook/user-1/old.pdf",
        )
        StatusWriteSet(order.owner, order).set_status(Status.COMPLETED).set_grant(grant).save()

    def test_first_purchase_reads_processing(self):
        _record_received_order("cs_new", self.FIELDS)
        self.assertEqual(NotebookOrder.objects.get(session_id="cs_new").status, Status.RECEIVED)
        self.assertEqual(purchase_status("cs_new"), self.PROCESSING)

    def test_repeat_buyer_does_not_see_previous_link(self):
        self._complete_previous_purchase()
        _record_received_order("cs_new", self.FIELDS)

        self.assertEqual(purchase_status("cs_new"), self.PROCESSING)
        self.assertEqual(purchase_status("cs_new", user_id="user-1"), self.PROCESSING)

    def test_repeat_buyer_after_webhook(self):
        self._complete_previous_purchase()
        _record_received_order("cs_new", self.FIELDS)
        apply_paid_event(
            extract_paid_event(checkout_event(event_id="evt_new", session_id="cs_new")),
            storage_alias="artifacts",
        )

        self.assertEqual(
            purchase_status("cs_new"),
            {"status": "paid_processing", "downloadUrl": None, "errorMessage": None},
        )
        # the earlier session still answers from its own order row
        self.assertEqual(
            purchase_status("cs_old"),
            {"status": "completed", "downloadUrl": "http://testserver/api/downloads/OLD/", "errorMessage": None},
        )


class DebugSessionStatusTests(TestCase):
    def test_missing_rows_are_none(self):
        self.assertEqual(debug_session_status("cs_x", "u_x"), {"status": None, "errorMessage": None, "downloadUrl": None})

    def test_order_status_with_owner_grant(self):
        make_order(status=Status.GENERATING_ARTIFACT)
        self.assertEqual(
            debug_session_status("cs_test_1", "user-1"),
            {"status": "generating_artifact", "errorMessage": None, "downloadUrl": None},
        )
