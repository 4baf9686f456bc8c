"""
CHANGE LOG
- 2026-02-06 • Dispatcher: unconfigured no-op, bearer header, bounded retry, DispatchFailed.
"""

from __future__ import annotations

from unittest import mock

import requests
from django.test import SimpleTestCase, override_settings

from notebook_orders.dispatch import JobDispatcher
from notebook_orders.exceptions import DispatchFailed
from notebook_orders.ledger import extract_paid_event

from .helpers import checkout_event


def _resp(status: int):
    r = mock.Mock()
    r.status_code = status
    return r


@mock.patch("notebook_orders.dispatch.time.sleep")
class JobDispatcherTests(SimpleTestCase):
    def setUp(self):
        self.event = extract_paid_event(checkout_event())
        self.session = mock.Mock(spec=requests.Session)

    def test_unconfigured_is_noop(self, _sleep):
        with self.assertLogs("refillstore", level="INFO") as logs:
            self.assertFalse(JobDispatcher(url="", session=self.session).dispatch(self.event))
        self.assertIn("out-of-band", "\n".join(logs.output))
        self.session.post.assert_not_called()

    def test_posts_payload_with_bearer(self, _sleep):
        self.session.post.return_value = _resp(202)
        ok = JobDispatcher(url="https://worker.example/jobs", token="tok", session=self.session).dispatch(self.event)

        self.assertTrue(ok)
        args, kwargs = self.session.post.call_args
        self.assertEqual(args[0], "https://worker.example/jobs")
        self.assertEqual(kwargs["headers"]["Authorization"], "Bearer tok")
        self.assertEqual(
            kwargs["json"],
            {
                "userId": "user-1",
                "calendarId": "cal-a",
                "fiscalYear": "2025",
                "sessionId": "cs_test_1",
                "buyerEmail": "buyer@example.com",
                "source": "stripe_webhook",
            },
        )

    def test_no_token_no_auth_header(self, _sleep):
        self.session.post.return_value = _resp(200)
        JobDispatcher(url="https://worker.example/jobs", session=self.session).dispatch(self.event)
        self.assertNotIn("Authorization", self.session.post.call_args.kwargs["headers"])

    def test_retries_then_raises(self, sleep):
        self.session.post.return_value = _resp(503)
        dispatcher = JobDispatcher(url="https://worker.example/jobs", attempts=3, session=self.session)
        with self.assertLogs("refillstore", level="WARNING"):
            with self.assertRaises(DispatchFailed) as ctx:
                dispatcher.dispatch(self.event)
        self.assertIn("503", str(ctx.exception))
        self.assertEqual(self.session.post.call_count, 3)
        self.assertEqual(sleep.call_count, 2)

    def test_network_error_then_success(self, _sleep):
        self.session.post.side_effect = [requests.ConnectionError("refused"), _resp(200)]
        dispatcher = JobDispatcher(url="https://worker.example/jobs", attempts=2, session=self.session)
        with self.assertLogs("refillstore", level="WARNING"):
            self.assertTrue(dispatcher.dispatch(self.event))

    @override_settings(NOTEBOOK_DISPATCH_URL="https://w.example/", NOTEBOOK_DISPATCH_TOKEN="t", NOTEBOOK_DISPATCH_ATTEMPTS=4)
    def test_from_settings(self, _sleep):
        d = JobDispatcher.from_settings()
        self.assertEqual((d.url, d.token, d.attempts), ("https://w.example/", "t", 4))
