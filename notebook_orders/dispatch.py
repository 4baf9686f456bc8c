"""
notebook_orders.dispatch

Hands a recorded paid event to the artifact worker over HTTP.

- No NOTEBOOK_DISPATCH_URL configured -> nothing is sent; the order waits in
  paid_processing for an out-of-band trigger (post_save hook, management command).
- POST JSON with `Authorization: Bearer <token>`, bounded attempts with a short
  backoff. Non-2xx or a network error after the last attempt -> DispatchFailed.
- Only this step is retried. The ledger is never re-applied from here.

========= CHANGE LOG =========
2026-02-01 • ADD: JobDispatcher (requests, bearer token).
2026-02-06 • ADD: bounded retry (NOTEBOOK_DISPATCH_ATTEMPTS) + from_settings().
"""
from __future__ import annotations

import logging
import time
from typing import Any, Dict, Optional

import requests
from django.conf import settings

from .exceptions import DispatchFailed

log = logging.getLogger("refillstore")


class JobDispatcher:
    def __init__(self, url: str, token: str = "", timeout: float = 10, attempts: int = 2, session: Optional[requests.Session] = None):
        self.url = (url or "").strip()
        self.token = (token or "").strip()
        self.timeout = timeout
        self.attempts = max(1, int(attempts or 1))
        self.session = session or requests.Session()

    @classmethod
    def from_settings(cls) -> "JobDispatcher":
        return cls(
            url=getattr(settings, "NOTEBOOK_DISPATCH_URL", ""),
            token=getattr(settings, "NOTEBOOK_DISPATCH_TOKEN", ""),
            timeout=getattr(settings, "NOTEBOOK_DISPATCH_TIMEOUT", 10),
            attempts=getattr(settings, "NOTEBOOK_DISPATCH_ATTEMPTS", 2),
        )

    @property
    def configured(self) -> bool:
        return bool(self.url)

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def dispatch(self, event) -> bool:
        """
        Send `event.dispatch_payload()` to the worker. Returns True when accepted,
        False when no dispatch target is configured.
        """
        if not self.configured:
            log.info("[dispatch] no dispatch URL configured; relying on out-of-band trigger (session=%s)", event.session_id)
            return False

        payload: Dict[str, Any] = event.dispatch_payload()
        last_err = ""
        for i in range(self.attempts):
            try:
                resp = self.session.post(self.url, json=payload, headers=self._headers(), timeout=self.timeout)
                if 200 <= resp.status_code < 300:
                    log.info(
                        "[dispatch] session=%s accepted status=%s attempt=%s token=%s",
                        event.session_id,
                        resp.status_code,
                        i + 1,
                        bool(self.token),
                    )
                    return True
                last_err = f"HTTP {resp.status_code}"
            except requests.RequestException as e:
                last_err = str(e) or e.__class__.__name__

            log.warning("[dispatch] session=%s attempt %s/%s failed: %s", event.session_id, i + 1, self.attempts, last_err)
            if i + 1 < self.attempts:
                time.sleep(0.5 * (i + 1))

        raise DispatchFailed(f"Dispatch failed: {last_err}")
