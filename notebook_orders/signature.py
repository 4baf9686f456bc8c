"""
notebook_orders.signature

Stripe webhook signature check.

Header: `Stripe-Signature: t=<unix>,v1=<hex>[,v1=<hex>...]`, HMAC-SHA256 over
"<t>.<raw body>". The Stripe SDK does the constant-time compare and the "too old"
half of the tolerance window; the "too far in the future" half is checked here so
the window is symmetric.

Every failure raises the same SignatureInvalid. Callers must not learn which part
of the check failed.
"""
from __future__ import annotations

import logging
import time
from typing import Optional, Union

import stripe

from .exceptions import SignatureInvalid

log = logging.getLogger("refillstore")

DEFAULT_TOLERANCE = 300


def _header_timestamp(header: str) -> Optional[int]:
    for item in header.split(","):
        key, _, value = item.strip().partition("=")
        if key == "t":
            try:
                return int(value)
            except ValueError:
                return None
    return None


def verify_signature(
    payload: Union[bytes, str],
    header: Optional[str],
    secret: str,
    *,
    tolerance: int = DEFAULT_TOLERANCE,
) -> None:
    """Return None when the signature is valid, raise SignatureInvalid otherwise."""
    if not header or not secret:
        raise SignatureInvalid()

    if isinstance(payload, bytes):
        try:
            payload = payload.decode("utf-8")
        except UnicodeDecodeError:
            raise SignatureInvalid() from None

    try:
        stripe.WebhookSignature.verify_header(payload, header, secret, tolerance=tolerance)
    except stripe.SignatureVerificationError as e:
        log.info("[signature] rejected (header_len=%s): %s", len(header), e.user_message or "mismatch")
        raise SignatureInvalid() from None

    ts = _header_timestamp(header)
    if ts is None or ts > time.time() + tolerance:
        log.info("[signature] rejected (header_len=%s): timestamp outside tolerance", len(header))
        raise SignatureInvalid()
