"""
Notebook Orders — views package

CHANGE LOG
----------
2026-02-08 • Add checkout + debug endpoints; health moved to its own module.
2026-02-06 • Add jobs (dispatch target) and downloads (signed links).
2026-02-01 • Stripe webhook + purchase status.
"""

from .stripe_webhook import stripe_webhook
from .purchase_status import purchase_status_view
from .checkout_session import create_checkout_session
from .jobs import generate_job
from .downloads import download_artifact
from .debug import debug_session_status_view, debug_trigger_session
from .health import health

__all__ = [
    "stripe_webhook",
    "purchase_status_view",
    "create_checkout_session",
    "generate_job",
    "download_artifact",
    "debug_trigger_session",
    "debug_session_status_view",
    "health",
]
