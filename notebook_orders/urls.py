"""
Notebook Orders — URL routes. Included by refillstore.urls under "api/".
"""

from __future__ import annotations

from django.urls import path

from . import views

app_name = "notebook_orders"

urlpatterns = [
    path("stripe/webhook/", views.stripe_webhook, name="stripe-webhook"),
    path("purchase-status/", views.purchase_status_view, name="purchase-status"),
    path("checkout/", views.create_checkout_session, name="checkout"),
    path("jobs/generate/", views.generate_job, name="generate-job"),
    path("downloads/<str:token>/", views.download_artifact, name="download"),
    path("debug/trigger-session/", views.debug_trigger_session, name="debug-trigger-session"),
    path("debug/session-status/", views.debug_session_status_view, name="debug-session-status"),
    path("health/", views.health, name="health"),
]
