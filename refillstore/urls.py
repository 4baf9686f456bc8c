"""
CHANGE LOG
----------
2026-02-08
- ADD: /api/checkout/ and /api/debug/* (notebook_orders).
- ADD: Directory endpoints /api/universities/ and /api/calendars/ (academic_calendars).

2026-02-01
- ADD: notebook_orders mounted under /api/ (webhook, purchase status, jobs, downloads, health).
"""

from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/", include("notebook_orders.urls", namespace="notebook_orders")),
    path("api/", include("academic_calendars.urls")),
]
