"""
CHANGE LOG
----------
2026-02-01
- NEW FILE: liveness endpoint for the load balancer / uptime checks. No DB access.
"""

from __future__ import annotations

from django.http import HttpRequest, JsonResponse
from django.views.decorators.http import require_GET

from .utils import VERSION, _json_response

__all__ = ["health"]


@require_GET
def health(request: HttpRequest) -> JsonResponse:
    return _json_response({"ok": True, "ver": VERSION})
