"""
Shared utilities for notebook_orders views.
Extracted to avoid circular imports.
"""

from __future__ import annotations

import hmac
import json
import logging
from typing import Any, Dict, Optional

from django.conf import settings
from django.http import HttpRequest, JsonResponse

# Constants
VERSION = "refillstore.notebook-orders.v2026-02-10"
log = logging.getLogger("refillstore")


def _normalize_header_value(v: Optional[str]) -> str:
    """Trim common wrapper quotes and CR/LF. Do NOT log actual values."""
    if not v:
        return ""
    return v.strip().strip("'").strip('"').replace("\r", "").replace("\n", "")


def _json_response(payload: Dict[str, Any], status: int = 200) -> JsonResponse:
    return JsonResponse(payload, status=status, json_dumps_params={"ensure_ascii": False})


def _json_error(message: str, status: int) -> JsonResponse:
    return _json_response({"error": message}, status=status)


def _parse_json_body(request: HttpRequest) -> Optional[Dict[str, Any]]:
    """JSON object body, or None when the body is not a JSON object."""
    try:
        data = json.loads(request.body.decode("utf-8") or "{}")
    except (UnicodeDecodeError, ValueError):
        return None
    return data if isinstance(data, dict) else None


def _tokens_match(expected: str, provided: str) -> bool:
    return bool(expected) and bool(provided) and hmac.compare_digest(expected, provided)


def _bearer_token_ok(request: HttpRequest, expected: str) -> bool:
    raw = _normalize_header_value(request.META.get("HTTP_AUTHORIZATION", ""))
    provided = raw[7:].strip() if raw.lower().startswith("bearer ") else ""
    expected = _normalize_header_value(expected)
    ok = _tokens_match(expected, provided)
    log.info("[auth] bearer expected_len=%s provided_len=%s match=%s", len(expected), len(provided), ok)
    return ok


def _debug_access_ok(request: HttpRequest) -> bool:
    """Open in DEBUG; otherwise X-Debug-Token must equal NOTEBOOK_DEBUG_TRIGGER_TOKEN."""
    if settings.DEBUG:
        return True
    expected = _normalize_header_value(getattr(settings, "NOTEBOOK_DEBUG_TRIGGER_TOKEN", ""))
    provided = _normalize_header_value(request.META.get("HTTP_X_DEBUG_TOKEN", ""))
    ok = _tokens_match(expected, provided)
    log.info("[auth] debug expected_len=%s provided_len=%s match=%s", len(expected), len(provided), ok)
    return ok
