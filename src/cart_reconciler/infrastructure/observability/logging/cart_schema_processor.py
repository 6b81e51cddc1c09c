"""Structlog processor that nests flat cart events into the service log schema.

All field extraction uses dict.pop(key, default) so missing keys never raise.
"""

from __future__ import annotations

import os
from typing import Any
from uuid import uuid4


def _build_root_fields(event_dict: dict[str, Any]) -> dict[str, Any]:
    return {
        "timestamp": event_dict.pop("timestamp", None),
        "level": event_dict.pop("level", "info"),
        "service": os.environ.get("SERVICE_NAME", "cart-reconciler"),
        "environment": os.environ.get("APP_ENV", "local"),
        "correlation_id": event_dict.pop("correlation_id", None),
        "message": event_dict.pop("event", ""),
    }


def _safe_float(value: Any) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _build_processing(event_dict: dict[str, Any]) -> dict[str, Any] | None:
    status = event_dict.pop("processing_status", None)
    if status is None:
        return None
    return {
        "status": status,
        "duration_ms": _safe_float(event_dict.pop("processing_duration_ms", None)),
    }


def _build_error(event_dict: dict[str, Any]) -> dict[str, Any] | None:
    """Error block. None unless error_type is present."""
    error_type = event_dict.pop("error_type", None)
    if error_type is None:
        return None
    return {
        "type": error_type,
        "details": event_dict.pop("error_details", None),
        "retryable": event_dict.pop("error_retryable", False),
    }


def _build_event_block(event_dict: dict[str, Any]) -> dict[str, Any]:
    return {
        "eventId": event_dict.pop("event_id", str(uuid4())),
        "eventType": event_dict.pop("event_type", None),
    }


def _build_cart(event_dict: dict[str, Any]) -> dict[str, Any] | None:
    """Cart identification block: who owns it and which line is involved."""
    cart = {
        "session_key": event_dict.pop("session_key", None),
        "owner_id": event_dict.pop("owner_id", None),
        "line_item_id": event_dict.pop("line_item_id", None),
    }
    if all(value is None for value in cart.values()):
        return None
    return cart


def _build_context(event_dict: dict[str, Any]) -> dict[str, Any] | None:
    endpoint = event_dict.pop("context_endpoint", None)
    method = event_dict.pop("context_method", None)
    if endpoint is None and method is None:
        return None
    return {"endpoint": endpoint, "method": method}


def cart_schema_processor(
    logger: Any,  # noqa: ARG001
    method_name: str,  # noqa: ARG001
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    result = _build_root_fields(event_dict)

    processing = _build_processing(event_dict)
    if processing is not None:
        result["processing"] = processing

    error = _build_error(event_dict)
    if error is not None:
        result["error"] = error

    result["event"] = _build_event_block(event_dict)

    cart = _build_cart(event_dict)
    if cart is not None:
        result["cart"] = cart

    context = _build_context(event_dict)
    if context is not None:
        result["context"] = context

    if event_dict:
        result["extra"] = dict(event_dict)

    return result
