"""ASGI middleware binding a correlation id and the cart session into structlog contextvars."""

from __future__ import annotations

import time
from typing import Any
from uuid import uuid4

import structlog
from structlog.contextvars import bind_contextvars, clear_contextvars

logger = structlog.get_logger()

CART_SESSION_HEADER = b"x-cart-session"


class CorrelationMiddleware:
    def __init__(self, app: Any) -> None:
        self.app = app

    async def __call__(self, scope: dict[str, Any], receive: Any, send: Any) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return
        clear_contextvars()
        bind_contextvars(
            correlation_id=_extract_header(scope, b"x-correlation-id") or str(uuid4()),
            session_key=_extract_header(scope, CART_SESSION_HEADER),
            context_endpoint=str(scope.get("path", "/")),
            context_method=str(scope.get("method", "UNKNOWN")),
        )
        http_status = 500
        start = time.perf_counter()

        async def _capture_status(message: dict[str, Any]) -> None:
            nonlocal http_status
            if message.get("type") == "http.response.start":
                http_status = message.get("status", 500)
            await send(message)

        try:
            await self.app(scope, receive, _capture_status)
        finally:
            logger.info(
                "Request processed",
                processing_status="SUCCESS" if http_status < 400 else "ERROR",
                processing_duration_ms=round((time.perf_counter() - start) * 1000, 2),
                http_status=http_status,
            )


def _extract_header(scope: dict[str, Any], name: bytes) -> str | None:
    """Case-insensitive header lookup on an ASGI scope."""
    headers: list[tuple[bytes, bytes]] = scope.get("headers", [])
    lower_name = name.lower()
    for key, value in headers:
        if key.lower() == lower_name:
            return value.decode("latin-1")
    return None
