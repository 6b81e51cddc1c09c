"""Structlog setup for the cart service.

Application code logs through ``structlog.get_logger()``; third-party stdlib loggers
(uvicorn, httpx) are routed through the same processor chain so every line carries
the cart schema.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

import structlog

from cart_reconciler.infrastructure.observability.logging.cart_schema_processor import (
    cart_schema_processor,
)

_JSON_ENVIRONMENTS = frozenset({"qa", "staging", "prod", "production"})
# Per-request INFO lines from the HTTP client would drown the cart events.
_QUIET_LOGGERS = ("httpx", "httpcore")

_configured = False


def configure_logging(level: str = "INFO") -> None:
    """Configure structlog and the stdlib bridge. Later calls are no-ops."""
    global _configured  # noqa: PLW0603
    if _configured:
        return
    _configured = True

    renderer = _select_renderer(os.environ.get("LOG_FORMAT", ""), os.environ.get("APP_ENV", "local"))
    processors = _cart_processors()
    structlog.configure(
        processors=[*processors, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(level.upper())),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(sys.stdout),
        cache_logger_on_first_use=True,
    )
    _bridge_stdlib(processors, renderer, level.upper())


def get_logger(component: str) -> Any:
    return structlog.get_logger().bind(context_component=component)


def _cart_processors() -> list[Any]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        cart_schema_processor,
    ]


def _bridge_stdlib(processors: list[Any], renderer: Any, level: str) -> None:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, *processors, renderer],
        )
    )
    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def _select_renderer(log_format: str, app_env: str) -> Any:
    """LOG_FORMAT (json|console) wins; otherwise JSON for deployed environments."""
    log_format = log_format.lower()
    use_json = log_format == "json" or (log_format != "console" and app_env.lower() in _JSON_ENVIRONMENTS)
    if use_json:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=True)
