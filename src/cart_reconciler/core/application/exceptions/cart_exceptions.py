"""Cart exception hierarchy.

Every port adapter and application service raises from this tree so callers can
branch on type instead of matching messages. Over-stock requests have no
exception type: they are clamped, never raised.
"""

from typing import Any


class CartError(Exception):
    """Base exception for all cart-layer errors."""

    def __init__(self, message: str = "", *, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.context: dict[str, Any] = context or {}


class LineItemNotFoundError(CartError):
    """The line item no longer resolves (variant discontinued or never existed)."""

    def __init__(self, line_item_id: int, *, context: dict[str, Any] | None = None) -> None:
        super().__init__(
            f"Line item {line_item_id} was not found.",
            context={"line_item_id": line_item_id, **(context or {})},
        )
        self.line_item_id = line_item_id


class CollaboratorUnavailableError(CartError):
    """Transport or collaborator failure. Prior state is left untouched."""

    def __init__(
        self,
        message: str = "",
        *,
        retryable: bool = True,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, context=context)
        self.retryable = retryable


class CartStorageError(CartError):
    """The client-resident cart storage could not be read or written."""


class ConfigurationError(CartError):
    """Raised when configuration is invalid or incomplete."""
