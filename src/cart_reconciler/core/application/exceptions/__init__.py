from cart_reconciler.core.application.exceptions.cart_exceptions import (
    CartError,
    CartStorageError,
    CollaboratorUnavailableError,
    ConfigurationError,
    LineItemNotFoundError,
)

__all__ = [
    "CartError",
    "CartStorageError",
    "CollaboratorUnavailableError",
    "ConfigurationError",
    "LineItemNotFoundError",
]
