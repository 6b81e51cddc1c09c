from cart_reconciler.infrastructure.resolution.cart_session_registry import (
    CartSession,
    CartSessionRegistry,
)
from cart_reconciler.infrastructure.resolution.container import CartContainer

__all__ = ["CartContainer", "CartSession", "CartSessionRegistry"]
