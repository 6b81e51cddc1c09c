from cart_reconciler.core.domain.cart.entities import LocalCartLine, RemoteCartLine
from cart_reconciler.core.domain.cart.value_objects import (
    CartLineView,
    CartView,
    Reconciliation,
    Remove,
    SetQuantity,
    StockSnapshot,
    VariantDisplay,
)

__all__ = [
    "CartLineView",
    "CartView",
    "LocalCartLine",
    "Reconciliation",
    "RemoteCartLine",
    "Remove",
    "SetQuantity",
    "StockSnapshot",
    "VariantDisplay",
]
