from cart_reconciler.core.domain.cart.value_objects.cart_view import CartLineView, CartView
from cart_reconciler.core.domain.cart.value_objects.reconciliation import (
    Reconciliation,
    Remove,
    SetQuantity,
)
from cart_reconciler.core.domain.cart.value_objects.stock_snapshot import (
    StockSnapshot,
    VariantDisplay,
)

__all__ = [
    "CartLineView",
    "CartView",
    "Reconciliation",
    "Remove",
    "SetQuantity",
    "StockSnapshot",
    "VariantDisplay",
]
