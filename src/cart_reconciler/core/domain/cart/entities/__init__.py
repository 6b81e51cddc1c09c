from cart_reconciler.core.domain.cart.entities.local_cart_line import LocalCartLine
from cart_reconciler.core.domain.cart.entities.remote_cart_line import RemoteCartLine

__all__ = ["LocalCartLine", "RemoteCartLine"]
