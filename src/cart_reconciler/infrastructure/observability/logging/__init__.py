from cart_reconciler.infrastructure.observability.logging.cart_schema_processor import (
    cart_schema_processor,
)
from cart_reconciler.infrastructure.observability.logging.correlation_middleware import (
    CorrelationMiddleware,
)

__all__ = [
    "CorrelationMiddleware",
    "cart_schema_processor",
]
