from cart_reconciler.infrastructure.tools.postgrest.postgrest_http_client import PostgrestHttpClient
from cart_reconciler.infrastructure.tools.postgrest.postgrest_remote_cart_gateway import (
    PostgrestRemoteCartGateway,
)
from cart_reconciler.infrastructure.tools.postgrest.postgrest_stock_oracle import PostgrestStockOracle

__all__ = ["PostgrestHttpClient", "PostgrestRemoteCartGateway", "PostgrestStockOracle"]
