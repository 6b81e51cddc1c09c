from cart_reconciler.core.application.ports.local_cart_storage_port import LocalCartStoragePort
from cart_reconciler.core.application.ports.remote_cart_port import RemoteCartPort
from cart_reconciler.core.application.ports.stock_oracle_port import StockOraclePort

__all__ = ["LocalCartStoragePort", "RemoteCartPort", "StockOraclePort"]
