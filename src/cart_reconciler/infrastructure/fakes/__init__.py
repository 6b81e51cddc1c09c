from cart_reconciler.infrastructure.fakes.fake_remote_cart_gateway import (
    FakeRemoteCartGateway,
    InMemoryRemoteCartTable,
)
from cart_reconciler.infrastructure.fakes.fake_stock_oracle import FakeStockOracle
from cart_reconciler.infrastructure.fakes.in_memory_inventory import InMemoryInventory

__all__ = [
    "FakeRemoteCartGateway",
    "FakeStockOracle",
    "InMemoryInventory",
    "InMemoryRemoteCartTable",
]
