from decimal import Decimal

import pytest

from cart_reconciler.core.application.cart.local_cart_manager import LocalCartManager
from cart_reconciler.core.application.cart.local_cart_store import LocalCartStore
from cart_reconciler.core.domain.cart import StockSnapshot, VariantDisplay
from cart_reconciler.infrastructure.fakes import (
    FakeRemoteCartGateway,
    FakeStockOracle,
    InMemoryInventory,
    InMemoryRemoteCartTable,
)
from cart_reconciler.infrastructure.storage import InMemoryCartStorage


def make_snapshot(line_item_id: int, available: int, price: str = "25.00") -> StockSnapshot:
    return StockSnapshot(
        line_item_id=line_item_id,
        available_quantity=available,
        display=VariantDisplay(
            sku=f"SKU-{line_item_id}",
            price=Decimal(price),
            product_id=100 + line_item_id,
            product_name=f"Polo {line_item_id}",
            product_slug=f"polo-{line_item_id}",
        ),
    )


@pytest.fixture
def inventory() -> InMemoryInventory:
    inv = InMemoryInventory()
    inv.add_variant(1, 5, price="20.00")
    inv.add_variant(2, 2, price="35.50")
    inv.add_variant(3, 10, price="9.90")
    return inv


@pytest.fixture
def storage() -> InMemoryCartStorage:
    return InMemoryCartStorage()


@pytest.fixture
def store(storage: InMemoryCartStorage) -> LocalCartStore:
    return LocalCartStore(storage)


@pytest.fixture
def stock_oracle(inventory: InMemoryInventory) -> FakeStockOracle:
    return FakeStockOracle(inventory)


@pytest.fixture
def manager(store: LocalCartStore, stock_oracle: FakeStockOracle) -> LocalCartManager:
    return LocalCartManager(store, stock_oracle)


@pytest.fixture
def remote_table() -> InMemoryRemoteCartTable:
    return InMemoryRemoteCartTable()


@pytest.fixture
def remote_cart(remote_table: InMemoryRemoteCartTable, inventory: InMemoryInventory) -> FakeRemoteCartGateway:
    return FakeRemoteCartGateway("user-1", remote_table, inventory)


@pytest.fixture
def snapshot_factory():
    return make_snapshot
