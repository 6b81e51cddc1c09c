from collections.abc import Iterable

from cart_reconciler.core.application.ports import StockOraclePort
from cart_reconciler.core.domain.cart import StockSnapshot
from cart_reconciler.infrastructure.fakes.in_memory_inventory import InMemoryInventory


class FakeStockOracle(StockOraclePort):
    """Reads straight from an InMemoryInventory. Counts calls so tests can assert batching."""

    def __init__(self, inventory: InMemoryInventory) -> None:
        self._inventory = inventory
        self.calls: list[frozenset[int]] = []

    async def get_stock(self, line_item_ids: Iterable[int]) -> dict[int, StockSnapshot]:
        ids = frozenset(line_item_ids)
        self.calls.append(ids)
        found = {}
        for line_item_id in ids:
            snapshot = self._inventory.stock_of(line_item_id)
            if snapshot is not None:
                found[line_item_id] = snapshot
        return found
