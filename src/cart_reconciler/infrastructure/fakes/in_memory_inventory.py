from collections.abc import Iterable
from dataclasses import replace
from decimal import Decimal

from cart_reconciler.core.domain.cart import StockSnapshot, VariantDisplay


class InMemoryInventory:
    """Variant catalogue with mutable stock, shared by the fake oracle and fake remote cart."""

    def __init__(self, variants: Iterable[StockSnapshot] = ()) -> None:
        self._variants: dict[int, StockSnapshot] = {v.line_item_id: v for v in variants}

    def add_variant(
        self,
        line_item_id: int,
        available_quantity: int,
        *,
        price: Decimal | str = "10.00",
        sku: str | None = None,
        product_name: str | None = None,
    ) -> StockSnapshot:
        snapshot = StockSnapshot(
            line_item_id=line_item_id,
            available_quantity=available_quantity,
            display=VariantDisplay(
                sku=sku or f"SKU-{line_item_id}",
                price=Decimal(price),
                product_id=line_item_id,
                product_name=product_name or f"Product {line_item_id}",
                product_slug=f"product-{line_item_id}",
            ),
        )
        self._variants[line_item_id] = snapshot
        return snapshot

    def set_available(self, line_item_id: int, available_quantity: int) -> None:
        self._variants[line_item_id] = replace(
            self._variants[line_item_id], available_quantity=available_quantity
        )

    def discontinue(self, line_item_id: int) -> None:
        self._variants.pop(line_item_id, None)

    def stock_of(self, line_item_id: int) -> StockSnapshot | None:
        return self._variants.get(line_item_id)
