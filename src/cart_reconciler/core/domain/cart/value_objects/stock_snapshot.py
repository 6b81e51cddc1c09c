from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class VariantDisplay:
    """Display metadata the storefront shows next to a cart line."""

    sku: str
    price: Decimal
    product_id: int
    product_name: str
    product_slug: str
    image_url: str | None = None


@dataclass(frozen=True)
class StockSnapshot:
    """Point-in-time availability of a line item. Never reused across operations."""

    line_item_id: int
    available_quantity: int
    display: VariantDisplay

    def __post_init__(self):
        if self.available_quantity < 0:
            raise ValueError(
                f"Available stock for {self.line_item_id} cannot be negative "
                f"({self.available_quantity})."
            )
