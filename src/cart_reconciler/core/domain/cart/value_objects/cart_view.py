from dataclasses import dataclass, field
from decimal import Decimal

from cart_reconciler.core.domain.cart.value_objects.stock_snapshot import VariantDisplay


@dataclass(frozen=True)
class CartLineView:
    line_item_id: int
    quantity: int
    available_quantity: int
    display: VariantDisplay

    @property
    def subtotal(self) -> Decimal:
        return self.display.price * self.quantity


@dataclass(frozen=True)
class CartView:
    """Validated cart as handed to the presentation layer.

    ``stock_changed`` is True when the validate pass (or a clamped write since the
    previous read) altered quantities the shopper asked for. Callers must
    acknowledge it before showing final totals.
    """

    lines: tuple[CartLineView, ...] = field(default_factory=tuple)
    stock_changed: bool = False

    @property
    def total_items(self) -> int:
        return sum(line.quantity for line in self.lines)

    @property
    def total_amount(self) -> Decimal:
        return sum((line.subtotal for line in self.lines), Decimal("0"))

    @property
    def is_empty(self) -> bool:
        return not self.lines
