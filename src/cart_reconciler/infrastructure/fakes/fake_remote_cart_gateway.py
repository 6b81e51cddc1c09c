from cart_reconciler.core.application.cart.quantity_reconciler import reconcile
from cart_reconciler.core.application.exceptions import LineItemNotFoundError
from cart_reconciler.core.application.ports import RemoteCartPort
from cart_reconciler.core.domain.cart import CartLineView, CartView, RemoteCartLine, Remove
from cart_reconciler.infrastructure.fakes.in_memory_inventory import InMemoryInventory


class InMemoryRemoteCartTable:
    """Remote cart rows keyed by (owner_id, line_item_id), in insertion order."""

    def __init__(self) -> None:
        self._rows: dict[tuple[str, int], RemoteCartLine] = {}

    def quantity(self, owner_id: str, line_item_id: int) -> int:
        row = self._rows.get((owner_id, line_item_id))
        return row.quantity if row else 0

    def put(self, owner_id: str, line_item_id: int, quantity: int) -> None:
        line = RemoteCartLine(owner_id, line_item_id, quantity)
        self._rows[line.key] = line

    def delete(self, owner_id: str, line_item_id: int) -> None:
        self._rows.pop((owner_id, line_item_id), None)

    def lines_of(self, owner_id: str) -> list[RemoteCartLine]:
        return [row for row in self._rows.values() if row.owner_id == owner_id]


class FakeRemoteCartGateway(RemoteCartPort):
    """Authoritative cart of one owner, applying the same clamp rule server-side."""

    def __init__(self, owner_id: str, table: InMemoryRemoteCartTable, inventory: InMemoryInventory) -> None:
        self._owner_id = owner_id
        self._table = table
        self._inventory = inventory

    async def upsert(self, line_item_id: int, quantity: int, is_increment: bool = False) -> None:
        snapshot = self._inventory.stock_of(line_item_id)
        if snapshot is None:
            raise LineItemNotFoundError(line_item_id, context={"owner_id": self._owner_id})
        current = self._table.quantity(self._owner_id, line_item_id)
        decision = reconcile(quantity, current, snapshot.available_quantity, is_increment)
        if isinstance(decision, Remove):
            self._table.delete(self._owner_id, line_item_id)
        else:
            self._table.put(self._owner_id, line_item_id, decision.quantity)

    async def validate_and_fetch(self) -> CartView:
        changed = False
        views: list[CartLineView] = []
        for row in self._table.lines_of(self._owner_id):
            snapshot = self._inventory.stock_of(row.line_item_id)
            if snapshot is None:
                self._table.delete(self._owner_id, row.line_item_id)
                changed = True
                continue
            decision = reconcile(row.quantity, row.quantity, snapshot.available_quantity, False)
            if isinstance(decision, Remove):
                self._table.delete(self._owner_id, row.line_item_id)
                changed = True
                continue
            if decision.quantity != row.quantity:
                self._table.put(self._owner_id, row.line_item_id, decision.quantity)
                changed = True
            views.append(
                CartLineView(
                    line_item_id=row.line_item_id,
                    quantity=decision.quantity,
                    available_quantity=snapshot.available_quantity,
                    display=snapshot.display,
                )
            )
        return CartView(lines=tuple(views), stock_changed=changed)
