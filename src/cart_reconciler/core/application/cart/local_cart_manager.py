from enum import StrEnum

import structlog

from cart_reconciler.core.application.cart.local_cart_store import LocalCartStore
from cart_reconciler.core.application.cart.quantity_reconciler import (
    candidate_quantity,
    reconcile,
)
from cart_reconciler.core.application.exceptions import LineItemNotFoundError
from cart_reconciler.core.application.ports import StockOraclePort
from cart_reconciler.core.domain.cart import (
    CartLineView,
    CartView,
    LocalCartLine,
    Remove,
    StockSnapshot,
)

logger = structlog.get_logger()


class UpsertOutcome(StrEnum):
    SET = "set"
    REMOVED = "removed"
    NOOP = "noop"


class LocalCartManager:
    """Add/update/remove/validate against the anonymous cart.

    Every quantity decision re-reads stock from the oracle. A write that had to be
    clamped is remembered and reported as ``stock_changed`` by the next validate pass,
    since the stored value alone cannot tell the shopper it was reduced.
    """

    def __init__(self, store: LocalCartStore, stock_oracle: StockOraclePort) -> None:
        self._store = store
        self._stock_oracle = stock_oracle
        self._clamped_since_validate = False

    @property
    def store(self) -> LocalCartStore:
        return self._store

    async def upsert(
        self, line_item_id: int, quantity: int, is_increment: bool = False
    ) -> UpsertOutcome:
        snapshot = await self._fetch_one(line_item_id)
        current = await self._store.quantity_of(line_item_id)
        decision = reconcile(quantity, current, snapshot.available_quantity, is_increment)

        requested = candidate_quantity(quantity, current, is_increment)
        final = 0 if isinstance(decision, Remove) else decision.quantity
        if requested > final:
            self._clamped_since_validate = True
            logger.info(
                "Requested quantity clamped to stock",
                line_item_id=line_item_id,
                requested=requested,
                available=snapshot.available_quantity,
            )

        if final == current:
            return UpsertOutcome.NOOP
        if isinstance(decision, Remove):
            await self._store.delete(line_item_id)
            return UpsertOutcome.REMOVED
        await self._store.put(line_item_id, decision.quantity)
        return UpsertOutcome.SET

    async def remove(self, line_item_id: int) -> UpsertOutcome:
        removed = await self._store.delete(line_item_id)
        return UpsertOutcome.REMOVED if removed else UpsertOutcome.NOOP

    async def clear(self) -> None:
        await self._store.clear()
        self.discard_clamp_notice()

    def discard_clamp_notice(self) -> None:
        """Forget clamps on lines that no longer live in this store."""
        self._clamped_since_validate = False

    async def validate_all(self) -> bool:
        """Shrink or drop stored lines that exceed current stock. True if anything changed."""
        view = await self.validate_and_read()
        return view.stock_changed

    async def validate_and_read(self) -> CartView:
        lines = await self._store.lines()
        if not lines:
            return self._consume_clamp_flag(CartView())

        stock = await self._stock_oracle.get_stock({line.line_item_id for line in lines})
        repaired: list[LocalCartLine] = []
        views: list[CartLineView] = []
        changed = False
        for line in lines:
            snapshot = stock.get(line.line_item_id)
            if snapshot is None:
                logger.warning("Dropping discontinued line item", line_item_id=line.line_item_id)
                changed = True
                continue
            decision = reconcile(line.quantity, line.quantity, snapshot.available_quantity, False)
            if isinstance(decision, Remove):
                logger.info("Dropping out-of-stock line", line_item_id=line.line_item_id)
                changed = True
                continue
            if decision.quantity != line.quantity:
                logger.info(
                    "Shrinking line to available stock",
                    line_item_id=line.line_item_id,
                    stored=line.quantity,
                    available=snapshot.available_quantity,
                )
                changed = True
            repaired.append(LocalCartLine(line.line_item_id, decision.quantity))
            views.append(_to_view(snapshot, decision.quantity))

        if changed:
            await self._store.replace_all(repaired)
        return self._consume_clamp_flag(CartView(lines=tuple(views), stock_changed=changed))

    async def _fetch_one(self, line_item_id: int) -> StockSnapshot:
        stock = await self._stock_oracle.get_stock({line_item_id})
        snapshot = stock.get(line_item_id)
        if snapshot is None:
            raise LineItemNotFoundError(line_item_id)
        return snapshot

    def _consume_clamp_flag(self, view: CartView) -> CartView:
        clamped, self._clamped_since_validate = self._clamped_since_validate, False
        if clamped and not view.stock_changed:
            return CartView(lines=view.lines, stock_changed=True)
        return view


def _to_view(snapshot: StockSnapshot, quantity: int) -> CartLineView:
    return CartLineView(
        line_item_id=snapshot.line_item_id,
        quantity=quantity,
        available_quantity=snapshot.available_quantity,
        display=snapshot.display,
    )
