from abc import ABC, abstractmethod

from cart_reconciler.core.domain.cart import CartView


class RemoteCartPort(ABC):
    """Authoritative cart of one authenticated owner."""

    @abstractmethod
    async def upsert(self, line_item_id: int, quantity: int, is_increment: bool = False) -> None:
        """Clamp-or-remove upsert applied server-side. Silent on over-request."""
        pass

    @abstractmethod
    async def validate_and_fetch(self) -> CartView:
        """Repair stored quantities against current stock, then read the cart."""
        pass

    async def remove(self, line_item_id: int) -> None:
        await self.upsert(line_item_id, 0, is_increment=False)
