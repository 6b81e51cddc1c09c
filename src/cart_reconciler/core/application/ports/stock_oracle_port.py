from abc import ABC, abstractmethod
from collections.abc import Iterable

from cart_reconciler.core.domain.cart import StockSnapshot


class StockOraclePort(ABC):

    @abstractmethod
    async def get_stock(self, line_item_ids: Iterable[int]) -> dict[int, StockSnapshot]:
        """Fresh stock for the given ids. Ids that no longer resolve are absent.

        Raises CollaboratorUnavailableError on transport failure.
        """
        pass
