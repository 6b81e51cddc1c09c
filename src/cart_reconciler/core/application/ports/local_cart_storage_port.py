from abc import ABC, abstractmethod
from collections.abc import Sequence

from cart_reconciler.core.domain.cart import LocalCartLine


class LocalCartStoragePort(ABC):
    """Client-resident persistence for the anonymous cart.

    Implementations store the whole line list as one serializable document.
    """

    @abstractmethod
    async def get(self) -> list[LocalCartLine]:
        pass

    @abstractmethod
    async def set(self, lines: Sequence[LocalCartLine]) -> None:
        pass

    @abstractmethod
    async def clear(self) -> None:
        pass
