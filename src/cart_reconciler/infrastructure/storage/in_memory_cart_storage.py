from collections.abc import Sequence

from cart_reconciler.core.application.ports import LocalCartStoragePort
from cart_reconciler.core.domain.cart import LocalCartLine


class InMemoryCartStorage(LocalCartStoragePort):
    """Process-local storage. Used by tests and the in_memory backend."""

    def __init__(self, lines: Sequence[LocalCartLine] = ()) -> None:
        self._lines: list[LocalCartLine] = list(lines)

    async def get(self) -> list[LocalCartLine]:
        return list(self._lines)

    async def set(self, lines: Sequence[LocalCartLine]) -> None:
        self._lines = list(lines)

    async def clear(self) -> None:
        self._lines = []
