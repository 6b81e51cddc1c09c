from collections.abc import Iterable

from cart_reconciler.core.application.ports import LocalCartStoragePort
from cart_reconciler.core.domain.cart import LocalCartLine


class LocalCartStore:
    """Anonymous cart lines over an injected storage capability.

    Keeps at most one line per line item and preserves insertion order, which is the
    order the merge replays lines in.
    """

    def __init__(self, storage: LocalCartStoragePort) -> None:
        self._storage = storage

    async def lines(self) -> list[LocalCartLine]:
        return _unique(await self._storage.get())

    async def quantity_of(self, line_item_id: int) -> int:
        for line in await self.lines():
            if line.line_item_id == line_item_id:
                return line.quantity
        return 0

    async def put(self, line_item_id: int, quantity: int) -> None:
        lines = await self.lines()
        new_line = LocalCartLine(line_item_id=line_item_id, quantity=quantity)
        for index, line in enumerate(lines):
            if line.line_item_id == line_item_id:
                lines[index] = new_line
                break
        else:
            lines.append(new_line)
        await self._storage.set(lines)

    async def delete(self, line_item_id: int) -> bool:
        lines = await self.lines()
        kept = [line for line in lines if line.line_item_id != line_item_id]
        if len(kept) == len(lines):
            return False
        await self._storage.set(kept)
        return True

    async def replace_all(self, lines: Iterable[LocalCartLine]) -> None:
        await self._storage.set(_unique(lines))

    async def clear(self) -> None:
        await self._storage.clear()


def _unique(lines: Iterable[LocalCartLine]) -> list[LocalCartLine]:
    # First position wins, last quantity wins.
    by_id: dict[int, LocalCartLine] = {}
    for line in lines:
        by_id[line.line_item_id] = line
    return list(by_id.values())
