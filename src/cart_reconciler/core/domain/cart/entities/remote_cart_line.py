from dataclasses import dataclass


@dataclass(frozen=True)
class RemoteCartLine:
    owner_id: str
    line_item_id: int
    quantity: int

    @property
    def key(self) -> tuple[str, int]:
        return self.owner_id, self.line_item_id
