from dataclasses import dataclass


@dataclass(frozen=True)
class LocalCartLine:
    """One anonymous-session cart line, as persisted in client-resident storage."""

    line_item_id: int
    quantity: int

    def __post_init__(self):
        if self.quantity <= 0:
            raise ValueError(
                f"Cart line {self.line_item_id} must hold a positive quantity, got {self.quantity}."
            )
