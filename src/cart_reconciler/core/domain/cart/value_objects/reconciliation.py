from dataclasses import dataclass


@dataclass(frozen=True)
class Remove:
    """The line must not be stored."""


@dataclass(frozen=True)
class SetQuantity:
    """Store exactly ``quantity`` units, replacing any prior value."""

    quantity: int

    def __post_init__(self):
        if self.quantity <= 0:
            raise ValueError(f"SetQuantity requires a positive quantity, got {self.quantity}.")


Reconciliation = Remove | SetQuantity
