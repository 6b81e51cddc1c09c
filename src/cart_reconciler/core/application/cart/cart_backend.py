from dataclasses import dataclass

from cart_reconciler.core.application.cart.local_cart_manager import LocalCartManager
from cart_reconciler.core.application.ports import RemoteCartPort


@dataclass(frozen=True)
class LocalBackend:
    manager: LocalCartManager


@dataclass(frozen=True)
class RemoteBackend:
    owner_id: str
    gateway: RemoteCartPort


CartBackend = LocalBackend | RemoteBackend
