"""Wires ports to adapters according to AppSettings."""

import structlog

from cart_reconciler.core.application.cart.cart_view_model import CartViewModel, RemoteCartFactory
from cart_reconciler.core.application.cart.local_cart_manager import LocalCartManager
from cart_reconciler.core.application.cart.local_cart_store import LocalCartStore
from cart_reconciler.core.application.ports import LocalCartStoragePort, StockOraclePort
from cart_reconciler.core.application.workflows import SessionMergeWorkflow
from cart_reconciler.core.domain.session import SignedIn
from cart_reconciler.infrastructure.common.retry import RetryPolicy
from cart_reconciler.infrastructure.configuration import AppSettings, CartBackendType
from cart_reconciler.infrastructure.fakes import (
    FakeRemoteCartGateway,
    FakeStockOracle,
    InMemoryInventory,
    InMemoryRemoteCartTable,
)
from cart_reconciler.infrastructure.storage import InMemoryCartStorage, JsonFileCartStorage
from cart_reconciler.infrastructure.tools.postgrest import (
    PostgrestHttpClient,
    PostgrestRemoteCartGateway,
    PostgrestStockOracle,
)

logger = structlog.get_logger()


class CartContainer:
    def __init__(self, settings: AppSettings) -> None:
        self.settings = settings
        self.backend = settings.cart.backend
        # Shared across sessions so the in_memory backend behaves like one remote store.
        self.inventory = InMemoryInventory()
        self.remote_table = InMemoryRemoteCartTable()
        if self.backend == CartBackendType.POSTGREST:
            settings.postgrest.validate_credentials()
        self._retry_policy = RetryPolicy(max_attempts=settings.postgrest.transport_max_attempts)
        logger.info("Cart container ready", backend=self.backend.value)

    def build_storage(self, session_key: str) -> LocalCartStoragePort:
        if self.backend == CartBackendType.IN_MEMORY:
            return InMemoryCartStorage()
        cart_key = f"{self.settings.cart.local_cart_key}_{session_key}"
        return JsonFileCartStorage(self.settings.cart.local_cart_dir, cart_key)

    def build_stock_oracle(self) -> StockOraclePort:
        if self.backend == CartBackendType.IN_MEMORY:
            return FakeStockOracle(self.inventory)
        return PostgrestStockOracle(PostgrestHttpClient(self.settings.postgrest), self._retry_policy)

    def build_remote_cart_factory(self) -> RemoteCartFactory:
        if self.backend == CartBackendType.IN_MEMORY:
            return lambda event: FakeRemoteCartGateway(event.owner_id, self.remote_table, self.inventory)

        def _postgrest_cart(event: SignedIn) -> PostgrestRemoteCartGateway:
            client = PostgrestHttpClient(self.settings.postgrest, access_token=event.access_token)
            return PostgrestRemoteCartGateway(client, event.owner_id, self._retry_policy)

        return _postgrest_cart

    def build_view_model(self, session_key: str) -> CartViewModel:
        store = LocalCartStore(self.build_storage(session_key))
        return CartViewModel(
            local_manager=LocalCartManager(store, self.build_stock_oracle()),
            merge_workflow=SessionMergeWorkflow(store),
            remote_cart_factory=self.build_remote_cart_factory(),
        )
