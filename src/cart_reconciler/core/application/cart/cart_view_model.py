import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager

import structlog

from cart_reconciler.core.application.cart.cart_backend import (
    CartBackend,
    LocalBackend,
    RemoteBackend,
)
from cart_reconciler.core.application.cart.local_cart_manager import LocalCartManager
from cart_reconciler.core.application.ports import RemoteCartPort
from cart_reconciler.core.application.workflows.session_merge_workflow import (
    MergeReport,
    SessionMergeWorkflow,
)
from cart_reconciler.core.domain.cart import CartView
from cart_reconciler.core.domain.session import SessionEvent, SignedIn, SignedOut

logger = structlog.get_logger()

RemoteCartFactory = Callable[[SignedIn], RemoteCartPort]


class CartViewModel:
    """Façade the presentation layer talks to.

    Routes every operation to the anonymous local cart or to the owner's remote cart,
    depending on the last session edge seen. Mutations on the same line serialize.
    Session transitions wait for in-flight operations to drain and hold new ones back
    until routing has flipped, so nothing is written to a store that a merge already
    snapshotted.
    """

    def __init__(
        self,
        local_manager: LocalCartManager,
        merge_workflow: SessionMergeWorkflow,
        remote_cart_factory: RemoteCartFactory,
    ) -> None:
        self._local = LocalBackend(local_manager)
        self._merge_workflow = merge_workflow
        self._remote_cart_factory = remote_cart_factory
        self._backend: CartBackend = self._local
        self._access_token: str | None = None
        self._transition_lock = asyncio.Lock()
        self._routing = asyncio.Condition()
        self._in_flight = 0
        self._transitioning = False
        self._line_locks: dict[int, asyncio.Lock] = {}
        self._line_waiters: dict[int, int] = {}
        self.last_merge: MergeReport | None = None

    @property
    def is_authenticated(self) -> bool:
        return isinstance(self._backend, RemoteBackend)

    @property
    def owner_id(self) -> str | None:
        if isinstance(self._backend, RemoteBackend):
            return self._backend.owner_id
        return None

    # ── Session edges ──

    async def handle_session_event(self, event: SessionEvent) -> None:
        async with self._transition_lock, self._exclusive_routing():
            if isinstance(event, SignedIn):
                await self._on_signed_in(event)
            elif isinstance(event, SignedOut):
                await self._on_signed_out()

    async def _on_signed_in(self, event: SignedIn) -> None:
        if isinstance(self._backend, RemoteBackend):
            self.last_merge = MergeReport()
            if self._backend.owner_id != event.owner_id:
                logger.info(
                    "Owner changed while authenticated, rebinding remote cart",
                    previous_owner_id=self._backend.owner_id,
                    owner_id=event.owner_id,
                )
            elif event.access_token != self._access_token:
                logger.info("Access token refreshed, rebinding remote cart", owner_id=event.owner_id)
            else:
                logger.debug("Already signed in, ignoring repeated notification", owner_id=event.owner_id)
                return
            self._bind_remote(event, self._remote_cart_factory(event))
            return

        gateway = self._remote_cart_factory(event)
        self.last_merge = await self._merge_workflow.execute(gateway, event.owner_id)
        self._local.manager.discard_clamp_notice()
        self._bind_remote(event, gateway)
        logger.info("Cart routing switched to remote", owner_id=event.owner_id)

    async def _on_signed_out(self) -> None:
        if isinstance(self._backend, LocalBackend):
            return
        await self._local.manager.clear()
        self._backend = self._local
        self._access_token = None
        logger.info("Cart routing switched to local")

    def _bind_remote(self, event: SignedIn, gateway: RemoteCartPort) -> None:
        self._backend = RemoteBackend(event.owner_id, gateway)
        self._access_token = event.access_token

    # ── Mutating surface ──

    async def add(self, line_item_id: int, quantity: int) -> None:
        await self._mutate(line_item_id, lambda backend: _upsert(backend, line_item_id, quantity, True))

    async def set_quantity(self, line_item_id: int, quantity: int) -> None:
        if quantity <= 0:
            await self.remove(line_item_id)
            return
        await self._mutate(line_item_id, lambda backend: _upsert(backend, line_item_id, quantity, False))

    async def remove(self, line_item_id: int) -> None:
        await self._mutate(line_item_id, lambda backend: _remove(backend, line_item_id))

    async def load_for_display(self) -> CartView:
        """Validate-then-read on the active backend."""
        async with self._routed() as backend:
            if isinstance(backend, RemoteBackend):
                view = await backend.gateway.validate_and_fetch()
            else:
                view = await backend.manager.validate_and_read()
            if view.stock_changed:
                logger.info("Cart adjusted to current stock", owner_id=self.owner_id)
            return view

    async def _mutate(
        self, line_item_id: int, operation: Callable[[CartBackend], Awaitable[None]]
    ) -> None:
        async with self._line_lock(line_item_id), self._routed() as backend:
            await operation(backend)

    # ── Coordination ──

    @asynccontextmanager
    async def _routed(self) -> AsyncIterator[CartBackend]:
        async with self._routing:
            await self._routing.wait_for(lambda: not self._transitioning)
            self._in_flight += 1
        try:
            yield self._backend
        finally:
            async with self._routing:
                self._in_flight -= 1
                self._routing.notify_all()

    @asynccontextmanager
    async def _exclusive_routing(self) -> AsyncIterator[None]:
        async with self._routing:
            self._transitioning = True
            await self._routing.wait_for(lambda: self._in_flight == 0)
        try:
            yield
        finally:
            async with self._routing:
                self._transitioning = False
                self._routing.notify_all()

    @asynccontextmanager
    async def _line_lock(self, line_item_id: int) -> AsyncIterator[None]:
        lock = self._line_locks.setdefault(line_item_id, asyncio.Lock())
        self._line_waiters[line_item_id] = self._line_waiters.get(line_item_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._line_waiters[line_item_id] -= 1
            if not self._line_waiters[line_item_id]:
                del self._line_waiters[line_item_id]
                del self._line_locks[line_item_id]


async def _upsert(backend: CartBackend, line_item_id: int, quantity: int, is_increment: bool) -> None:
    if isinstance(backend, RemoteBackend):
        await backend.gateway.upsert(line_item_id, quantity, is_increment=is_increment)
    else:
        await backend.manager.upsert(line_item_id, quantity, is_increment=is_increment)


async def _remove(backend: CartBackend, line_item_id: int) -> None:
    if isinstance(backend, RemoteBackend):
        await backend.gateway.remove(line_item_id)
    else:
        await backend.manager.remove(line_item_id)
