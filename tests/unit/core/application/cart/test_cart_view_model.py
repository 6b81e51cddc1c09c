"""Unit tests: CartViewModel routing, sign-in merge and per-line serialization."""

import asyncio
from unittest.mock import AsyncMock, call

from cart_reconciler.core.application.cart.cart_view_model import CartViewModel
from cart_reconciler.core.application.cart.local_cart_manager import LocalCartManager
from cart_reconciler.core.application.cart.local_cart_store import LocalCartStore
from cart_reconciler.core.application.exceptions import CollaboratorUnavailableError
from cart_reconciler.core.application.ports import RemoteCartPort, StockOraclePort
from cart_reconciler.core.application.workflows.session_merge_workflow import SessionMergeWorkflow
from cart_reconciler.core.domain.cart import CartView, LocalCartLine
from cart_reconciler.core.domain.session import SignedIn, SignedOut
from cart_reconciler.infrastructure.fakes import (
    FakeRemoteCartGateway,
    InMemoryInventory,
    InMemoryRemoteCartTable,
)


def _view_model(manager: LocalCartManager, gateway: RemoteCartPort) -> tuple[CartViewModel, list[SignedIn]]:
    seen: list[SignedIn] = []

    def factory(event: SignedIn) -> RemoteCartPort:
        seen.append(event)
        return gateway

    return CartViewModel(manager, SessionMergeWorkflow(manager.store), factory), seen


class TestRouting:
    async def test_anonymous_writes_go_to_local_store(
        self, manager: LocalCartManager, store: LocalCartStore
    ) -> None:
        gateway = AsyncMock(spec=RemoteCartPort)
        vm, _ = _view_model(manager, gateway)

        await vm.add(1, 2)

        assert vm.is_authenticated is False
        assert await store.lines() == [LocalCartLine(1, 2)]
        gateway.upsert.assert_not_awaited()

    async def test_authenticated_writes_go_to_remote(self, manager: LocalCartManager) -> None:
        gateway = AsyncMock(spec=RemoteCartPort)
        vm, _ = _view_model(manager, gateway)
        await vm.handle_session_event(SignedIn("user-1"))

        await vm.add(7, 1)
        await vm.set_quantity(7, 3)

        gateway.upsert.assert_any_await(7, 1, is_increment=True)
        gateway.upsert.assert_any_await(7, 3, is_increment=False)

    async def test_authenticated_load_reads_remote(self, manager: LocalCartManager) -> None:
        gateway = AsyncMock(spec=RemoteCartPort)
        gateway.validate_and_fetch.return_value = CartView(stock_changed=True)
        vm, _ = _view_model(manager, gateway)
        await vm.handle_session_event(SignedIn("user-1"))

        view = await vm.load_for_display()

        assert view.stock_changed is True
        gateway.validate_and_fetch.assert_awaited_once()


class TestSetQuantityToZero:
    async def test_discontinued_line_is_removable(
        self, manager: LocalCartManager, store: LocalCartStore, inventory: InMemoryInventory
    ) -> None:
        await store.put(1, 2)
        inventory.discontinue(1)
        vm, _ = _view_model(manager, AsyncMock(spec=RemoteCartPort))

        await vm.set_quantity(1, 0)

        assert await store.lines() == []

    async def test_remote_set_to_zero_removes_line(self, manager: LocalCartManager) -> None:
        gateway = AsyncMock(spec=RemoteCartPort)
        vm, _ = _view_model(manager, gateway)
        await vm.handle_session_event(SignedIn("user-1"))

        await vm.set_quantity(4, 0)

        gateway.remove.assert_awaited_once_with(4)


class TestSignIn:
    async def test_local_lines_merge_into_remote_by_increment(
        self,
        manager: LocalCartManager,
        store: LocalCartStore,
        remote_table: InMemoryRemoteCartTable,
        remote_cart: FakeRemoteCartGateway,
    ) -> None:
        remote_table.put("user-1", 3, 3)
        await manager.upsert(3, 2, is_increment=True)
        vm, _ = _view_model(manager, remote_cart)

        await vm.handle_session_event(SignedIn("user-1"))

        assert remote_table.quantity("user-1", 3) == 5
        assert await store.lines() == []
        assert vm.owner_id == "user-1"

    async def test_merged_sum_is_clamped_to_stock(
        self,
        manager: LocalCartManager,
        remote_table: InMemoryRemoteCartTable,
        remote_cart: FakeRemoteCartGateway,
    ) -> None:
        # variant 1 has 5 units
        remote_table.put("user-1", 1, 3)
        await manager.upsert(1, 4, is_increment=True)
        vm, _ = _view_model(manager, remote_cart)

        await vm.handle_session_event(SignedIn("user-1"))

        assert remote_table.quantity("user-1", 1) == 5

    async def test_partial_failure_still_clears_local_and_switches(
        self, manager: LocalCartManager, store: LocalCartStore
    ) -> None:
        await manager.upsert(1, 1)
        await manager.upsert(2, 1)
        gateway = AsyncMock(spec=RemoteCartPort)
        gateway.upsert.side_effect = [CollaboratorUnavailableError("boom"), None]
        vm, _ = _view_model(manager, gateway)

        await vm.handle_session_event(SignedIn("user-1"))

        assert vm.is_authenticated is True
        assert await store.lines() == []
        assert vm.last_merge is not None
        assert vm.last_merge.failed == (1,)
        assert vm.last_merge.merged == (2,)

    async def test_repeated_sign_in_merges_once(
        self,
        manager: LocalCartManager,
        remote_table: InMemoryRemoteCartTable,
        remote_cart: FakeRemoteCartGateway,
    ) -> None:
        await manager.upsert(3, 2, is_increment=True)
        vm, seen = _view_model(manager, remote_cart)

        await asyncio.gather(
            vm.handle_session_event(SignedIn("user-1")),
            vm.handle_session_event(SignedIn("user-1")),
        )

        assert remote_table.quantity("user-1", 3) == 2
        assert len(seen) == 1

    async def test_owner_change_rebinds_without_merge(self, manager: LocalCartManager) -> None:
        gateway = AsyncMock(spec=RemoteCartPort)
        vm, seen = _view_model(manager, gateway)
        await vm.handle_session_event(SignedIn("user-1"))

        await vm.handle_session_event(SignedIn("user-2"))

        assert vm.owner_id == "user-2"
        assert [event.owner_id for event in seen] == ["user-1", "user-2"]
        gateway.upsert.assert_not_awaited()


class TestSignOut:
    async def test_sign_out_routes_back_to_empty_local_cart(
        self, manager: LocalCartManager, store: LocalCartStore
    ) -> None:
        gateway = AsyncMock(spec=RemoteCartPort)
        vm, _ = _view_model(manager, gateway)
        await vm.handle_session_event(SignedIn("user-1"))

        await vm.handle_session_event(SignedOut())
        await vm.add(3, 1)

        assert vm.is_authenticated is False
        assert vm.owner_id is None
        assert await store.lines() == [LocalCartLine(3, 1)]
        gateway.upsert.assert_not_awaited()

    async def test_sign_out_while_anonymous_keeps_local_cart(
        self, manager: LocalCartManager, store: LocalCartStore
    ) -> None:
        vm, _ = _view_model(manager, AsyncMock(spec=RemoteCartPort))
        await vm.add(3, 1)

        await vm.handle_session_event(SignedOut())

        assert await store.lines() == [LocalCartLine(3, 1)]


class TestConcurrency:
    async def test_concurrent_increments_on_same_line_do_not_lose_updates(
        self, manager: LocalCartManager, store: LocalCartStore
    ) -> None:
        vm, _ = _view_model(manager, AsyncMock(spec=RemoteCartPort))

        await asyncio.gather(*(vm.add(3, 1) for _ in range(6)))

        assert await store.quantity_of(3) == 6


class TestTransitionOrdering:
    async def test_add_during_merge_lands_in_remote_cart(
        self, manager: LocalCartManager, store: LocalCartStore
    ) -> None:
        await store.put(1, 1)
        release = asyncio.Event()

        async def slow_upsert(*args, **kwargs) -> None:
            await release.wait()

        gateway = AsyncMock(spec=RemoteCartPort)
        gateway.upsert.side_effect = slow_upsert
        vm, _ = _view_model(manager, gateway)

        sign_in = asyncio.create_task(vm.handle_session_event(SignedIn("user-1")))
        while not gateway.upsert.await_count:
            await asyncio.sleep(0)
        add = asyncio.create_task(vm.add(3, 2))
        for _ in range(5):
            await asyncio.sleep(0)
        assert not add.done()

        release.set()
        await sign_in
        await add

        assert gateway.upsert.await_args_list == [
            call(1, 1, is_increment=True),
            call(3, 2, is_increment=True),
        ]
        assert await store.lines() == []

    async def test_transition_waits_for_in_flight_write(self, store: LocalCartStore, snapshot_factory) -> None:
        release = asyncio.Event()

        async def slow_stock(ids):
            await release.wait()
            return {3: snapshot_factory(3, 10)}

        oracle = AsyncMock(spec=StockOraclePort)
        oracle.get_stock.side_effect = slow_stock
        local = LocalCartManager(store, oracle)
        gateway = AsyncMock(spec=RemoteCartPort)
        vm, _ = _view_model(local, gateway)

        add = asyncio.create_task(vm.add(3, 2))
        while not oracle.get_stock.await_count:
            await asyncio.sleep(0)
        sign_in = asyncio.create_task(vm.handle_session_event(SignedIn("user-1")))
        for _ in range(5):
            await asyncio.sleep(0)
        assert not sign_in.done()

        release.set()
        await add
        await sign_in

        gateway.upsert.assert_awaited_once_with(3, 2, is_increment=True)
        assert await store.lines() == []

    async def test_line_locks_are_released_after_use(self, manager: LocalCartManager) -> None:
        vm, _ = _view_model(manager, AsyncMock(spec=RemoteCartPort))

        await asyncio.gather(vm.add(1, 1), vm.add(1, 1), vm.add(3, 1), vm.remove(2))

        assert vm._line_locks == {}


class TestTokenRefresh:
    async def test_refreshed_token_rebinds_remote_without_merge(self, manager: LocalCartManager) -> None:
        gateway = AsyncMock(spec=RemoteCartPort)
        vm, seen = _view_model(manager, gateway)
        await vm.handle_session_event(SignedIn("user-1", access_token="old"))

        await vm.handle_session_event(SignedIn("user-1", access_token="refreshed"))

        assert [event.access_token for event in seen] == ["old", "refreshed"]
        assert vm.owner_id == "user-1"
        assert vm.last_merge is not None
        assert vm.last_merge.attempted == ()
        gateway.upsert.assert_not_awaited()

    async def test_same_token_is_not_rebound(self, manager: LocalCartManager) -> None:
        vm, seen = _view_model(manager, AsyncMock(spec=RemoteCartPort))
        await vm.handle_session_event(SignedIn("user-1", access_token="tok"))

        await vm.handle_session_event(SignedIn("user-1", access_token="tok"))

        assert len(seen) == 1


class TestMergeReporting:
    async def test_repeated_sign_in_reports_nothing_merged(
        self, manager: LocalCartManager, remote_cart: FakeRemoteCartGateway
    ) -> None:
        await manager.upsert(3, 1)
        vm, _ = _view_model(manager, remote_cart)
        await vm.handle_session_event(SignedIn("user-1"))
        assert vm.last_merge is not None and vm.last_merge.merged == (3,)

        await vm.handle_session_event(SignedIn("user-1"))

        assert vm.last_merge.merged == ()


class TestClampNotice:
    async def test_anonymous_clamp_does_not_leak_into_next_anonymous_cart(
        self, manager: LocalCartManager, remote_cart: FakeRemoteCartGateway
    ) -> None:
        # variant 2 has 2 units
        await manager.upsert(2, 5, is_increment=True)
        vm, _ = _view_model(manager, remote_cart)

        await vm.handle_session_event(SignedIn("user-1"))
        await vm.handle_session_event(SignedOut())
        view = await vm.load_for_display()

        assert view.is_empty
        assert view.stock_changed is False
