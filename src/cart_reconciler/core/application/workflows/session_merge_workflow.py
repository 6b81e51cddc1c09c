"""One-shot transfer of the anonymous cart into the authenticated remote cart."""

from dataclasses import dataclass, field

import structlog
from structlog.contextvars import bound_contextvars

from cart_reconciler.core.application.cart.local_cart_store import LocalCartStore
from cart_reconciler.core.application.exceptions import CartStorageError
from cart_reconciler.core.application.ports import RemoteCartPort
from cart_reconciler.core.application.workflows.base_workflow import BaseWorkflow
from cart_reconciler.core.domain.cart import LocalCartLine

logger = structlog.get_logger()


@dataclass(frozen=True)
class MergeReport:
    attempted: tuple[int, ...] = ()
    merged: tuple[int, ...] = ()
    failed: tuple[int, ...] = ()
    errors: dict[int, str] = field(default_factory=dict)

    @property
    def is_partial(self) -> bool:
        return bool(self.failed)


class SessionMergeWorkflow(BaseWorkflow):
    """Snapshot -> Replay (increment, sequential) -> Clear.

    Replay is best effort: a failing line is logged and skipped, never retried, and
    the local store is cleared afterwards whatever the individual outcomes were.
    Sign-in is never blocked by this workflow.
    """

    def __init__(self, store: LocalCartStore) -> None:
        self._store = store

    async def execute(self, gateway: RemoteCartPort, owner_id: str) -> MergeReport:
        with bound_contextvars(owner_id=owner_id, event_type="workflow.session_merge"):
            lines = await self._step_1_snapshot()
            if not lines:
                logger.info("Local cart empty, nothing to merge")
                return MergeReport()
            logger.info("Session merge started", lines_count=len(lines))
            try:
                report = await self._step_2_replay(gateway, lines)
            finally:
                await self._step_3_clear()
            logger.info(
                "Session merge completed",
                processing_status="PARTIAL" if report.is_partial else "SUCCESS",
                merged_count=len(report.merged),
                failed_count=len(report.failed),
            )
            return report

    async def _step_1_snapshot(self) -> list[LocalCartLine]:
        try:
            return await self._store.lines()
        except CartStorageError as exc:
            logger.error(
                "Could not read local cart for merge",
                error_type=type(exc).__name__,
                error_details=str(exc),
            )
            return []

    async def _step_2_replay(
        self, gateway: RemoteCartPort, lines: list[LocalCartLine]
    ) -> MergeReport:
        merged: list[int] = []
        failed: list[int] = []
        errors: dict[int, str] = {}
        for line in lines:
            try:
                await gateway.upsert(line.line_item_id, line.quantity, is_increment=True)
            except Exception as exc:
                logger.warning(
                    "Line merge failed, skipping",
                    line_item_id=line.line_item_id,
                    quantity=line.quantity,
                    error_type=type(exc).__name__,
                    error_details=str(exc),
                    error_retryable=False,
                )
                failed.append(line.line_item_id)
                errors[line.line_item_id] = str(exc)
                continue
            merged.append(line.line_item_id)
        return MergeReport(
            attempted=tuple(line.line_item_id for line in lines),
            merged=tuple(merged),
            failed=tuple(failed),
            errors=errors,
        )

    async def _step_3_clear(self) -> None:
        try:
            await self._store.clear()
        except CartStorageError as exc:
            logger.error(
                "Could not clear local cart after merge",
                error_type=type(exc).__name__,
                error_details=str(exc),
            )
