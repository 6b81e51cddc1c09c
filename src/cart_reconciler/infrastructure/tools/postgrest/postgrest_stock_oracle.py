from collections.abc import Iterable

from cart_reconciler.core.application.ports import StockOraclePort
from cart_reconciler.core.domain.cart import StockSnapshot
from cart_reconciler.infrastructure.common.retry import RetryPolicy
from cart_reconciler.infrastructure.tools.postgrest.postgrest_cart_mapper import (
    parse_rows,
    to_stock_snapshot,
)
from cart_reconciler.infrastructure.tools.postgrest.postgrest_http_client import PostgrestHttpClient


class PostgrestStockOracle(StockOraclePort):
    def __init__(self, client: PostgrestHttpClient, retry_policy: RetryPolicy | None = None) -> None:
        self._client = client
        self._retry_policy = retry_policy or RetryPolicy()

    async def get_stock(self, line_item_ids: Iterable[int]) -> dict[int, StockSnapshot]:
        ids = sorted(set(line_item_ids))
        if not ids:
            return {}
        payload = await self._retry_policy.run(
            lambda: self._client.rpc("get_cart_details", {"p_variant_ids": ids})
        )
        snapshots = (to_stock_snapshot(row) for row in parse_rows(payload))
        return {s.line_item_id: s for s in snapshots if s.line_item_id in ids}
