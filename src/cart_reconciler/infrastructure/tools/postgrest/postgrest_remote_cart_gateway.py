import structlog

from cart_reconciler.core.application.ports import RemoteCartPort
from cart_reconciler.core.domain.cart import CartView
from cart_reconciler.infrastructure.common.retry import RetryPolicy
from cart_reconciler.infrastructure.tools.postgrest.postgrest_cart_mapper import (
    parse_rows,
    to_line_view,
)
from cart_reconciler.infrastructure.tools.postgrest.postgrest_http_client import PostgrestHttpClient

logger = structlog.get_logger()


class PostgrestRemoteCartGateway(RemoteCartPort):
    """Remote cart of the owner identified by the client's access token.

    Clamping happens inside ``upsert_cart_item``; this adapter never retries it.
    """

    def __init__(
        self,
        client: PostgrestHttpClient,
        owner_id: str,
        retry_policy: RetryPolicy | None = None,
    ) -> None:
        self._client = client
        self._owner_id = owner_id
        self._retry_policy = retry_policy or RetryPolicy()

    async def upsert(self, line_item_id: int, quantity: int, is_increment: bool = False) -> None:
        await self._client.rpc(
            "upsert_cart_item",
            {
                "p_variant_id": line_item_id,
                "p_quantity": quantity,
                "p_is_increment": is_increment,
            },
        )

    async def validate_and_fetch(self) -> CartView:
        stock_changed = bool(await self._client.rpc("validate_user_cart"))
        payload = await self._retry_policy.run(lambda: self._client.rpc("get_cart_details"))
        views = []
        for row in parse_rows(payload):
            if row.user_id not in (None, self._owner_id):
                logger.warning(
                    "Ignoring cart row of another owner",
                    owner_id=self._owner_id,
                    line_item_id=row.product_variant_id,
                )
                continue
            view = to_line_view(row)
            if view is not None:
                views.append(view)
        return CartView(lines=tuple(views), stock_changed=stock_changed)
