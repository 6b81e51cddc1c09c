"""Unit tests: PostgREST stock oracle and remote cart gateway over respx."""

import json
from decimal import Decimal

import httpx
import pytest
import respx
from pydantic import SecretStr

from cart_reconciler.core.application.exceptions import (
    CollaboratorUnavailableError,
    ConfigurationError,
)
from cart_reconciler.infrastructure.common.retry import RetryPolicy
from cart_reconciler.infrastructure.configuration import PostgrestSettings
from cart_reconciler.infrastructure.tools.postgrest import (
    PostgrestHttpClient,
    PostgrestRemoteCartGateway,
    PostgrestStockOracle,
)
from cart_reconciler.infrastructure.tools.postgrest.postgrest_cart_mapper import PLACEHOLDER_IMAGE

BASE_URL = "https://shop.supabase.test"
DETAILS_URL = f"{BASE_URL}/rest/v1/rpc/get_cart_details"
UPSERT_URL = f"{BASE_URL}/rest/v1/rpc/upsert_cart_item"
VALIDATE_URL = f"{BASE_URL}/rest/v1/rpc/validate_user_cart"


def _row(variant_id: int, stock: int, quantity: int | None = None, user_id: str | None = None,
         image_url: str | None = None) -> dict:
    return {
        "product_variant_id": variant_id,
        "quantity": quantity,
        "user_id": user_id,
        "variant": {
            "id": variant_id,
            "sku": f"POLO-{variant_id}",
            "price": "49.90",
            "stock_quantity": stock,
            "image_url": image_url,
            "product": {"id": 10 + variant_id, "name": "Polo Oversize", "slug": "polo-oversize"},
        },
    }


@pytest.fixture
def settings() -> PostgrestSettings:
    return PostgrestSettings(url=BASE_URL + "/", anon_key=SecretStr("anon-key"))


@pytest.fixture
def client(settings: PostgrestSettings) -> PostgrestHttpClient:
    return PostgrestHttpClient(settings, access_token="user-token")


class TestPostgrestHttpClient:
    def test_missing_credentials_fail_fast(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            PostgrestHttpClient(PostgrestSettings(url="", anon_key=None))

        assert exc_info.value.context["missing"] == ["SUPABASE_URL", "SUPABASE_ANON_KEY"]

    @respx.mock
    async def test_sends_apikey_and_user_bearer(self, client: PostgrestHttpClient) -> None:
        route = respx.post(VALIDATE_URL).mock(return_value=httpx.Response(200, json=False))

        await client.rpc("validate_user_cart")

        request = route.calls.last.request
        assert request.headers["apikey"] == "anon-key"
        assert request.headers["Authorization"] == "Bearer user-token"

    @respx.mock
    async def test_anonymous_client_uses_anon_key_as_bearer(self, settings: PostgrestSettings) -> None:
        route = respx.post(VALIDATE_URL).mock(return_value=httpx.Response(200, json=False))

        await PostgrestHttpClient(settings).rpc("validate_user_cart")

        assert route.calls.last.request.headers["Authorization"] == "Bearer anon-key"

    @respx.mock
    async def test_server_error_is_retryable(self, client: PostgrestHttpClient) -> None:
        respx.post(DETAILS_URL).mock(return_value=httpx.Response(503, text="upstream down"))

        with pytest.raises(CollaboratorUnavailableError) as exc_info:
            await client.rpc("get_cart_details")

        assert exc_info.value.retryable is True
        assert exc_info.value.context["status_code"] == 503

    @respx.mock
    async def test_client_error_is_not_retryable_and_redacted(self, client: PostgrestHttpClient) -> None:
        respx.post(DETAILS_URL).mock(
            return_value=httpx.Response(401, text="invalid Bearer eyJabc.eyJdef.sig123")
        )

        with pytest.raises(CollaboratorUnavailableError) as exc_info:
            await client.rpc("get_cart_details")

        assert exc_info.value.retryable is False
        assert "eyJabc" not in str(exc_info.value)

    @respx.mock
    async def test_transport_error_is_retryable(self, client: PostgrestHttpClient) -> None:
        respx.post(DETAILS_URL).mock(side_effect=httpx.ConnectError("refused"))

        with pytest.raises(CollaboratorUnavailableError) as exc_info:
            await client.rpc("get_cart_details")

        assert exc_info.value.retryable is True

    @respx.mock
    async def test_empty_body_reads_as_none(self, client: PostgrestHttpClient) -> None:
        respx.post(UPSERT_URL).mock(return_value=httpx.Response(204))

        assert await client.rpc("upsert_cart_item", {"p_variant_id": 1}) is None


class TestPostgrestStockOracle:
    @respx.mock
    async def test_batches_ids_and_maps_rows(self, client: PostgrestHttpClient) -> None:
        route = respx.post(DETAILS_URL).mock(
            return_value=httpx.Response(200, json=[_row(4, 3), _row(2, -1, image_url="https://img/2.png")])
        )

        stock = await PostgrestStockOracle(client).get_stock([4, 2, 4])

        assert json.loads(route.calls.last.request.content) == {"p_variant_ids": [2, 4]}
        assert route.call_count == 1
        assert stock[4].available_quantity == 3
        assert stock[4].display.price == Decimal("49.90")
        assert stock[4].display.image_url == PLACEHOLDER_IMAGE
        assert stock[2].available_quantity == 0
        assert stock[2].display.image_url == "https://img/2.png"

    @respx.mock
    async def test_unknown_ids_are_absent(self, client: PostgrestHttpClient) -> None:
        respx.post(DETAILS_URL).mock(return_value=httpx.Response(200, json=[_row(4, 3), _row(8, 1)]))

        stock = await PostgrestStockOracle(client).get_stock([4, 5])

        assert set(stock) == {4}

    async def test_empty_request_makes_no_call(self, client: PostgrestHttpClient) -> None:
        with respx.mock(assert_all_called=False) as mock:
            route = mock.post(DETAILS_URL)

            assert await PostgrestStockOracle(client).get_stock([]) == {}
            assert route.call_count == 0

    @respx.mock
    async def test_reads_are_retried_when_configured(self, client: PostgrestHttpClient) -> None:
        route = respx.post(DETAILS_URL).mock(
            side_effect=[httpx.Response(502), httpx.Response(200, json=[_row(1, 2)])]
        )
        oracle = PostgrestStockOracle(client, RetryPolicy(max_attempts=2, initial_wait=0, max_wait=0))

        stock = await oracle.get_stock([1])

        assert route.call_count == 2
        assert stock[1].available_quantity == 2

    @respx.mock
    async def test_malformed_payload_is_not_retryable(self, client: PostgrestHttpClient) -> None:
        respx.post(DETAILS_URL).mock(return_value=httpx.Response(200, json={"error": "nope"}))

        with pytest.raises(CollaboratorUnavailableError) as exc_info:
            await PostgrestStockOracle(client).get_stock([1])

        assert exc_info.value.retryable is False


class TestPostgrestRemoteCartGateway:
    @respx.mock
    async def test_upsert_sends_rpc_params(self, client: PostgrestHttpClient) -> None:
        route = respx.post(UPSERT_URL).mock(return_value=httpx.Response(204))

        await PostgrestRemoteCartGateway(client, "user-1").upsert(7, 2, is_increment=True)

        assert json.loads(route.calls.last.request.content) == {
            "p_variant_id": 7,
            "p_quantity": 2,
            "p_is_increment": True,
        }

    @respx.mock
    async def test_remove_is_set_to_zero(self, client: PostgrestHttpClient) -> None:
        route = respx.post(UPSERT_URL).mock(return_value=httpx.Response(204))

        await PostgrestRemoteCartGateway(client, "user-1").remove(7)

        assert json.loads(route.calls.last.request.content) == {
            "p_variant_id": 7,
            "p_quantity": 0,
            "p_is_increment": False,
        }

    @respx.mock
    async def test_upsert_failure_is_never_retried(self, client: PostgrestHttpClient) -> None:
        route = respx.post(UPSERT_URL).mock(return_value=httpx.Response(500))
        gateway = PostgrestRemoteCartGateway(client, "user-1", RetryPolicy(max_attempts=3, initial_wait=0))

        with pytest.raises(CollaboratorUnavailableError):
            await gateway.upsert(7, 1)

        assert route.call_count == 1

    @respx.mock
    async def test_validate_and_fetch_maps_lines(self, client: PostgrestHttpClient) -> None:
        respx.post(VALIDATE_URL).mock(return_value=httpx.Response(200, json=True))
        respx.post(DETAILS_URL).mock(
            return_value=httpx.Response(
                200,
                json=[
                    _row(1, 5, quantity=2, user_id="user-1"),
                    _row(2, 5, quantity=0, user_id="user-1"),
                    _row(3, 5, quantity=1, user_id="someone-else"),
                ],
            )
        )

        view = await PostgrestRemoteCartGateway(client, "user-1").validate_and_fetch()

        assert view.stock_changed is True
        assert [line.line_item_id for line in view.lines] == [1]
        assert view.total_amount == Decimal("99.80")

    @respx.mock
    async def test_validate_failure_propagates(self, client: PostgrestHttpClient) -> None:
        respx.post(VALIDATE_URL).mock(return_value=httpx.Response(500))

        with pytest.raises(CollaboratorUnavailableError):
            await PostgrestRemoteCartGateway(client, "user-1").validate_and_fetch()
