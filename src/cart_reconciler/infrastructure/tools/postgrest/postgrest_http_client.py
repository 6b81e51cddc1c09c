from typing import Any

import httpx
import structlog

from cart_reconciler.core.application.exceptions import CollaboratorUnavailableError
from cart_reconciler.infrastructure.configuration.postgrest_settings import PostgrestSettings
from cart_reconciler.infrastructure.observability.redaction_service import redact_dict, redact_text

logger = structlog.get_logger()


class PostgrestHttpClient:
    """Async PostgREST RPC client.

    Requests run as the anonymous role unless an access token is supplied, in which
    case the remote functions resolve the owner from that token.
    """

    def __init__(self, settings: PostgrestSettings, access_token: str | None = None) -> None:
        settings.validate_credentials()
        self.base_url = settings.url.rstrip("/")
        self._anon_key = settings.anon_key.get_secret_value() if settings.anon_key else ""
        self._access_token = access_token
        self._timeout = settings.http_timeout_seconds

    def _get_headers(self) -> dict[str, str]:
        return {
            "Accept": "application/json",
            "Content-Type": "application/json",
            "apikey": self._anon_key,
            "Authorization": f"Bearer {self._access_token or self._anon_key}",
        }

    async def rpc(self, function: str, params: dict[str, Any] | None = None) -> Any:
        url = f"{self.base_url}/rest/v1/rpc/{function}"
        logger.debug("PostgREST rpc", function=function, params=redact_dict(params or {}))
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.post(url, headers=self._get_headers(), json=params or {})
        except httpx.HTTPError as exc:
            raise CollaboratorUnavailableError(
                f"Transport failure calling '{function}': {exc}",
                retryable=True,
                context={"function": function},
            ) from exc

        if response.status_code >= 400:
            raise CollaboratorUnavailableError(
                f"'{function}' answered {response.status_code}: {redact_text(response.text)[:300]}",
                retryable=response.status_code >= 500,
                context={"function": function, "status_code": response.status_code},
            )
        if not response.content:
            return None
        return response.json()
