from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

import structlog
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential_jitter,
)

from cart_reconciler.core.application.exceptions import CollaboratorUnavailableError

logger = structlog.get_logger()

_T = TypeVar("_T")


def _is_transient(exc: BaseException) -> bool:
    return isinstance(exc, CollaboratorUnavailableError) and exc.retryable


def _log_retry(retry_state: RetryCallState) -> None:
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    logger.warning(
        "Transient collaborator failure, retrying read",
        attempt=retry_state.attempt_number,
        error_type=type(exc).__name__ if exc else None,
        error_details=str(exc) if exc else None,
        error_retryable=True,
    )


@dataclass(frozen=True)
class RetryPolicy:
    """Retries idempotent reads on retryable transport failures. Never wrap mutations.

    The last failure propagates unchanged once attempts run out.
    """

    max_attempts: int = 1
    initial_wait: float = 0.25
    max_wait: float = 5.0

    async def run(self, fn: Callable[[], Awaitable[_T]]) -> _T:
        retrying = AsyncRetrying(
            retry=retry_if_exception(_is_transient),
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential_jitter(initial=self.initial_wait, max=self.max_wait),
            before_sleep=_log_retry,
            reraise=True,
        )
        return await retrying(fn)
