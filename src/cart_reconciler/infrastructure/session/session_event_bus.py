from collections.abc import Awaitable, Callable

import structlog

from cart_reconciler.core.domain.session import SessionEvent, SignedIn

logger = structlog.get_logger()

SessionHandler = Callable[[SessionEvent], Awaitable[None]]


class SessionEventBus:
    """In-process stream of session notifications.

    Auth providers may repeat SignedIn on token refresh or reload; subscribers are
    expected to act on edges only. Handlers run sequentially in subscription order.
    """

    def __init__(self) -> None:
        self._handlers: list[SessionHandler] = []

    def subscribe(self, handler: SessionHandler) -> Callable[[], None]:
        self._handlers.append(handler)

        def unsubscribe() -> None:
            if handler in self._handlers:
                self._handlers.remove(handler)

        return unsubscribe

    async def publish(self, event: SessionEvent) -> None:
        logger.info(
            "Session event published",
            event_type="session.signed_in" if isinstance(event, SignedIn) else "session.signed_out",
            owner_id=getattr(event, "owner_id", None),
        )
        for handler in list(self._handlers):
            await handler(event)
