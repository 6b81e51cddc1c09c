import time
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass

import structlog

from cart_reconciler.core.application.cart.cart_view_model import CartViewModel
from cart_reconciler.infrastructure.resolution.container import CartContainer
from cart_reconciler.infrastructure.session import SessionEventBus

logger = structlog.get_logger()


@dataclass
class CartSession:
    view_model: CartViewModel
    events: SessionEventBus
    last_seen: float = 0.0


class CartSessionRegistry:
    """One view model and one session stream per client cart session.

    Bounded: sessions idle longer than ``session_idle_seconds`` expire, and beyond
    ``max_sessions`` the least recently used one is evicted. Evicting drops only the
    in-process objects; file-backed anonymous carts stay on disk under their key.
    """

    def __init__(
        self,
        container: CartContainer,
        *,
        max_sessions: int | None = None,
        idle_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.container = container
        cart_settings = container.settings.cart
        self._max_sessions = max_sessions or cart_settings.max_sessions
        self._idle_seconds = idle_seconds or cart_settings.session_idle_seconds
        self._clock = clock
        self._sessions: OrderedDict[str, CartSession] = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_key: str) -> bool:
        return session_key in self._sessions

    def get(self, session_key: str) -> CartSession:
        now = self._clock()
        self._expire_idle(now)
        session = self._sessions.get(session_key)
        if session is None:
            session = self._create(session_key)
            self._sessions[session_key] = session
            self._evict_overflow()
        else:
            self._sessions.move_to_end(session_key)
        session.last_seen = now
        return session

    def _create(self, session_key: str) -> CartSession:
        view_model = self.container.build_view_model(session_key)
        events = SessionEventBus()
        events.subscribe(view_model.handle_session_event)
        return CartSession(view_model=view_model, events=events)

    def _expire_idle(self, now: float) -> None:
        # Oldest first: stop at the first session still within the idle window.
        while self._sessions:
            session_key, session = next(iter(self._sessions.items()))
            if now - session.last_seen < self._idle_seconds:
                return
            del self._sessions[session_key]
            logger.debug("Cart session expired", session_key=session_key)

    def _evict_overflow(self) -> None:
        while len(self._sessions) > self._max_sessions:
            session_key, _ = self._sessions.popitem(last=False)
            logger.info("Cart session evicted", session_key=session_key, max_sessions=self._max_sessions)
