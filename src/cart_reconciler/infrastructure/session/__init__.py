from cart_reconciler.infrastructure.session.session_event_bus import SessionEventBus, SessionHandler

__all__ = ["SessionEventBus", "SessionHandler"]
