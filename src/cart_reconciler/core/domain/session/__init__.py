from cart_reconciler.core.domain.session.session_event import SessionEvent, SignedIn, SignedOut

__all__ = ["SessionEvent", "SignedIn", "SignedOut"]
