import re

from fastapi import Header, HTTPException, Request, status

from cart_reconciler.infrastructure.resolution import CartSession, CartSessionRegistry

_SESSION_KEY_RE = re.compile(r"^[A-Za-z0-9_-]{1,64}$")


def get_registry(request: Request) -> CartSessionRegistry:
    return request.app.state.cart_sessions


async def get_cart_session(
    request: Request,
    x_cart_session: str = Header(..., alias="X-Cart-Session"),
) -> CartSession:
    if not _SESSION_KEY_RE.match(x_cart_session):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="X-Cart-Session must be 1-64 characters of letters, digits, '-' or '_'.",
        )
    return get_registry(request).get(x_cart_session)
