from fastapi import APIRouter, Depends

from cart_reconciler.infrastructure.entrypoints.api.dependencies import get_cart_session
from cart_reconciler.infrastructure.entrypoints.api.dtos import (
    AddItemRequest,
    CartResponse,
    SetQuantityRequest,
)
from cart_reconciler.infrastructure.resolution import CartSession

router = APIRouter(prefix="/cart", tags=["cart"])


async def _reload(session: CartSession) -> CartResponse:
    # Re-read after every mutation; the stored quantity may differ from the request.
    view = await session.view_model.load_for_display()
    return CartResponse.from_view(view, owner_id=session.view_model.owner_id)


@router.get("", response_model=CartResponse)
async def get_cart(session: CartSession = Depends(get_cart_session)) -> CartResponse:
    return await _reload(session)


@router.post("/items", response_model=CartResponse)
async def add_item(
    body: AddItemRequest, session: CartSession = Depends(get_cart_session)
) -> CartResponse:
    await session.view_model.add(body.line_item_id, body.quantity)
    return await _reload(session)


@router.put("/items/{line_item_id}", response_model=CartResponse)
async def set_item_quantity(
    line_item_id: int,
    body: SetQuantityRequest,
    session: CartSession = Depends(get_cart_session),
) -> CartResponse:
    await session.view_model.set_quantity(line_item_id, body.quantity)
    return await _reload(session)


@router.delete("/items/{line_item_id}", response_model=CartResponse)
async def remove_item(
    line_item_id: int, session: CartSession = Depends(get_cart_session)
) -> CartResponse:
    await session.view_model.remove(line_item_id)
    return await _reload(session)
