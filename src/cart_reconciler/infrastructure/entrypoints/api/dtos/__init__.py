from cart_reconciler.infrastructure.entrypoints.api.dtos.cart_dtos import (
    AddItemRequest,
    CartLineResponse,
    CartResponse,
    SetQuantityRequest,
    SignInRequest,
)

__all__ = [
    "AddItemRequest",
    "CartLineResponse",
    "CartResponse",
    "SetQuantityRequest",
    "SignInRequest",
]
