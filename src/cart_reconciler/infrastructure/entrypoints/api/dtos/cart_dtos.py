from decimal import Decimal

from pydantic import BaseModel, Field

from cart_reconciler.core.domain.cart import CartLineView, CartView


class AddItemRequest(BaseModel):
    line_item_id: int = Field(gt=0)
    quantity: int = Field(default=1, gt=0)


class SetQuantityRequest(BaseModel):
    quantity: int = Field(ge=0)


class SignInRequest(BaseModel):
    owner_id: str = Field(min_length=1)
    access_token: str | None = None


class CartLineResponse(BaseModel):
    line_item_id: int
    quantity: int
    available_quantity: int
    sku: str
    product_name: str
    product_slug: str
    image_url: str | None
    unit_price: Decimal
    subtotal: Decimal

    @classmethod
    def from_view(cls, line: CartLineView) -> "CartLineResponse":
        return cls(
            line_item_id=line.line_item_id,
            quantity=line.quantity,
            available_quantity=line.available_quantity,
            sku=line.display.sku,
            product_name=line.display.product_name,
            product_slug=line.display.product_slug,
            image_url=line.display.image_url,
            unit_price=line.display.price,
            subtotal=line.subtotal,
        )


class CartResponse(BaseModel):
    authenticated: bool
    owner_id: str | None = None
    lines: list[CartLineResponse]
    total_items: int
    total_amount: Decimal
    stock_changed: bool

    @classmethod
    def from_view(cls, view: CartView, *, owner_id: str | None) -> "CartResponse":
        return cls(
            authenticated=owner_id is not None,
            owner_id=owner_id,
            lines=[CartLineResponse.from_view(line) for line in view.lines],
            total_items=view.total_items,
            total_amount=view.total_amount,
            stock_changed=view.stock_changed,
        )
