from decimal import Decimal

from pydantic import BaseModel, ConfigDict


class ProductRefDTO(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int
    name: str
    slug: str


class VariantDTO(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int
    sku: str
    price: Decimal
    stock_quantity: int
    product: ProductRefDTO
    image_url: str | None = None


class CartDetailsRowDTO(BaseModel):
    """One row of the ``get_cart_details`` RPC.

    With ``p_variant_ids`` the RPC answers for arbitrary variants (anonymous carts);
    without it, for the caller's own cart, in which case ``user_id`` and ``quantity``
    are filled in.
    """

    model_config = ConfigDict(extra="ignore")

    product_variant_id: int
    variant: VariantDTO
    quantity: int | None = None
    user_id: str | None = None
