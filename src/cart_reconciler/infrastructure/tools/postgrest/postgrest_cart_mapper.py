from typing import Any

from pydantic import ValidationError

from cart_reconciler.core.application.exceptions import CollaboratorUnavailableError
from cart_reconciler.core.domain.cart import CartLineView, StockSnapshot, VariantDisplay
from cart_reconciler.infrastructure.tools.postgrest.dtos import CartDetailsRowDTO

PLACEHOLDER_IMAGE = "https://placehold.co/128x128/e2e8f0/64748b?text=Producto"


def parse_rows(payload: Any) -> list[CartDetailsRowDTO]:
    if payload is None:
        return []
    if not isinstance(payload, list):
        raise CollaboratorUnavailableError(
            "get_cart_details returned a non-list payload.", retryable=False
        )
    try:
        return [CartDetailsRowDTO.model_validate(row) for row in payload]
    except ValidationError as exc:
        raise CollaboratorUnavailableError(
            f"get_cart_details returned malformed rows: {exc.error_count()} errors.",
            retryable=False,
        ) from exc


def to_stock_snapshot(row: CartDetailsRowDTO) -> StockSnapshot:
    variant = row.variant
    return StockSnapshot(
        line_item_id=row.product_variant_id,
        available_quantity=max(variant.stock_quantity, 0),
        display=VariantDisplay(
            sku=variant.sku,
            price=variant.price,
            product_id=variant.product.id,
            product_name=variant.product.name,
            product_slug=variant.product.slug,
            image_url=variant.image_url or PLACEHOLDER_IMAGE,
        ),
    )


def to_line_view(row: CartDetailsRowDTO) -> CartLineView | None:
    """None for rows without a positive quantity; those are not cart lines."""
    if not row.quantity or row.quantity <= 0:
        return None
    snapshot = to_stock_snapshot(row)
    return CartLineView(
        line_item_id=snapshot.line_item_id,
        quantity=row.quantity,
        available_quantity=snapshot.available_quantity,
        display=snapshot.display,
    )
