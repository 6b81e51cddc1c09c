from cart_reconciler.infrastructure.tools.postgrest.dtos.cart_details_row import (
    CartDetailsRowDTO,
    ProductRefDTO,
    VariantDTO,
)

__all__ = ["CartDetailsRowDTO", "ProductRefDTO", "VariantDTO"]
