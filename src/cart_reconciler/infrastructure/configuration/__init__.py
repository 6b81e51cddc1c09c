from cart_reconciler.infrastructure.configuration.app_settings import AppSettings
from cart_reconciler.infrastructure.configuration.cart_settings import CartBackendType, CartSettings
from cart_reconciler.infrastructure.configuration.postgrest_settings import PostgrestSettings

__all__ = ["AppSettings", "CartBackendType", "CartSettings", "PostgrestSettings"]
