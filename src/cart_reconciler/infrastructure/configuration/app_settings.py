from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from cart_reconciler.infrastructure.configuration.cart_settings import CartSettings
from cart_reconciler.infrastructure.configuration.postgrest_settings import PostgrestSettings


class AppSettings(BaseSettings):
    """
    Master configuration combining all sub-settings.
    Each sub-settings class reads its own environment keys.
    """

    app_name: str = Field(default="Cart Reconciler", alias="APP_NAME")
    env: str = Field(default="local", alias="APP_ENV")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    cart: CartSettings = Field(default_factory=CartSettings)
    postgrest: PostgrestSettings = Field(default_factory=PostgrestSettings)

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)
