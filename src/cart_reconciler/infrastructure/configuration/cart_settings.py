from enum import StrEnum
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class CartBackendType(StrEnum):
    POSTGREST = "postgrest"
    IN_MEMORY = "in_memory"


class CartSettings(BaseSettings):
    """Where anonymous carts live and which collaborators back them."""

    backend: CartBackendType = Field(default=CartBackendType.IN_MEMORY, alias="CART_BACKEND")
    local_cart_dir: Path = Field(default=Path("./runtime_data/carts"), alias="LOCAL_CART_DIR")
    local_cart_key: str = Field(default="cart_items", alias="LOCAL_CART_KEY")
    # Live anonymous sessions kept in memory; least recently used beyond this are evicted.
    max_sessions: int = Field(default=10_000, ge=1, alias="CART_MAX_SESSIONS")
    session_idle_seconds: float = Field(default=3600.0, gt=0, alias="CART_SESSION_IDLE_SECONDS")

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)
