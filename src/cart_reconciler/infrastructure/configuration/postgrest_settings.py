from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from cart_reconciler.core.application.exceptions import ConfigurationError


class PostgrestSettings(BaseSettings):
    """Settings for the Supabase/PostgREST stock oracle and remote cart."""

    url: str = Field(default="", alias="SUPABASE_URL")
    anon_key: SecretStr | None = Field(default=None, alias="SUPABASE_ANON_KEY")
    http_timeout_seconds: float = Field(default=10.0, gt=0, alias="POSTGREST_HTTP_TIMEOUT")
    # 1 = fail fast. Only idempotent reads go through the retry policy.
    transport_max_attempts: int = Field(default=1, ge=1, alias="POSTGREST_MAX_ATTEMPTS")

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)

    def validate_credentials(self) -> None:
        missing = []
        if not self.url:
            missing.append("SUPABASE_URL")
        if not self.anon_key or not self.anon_key.get_secret_value():
            missing.append("SUPABASE_ANON_KEY")
        if missing:
            raise ConfigurationError(
                f"PostgREST backend selected but {', '.join(missing)} not configured.",
                context={"missing": missing},
            )
