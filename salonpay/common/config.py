"""Central environment-driven settings for the checkout broker.

The process loads this once at startup. Behavior is controlled by environment
variables (see `.env.example`).
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Typed view of runtime configuration from environment variables."""

    service_name: str = "intent-broker"
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 4242
    stripe_secret_key: str
    stripe_publishable_key: str
    stripe_connected_account_id: str | None = None
    allowed_origins: str = "*"
    default_currency: str = "gbp"
    checkout_amount: int = 100
    otel_exporter_otlp_endpoint: str = ""
    domain_association_path: str = ""
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def cors_origins(self) -> list[str]:
        """Split `ALLOWED_ORIGINS` on commas; a lone `*` stays open."""

        if self.allowed_origins.strip() == "*":
            return ["*"]
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]


settings = Settings()
