"""Runtime settings for routeprom.

Values are read from ``ROUTEPROM_*`` environment variables (or a ``.env``
file).  They only provide defaults for the exposition endpoint and the
logger; the per-middleware request policy lives in ``core.policy``.
"""

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Process-level settings."""

    model_config = SettingsConfigDict(
        env_prefix="ROUTEPROM_",
        env_file=".env",
        extra="ignore",
    )

    LOG_LEVEL: str = "INFO"

    # Prepended to every metric name, e.g. "shop" -> "shop_http_requests_total".
    METRICS_PREFIX: str = ""
    METRICS_PATH: str = "/metrics"

    # Sidecar exposition server (see api.metrics.MetricsServer).
    METRICS_HOST: str = "0.0.0.0"
    METRICS_PORT: int = 9090

    # Basic auth is only enforced when both are non-empty.
    METRICS_USERNAME: str = ""
    METRICS_PASSWORD: SecretStr = SecretStr("")

    @field_validator("LOG_LEVEL", mode="after")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Accept lower-case level names."""
        return v.upper()

    @field_validator("METRICS_PATH", mode="after")
    @classmethod
    def ensure_leading_slash(cls, v: str) -> str:
        """Route paths must start with a slash."""
        return v if v.startswith("/") else f"/{v}"


settings = Settings()
