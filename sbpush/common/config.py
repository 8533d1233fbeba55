"""Environment-driven settings for the push CLI.

Loaded once at startup by `load_settings()` and passed explicitly into the
publish flow. Values come from real environment variables first, then from a
local `.env` file when one exists.
"""

from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from sbpush.common.errors import ConfigurationError

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET")


class PushSettings(BaseSettings):
    """Typed view of runtime configuration from environment variables."""

    service_name: str = "sb-push"
    log_level: str = "WARNING"
    sb_connection_string: str | None = None
    sb_endpoint: str | None = None
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        """Accept any case of a standard level name."""

        level = value.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}")
        return level

    def connection_string(self) -> str:
        """Return the trimmed broker connection string.

        SB_CONNECTION_STRING wins whenever it is non-empty; SB_ENDPOINT is only
        consulted when the primary is unset or empty.
        """

        conn = self.sb_connection_string or self.sb_endpoint
        if not conn or not conn.strip():
            raise ConfigurationError(
                "environment variable SB_CONNECTION_STRING (or SB_ENDPOINT) not found; set it in .env"
            )
        return conn.strip()


def load_settings() -> PushSettings:
    """Read settings from the environment and optional `.env` file."""

    try:
        return PushSettings()
    except ValidationError as exc:
        errors = "; ".join(error["msg"] for error in exc.errors())
        raise ConfigurationError(f"invalid settings: {errors}") from exc
