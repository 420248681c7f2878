"""Application settings powered by Pydantic BaseSettings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from apiflux.controller.constants import (
    DEFAULT_PREVIEW_DELAY_SECONDS,
    DEFAULT_RETRY_BACKOFF_SECONDS,
    DEFAULT_TIMEOUT_SECONDS,
    DEFAULT_USER_AGENT,
)
from apiflux.controller.models import Environment


class ApiFluxSettings(BaseSettings):
    """Environment configuration for controllers and logging.

    Every field reads from ``APIFLUX_<FIELD>`` (e.g. ``APIFLUX_ENVIRONMENT``)
    or a local ``.env`` file.
    """

    model_config = SettingsConfigDict(
        env_prefix="APIFLUX_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    environment: Environment = Environment.LIVE
    timeout_seconds: float = Field(default=DEFAULT_TIMEOUT_SECONDS, gt=0.0)
    user_agent: str = DEFAULT_USER_AGENT
    retry_backoff_seconds: float = Field(
        default=DEFAULT_RETRY_BACKOFF_SECONDS, ge=0.0
    )
    preview_delay_seconds: float = Field(
        default=DEFAULT_PREVIEW_DELAY_SECONDS, ge=0.0
    )
    log_exchanges: bool = True
    log_level: str = "INFO"
    log_json: bool = True


def get_settings() -> ApiFluxSettings:
    """Get a settings instance."""
    return ApiFluxSettings()
