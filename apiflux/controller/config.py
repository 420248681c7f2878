"""Configuration models for the request controller."""

from typing import TYPE_CHECKING, Annotated

from pydantic import BaseModel, ConfigDict, Field

from apiflux.controller.constants import (
    DEFAULT_MAX_LOGGED_BODY_CHARS,
    DEFAULT_PREVIEW_DELAY_SECONDS,
    DEFAULT_RETRY_BACKOFF_SECONDS,
    DEFAULT_TIMEOUT_SECONDS,
    DEFAULT_USER_AGENT,
)


if TYPE_CHECKING:
    from apiflux.settings import ApiFluxSettings


class ControllerConfig(BaseModel):
    """Configuration for a RequestController.

    Transport options (timeout, redirects, TLS verification) are passed
    through to httpx unchanged; the rest tunes retries, the mock path, and
    exchange logging.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    timeout_seconds: Annotated[float, Field(gt=0.0, le=600.0)] = (
        DEFAULT_TIMEOUT_SECONDS
    )
    follow_redirects: bool = False
    verify: bool | str = Field(
        default=True,
        description="TLS verification flag or CA bundle path, handed to httpx",
    )
    user_agent: Annotated[str, Field(min_length=1, max_length=500)] = (
        DEFAULT_USER_AGENT
    )
    retry_backoff_seconds: Annotated[float, Field(ge=0.0, le=60.0)] = (
        DEFAULT_RETRY_BACKOFF_SECONDS
    )
    preview_delay_seconds: Annotated[float, Field(ge=0.0, le=60.0)] = (
        DEFAULT_PREVIEW_DELAY_SECONDS
    )
    log_exchanges: bool = Field(
        default=True,
        description="Global switch for the exchange log hook",
    )
    max_logged_body_chars: Annotated[int, Field(ge=0, le=1_000_000)] = (
        DEFAULT_MAX_LOGGED_BODY_CHARS
    )

    def backoff_seconds(self, attempt: int) -> float:
        """Get the linear backoff before retrying a failed attempt.

        Args:
            attempt: 0-based index of the attempt that failed.

        Returns:
            ``retry_backoff_seconds * (attempt + 1)``.
        """
        return self.retry_backoff_seconds * (attempt + 1)

    @classmethod
    def from_settings(cls, settings: "ApiFluxSettings") -> "ControllerConfig":
        """Build a config from environment settings.

        Args:
            settings: Loaded settings.

        Returns:
            ControllerConfig with the settings' values.
        """
        return cls(
            timeout_seconds=settings.timeout_seconds,
            user_agent=settings.user_agent,
            retry_backoff_seconds=settings.retry_backoff_seconds,
            preview_delay_seconds=settings.preview_delay_seconds,
            log_exchanges=settings.log_exchanges,
        )
