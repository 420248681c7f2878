"""Unit tests for controller configuration."""

import pytest
from pydantic import ValidationError

from apiflux.controller.config import ControllerConfig
from apiflux.settings import ApiFluxSettings


class TestControllerConfig:
    """Tests for ControllerConfig."""

    def test_defaults(self) -> None:
        """Test default configuration values."""
        config = ControllerConfig()

        assert config.timeout_seconds == 60.0
        assert config.follow_redirects is False
        assert config.verify is True
        assert config.retry_backoff_seconds == 1.0
        assert config.preview_delay_seconds == 1.0
        assert config.log_exchanges is True

    def test_linear_backoff(self) -> None:
        """Test that backoff grows linearly with the attempt index."""
        config = ControllerConfig(retry_backoff_seconds=2.0)

        assert [config.backoff_seconds(n) for n in range(4)] == [2.0, 4.0, 6.0, 8.0]

    def test_zero_backoff(self) -> None:
        """Test that backoff can be disabled."""
        assert ControllerConfig(retry_backoff_seconds=0).backoff_seconds(5) == 0

    def test_bounds(self) -> None:
        """Test that out-of-range values are rejected."""
        with pytest.raises(ValidationError):
            ControllerConfig(timeout_seconds=0)
        with pytest.raises(ValidationError):
            ControllerConfig(retry_backoff_seconds=-1)

    def test_extra_fields_forbidden(self) -> None:
        """Test that unknown options are rejected."""
        with pytest.raises(ValidationError):
            ControllerConfig(max_retries=3)  # type: ignore[call-arg]

    def test_frozen(self) -> None:
        """Test that config is immutable."""
        config = ControllerConfig()

        with pytest.raises(ValidationError):
            config.timeout_seconds = 5  # type: ignore[misc]

    def test_from_settings(self) -> None:
        """Test building a config from settings."""
        settings = ApiFluxSettings(
            _env_file=None,
            timeout_seconds=5,
            retry_backoff_seconds=0.1,
            log_exchanges=False,
        )

        config = ControllerConfig.from_settings(settings)

        assert config.timeout_seconds == 5
        assert config.retry_backoff_seconds == 0.1
        assert config.log_exchanges is False
