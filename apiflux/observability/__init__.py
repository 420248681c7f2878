"""Observability helpers: structured logging setup and request context."""

from apiflux.observability.logging import (
    configure_from_settings,
    configure_logging,
    get_logger,
    new_request_id,
    request_context,
)


__all__ = [
    "configure_from_settings",
    "configure_logging",
    "get_logger",
    "new_request_id",
    "request_context",
]
