"""Structured logging configuration."""

import logging
import sys
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, TextIO

import structlog


if TYPE_CHECKING:
    from apiflux.settings import ApiFluxSettings


def configure_logging(
    level: int | str = logging.INFO,
    output: TextIO = sys.stderr,
    json_format: bool = True,
) -> None:
    """Configure structured logging for applications using apiflux.

    Sets up structlog with timestamps, log levels, and context binding.
    The library itself only calls ``structlog.get_logger()``; applications
    opt into this configuration.

    Args:
        level: Logging level, as a number or a name like ``"DEBUG"``.
        output: Output stream (default: stderr).
        json_format: Whether to use JSON format (default: True).
    """
    if isinstance(level, str):
        level = logging.getLevelNamesMapping().get(level.upper(), logging.INFO)

    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if json_format:
        processors.append(structlog.processors.JSONRenderer(sort_keys=True))
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=output),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=output,
        level=level,
    )


def configure_from_settings(
    settings: "ApiFluxSettings", output: TextIO = sys.stderr
) -> None:
    """Configure logging from ``APIFLUX_LOG_LEVEL`` and ``APIFLUX_LOG_JSON``.

    Args:
        settings: Loaded settings.
        output: Output stream (default: stderr).
    """
    configure_logging(
        level=settings.log_level,
        output=output,
        json_format=settings.log_json,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a bound logger instance.

    Args:
        name: Optional logger name.

    Returns:
        Bound logger instance.
    """
    logger: structlog.stdlib.BoundLogger = structlog.get_logger(name)
    return logger


def new_request_id() -> str:
    """Generate an identifier for one request call."""
    return uuid.uuid4().hex[:12]


@contextmanager
def request_context(request_id: str, endpoint: str) -> Iterator[None]:
    """Bind request identity to every log event emitted inside the block.

    Context variables are task-local under asyncio, so concurrent requests
    do not see each other's identity.

    Args:
        request_id: Identifier of the request call.
        endpoint: Endpoint identity.
    """
    with structlog.contextvars.bound_contextvars(
        request_id=request_id, endpoint=endpoint
    ):
        yield
