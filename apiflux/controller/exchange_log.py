"""Exchange logging dispatched off the request path."""

import contextvars
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor

import structlog

from apiflux.codec import pretty_json
from apiflux.controller.classifier import (
    ResponseClass,
    classify,
    log_status,
    status_phrase,
)
from apiflux.controller.constants import (
    DEFAULT_MAX_LOGGED_BODY_CHARS,
    LOG_CHANNEL_THREAD_PREFIX,
)
from apiflux.controller.models import ExchangeRecord
from apiflux.controller.redact import redact_headers, redact_url


logger = structlog.get_logger()

LogHook = Callable[[ExchangeRecord], None]


def _truncate(text: str | None, limit: int) -> str | None:
    if text is None or len(text) <= limit:
        return text
    return text[:limit] + f"... [{len(text) - limit} more chars]"


class StructlogExchangeLogger:
    """Default log hook: one structured event per exchange.

    Credentials in headers and URLs are redacted; bodies are pretty-printed
    JSON truncated to ``max_body_chars``.
    """

    def __init__(self, max_body_chars: int = DEFAULT_MAX_LOGGED_BODY_CHARS) -> None:
        """Initialize the logger.

        Args:
            max_body_chars: Longest body rendering kept in an event.
        """
        self._max_body_chars = max_body_chars
        self._log = logger.bind(component="controller", subcomponent="exchange")

    def __call__(self, record: ExchangeRecord) -> None:
        """Log one exchange.

        Args:
            record: Exchange to log.
        """
        status = log_status(
            record.response.status_code if record.response is not None else None
        )
        request = record.request

        fields = {
            "endpoint": record.endpoint_name,
            "mock": record.is_mock,
            "attempt": record.attempt,
            "method": request.method,
            "url": redact_url(request.url),
            "status_code": status,
            "status_phrase": status_phrase(status),
            "request_headers": redact_headers(request.headers),
            "request_body": _truncate(
                pretty_json(request.content), self._max_body_chars
            ),
            "response_body": _truncate(pretty_json(record.data), self._max_body_chars),
            "bytes": len(record.data),
        }

        if classify(status) == ResponseClass.SUCCESS:
            self._log.info("exchange_success", **fields)
        else:
            self._log.warning("exchange_failure", **fields)


class ExchangeLogChannel:
    """Hands exchange records to a log hook on a dedicated worker thread.

    A single worker keeps records from one controller in submission order
    and keeps formatting off the event loop. Hook failures are logged and
    never reach the request.
    """

    def __init__(self, hook: LogHook) -> None:
        """Initialize the channel.

        Args:
            hook: Callable receiving each ExchangeRecord.
        """
        self._hook = hook
        self._executor = ThreadPoolExecutor(
            max_workers=1, thread_name_prefix=LOG_CHANNEL_THREAD_PREFIX
        )
        self._closed = False

    @property
    def closed(self) -> bool:
        """Check if the channel has been closed."""
        return self._closed

    def submit(self, record: ExchangeRecord) -> Future[None] | None:
        """Queue a record for the hook.

        Args:
            record: Exchange to log.

        Returns:
            Future for the delivery, or None if the channel is closed.
        """
        if self._closed:
            return None
        # Worker threads do not inherit contextvars; carry request_id across.
        context = contextvars.copy_context()
        return self._executor.submit(context.run, self._deliver, record)

    def _deliver(self, record: ExchangeRecord) -> None:
        try:
            self._hook(record)
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "exchange_log_hook_failed",
                endpoint=record.endpoint_name,
                error=str(exc),
            )

    def close(self, wait: bool = True) -> None:
        """Stop accepting records and shut the worker down.

        Args:
            wait: Block until queued records are delivered.
        """
        self._closed = True
        self._executor.shutdown(wait=wait)
