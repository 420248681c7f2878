"""Request controller: endpoint in, typed value or taxonomy error out."""

import asyncio
from collections.abc import Callable, Mapping
from types import TracebackType
from typing import Any, Generic, Self, TypeVar

import httpx
import structlog

from apiflux.codec import decode
from apiflux.controller.classifier import ResponseClass, classify
from apiflux.controller.config import ControllerConfig
from apiflux.controller.exchange_log import (
    ExchangeLogChannel,
    LogHook,
    StructlogExchangeLogger,
)
from apiflux.controller.interceptor import AuthenticationState, InterceptorHooks
from apiflux.controller.metrics import RequestMetrics
from apiflux.controller.models import (
    AttemptOutcome,
    AttemptRecord,
    Environment,
    ExchangeRecord,
    Failure,
    RequestResult,
    Success,
)
from apiflux.controller.redact import redact_url
from apiflux.controller.state_machine import RequestState, RequestStateMachine
from apiflux.endpoint import (
    Endpoint,
    EndpointDescriptor,
    build_request,
    describe,
    endpoint_name,
)
from apiflux.errors import ApiError
from apiflux.observability import new_request_id, request_context


logger = structlog.get_logger()

T = TypeVar("T")
E = TypeVar("E", bound=ApiError)

EventHooks = Mapping[str, list[Callable[..., Any]]]


class RequestController(Generic[E]):
    """Executes endpoint requests with interception, retries, and mocking.

    Each call to ``request`` is independent: the controller's own fields are
    read-only after construction, so one instance can serve any number of
    concurrent callers. Every call ends in a decoded value or exactly one
    ``error_type`` instance; no raw transport or parser exception escapes.

    Environments:
    - LIVE: authenticate, then send up to ``retry_count + 1`` attempts
    - TEST: answer from the endpoint's sample data, no network
    - PREVIEW: like TEST after ``preview_delay_seconds``
    """

    def __init__(
        self,
        environment: Environment = Environment.LIVE,
        interceptor: Any = None,
        config: ControllerConfig | None = None,
        error_type: type[E] = ApiError,  # type: ignore[assignment]
        transport: httpx.AsyncBaseTransport | None = None,
        event_hooks: EventHooks | None = None,
        log_hook: LogHook | None = None,
    ) -> None:
        """Initialize the controller.

        Args:
            environment: LIVE, TEST, or PREVIEW; fixed for this controller.
            interceptor: Object implementing any subset of ``Interceptor``.
            config: Controller configuration.
            error_type: ApiError subclass every failure is expressed as.
            transport: httpx transport (e.g. ``httpx.MockTransport``).
            event_hooks: httpx event hooks (``request``/``response`` lists).
            log_hook: Receives each ExchangeRecord; defaults to structlog.
        """
        self._environment = Environment(environment)
        self._hooks = InterceptorHooks(interceptor)
        self._config = config or ControllerConfig()
        self._error_type = error_type
        self._timeout = httpx.Timeout(self._config.timeout_seconds)
        self._client = httpx.AsyncClient(
            timeout=self._timeout,
            verify=self._config.verify,
            follow_redirects=self._config.follow_redirects,
            transport=transport,
            event_hooks=dict(event_hooks) if event_hooks else None,
        )
        self._log_channel = ExchangeLogChannel(
            log_hook or StructlogExchangeLogger(self._config.max_logged_body_chars)
        )
        self._metrics = RequestMetrics.get_instance()
        self._log = logger.bind(
            component="controller",
            environment=self._environment.value,
        )

    @property
    def environment(self) -> Environment:
        """Get the controller's environment."""
        return self._environment

    @property
    def interceptor(self) -> Any:
        """Get the interceptor, if any."""
        return self._hooks.interceptor

    @property
    def config(self) -> ControllerConfig:
        """Get the controller configuration."""
        return self._config

    async def request(self, endpoint: Endpoint, response_type: type[T]) -> T:
        """Perform a request and decode the response.

        Args:
            endpoint: Endpoint to call.
            response_type: Type the response body is decoded into.

        Returns:
            Decoded response.

        Raises:
            ApiError: An ``error_type`` instance for any failure.
        """
        name = endpoint_name(endpoint)
        with request_context(new_request_id(), name):
            return await self._perform(endpoint, name, response_type)

    async def _perform(
        self, endpoint: Endpoint, name: str, response_type: type[T]
    ) -> T:
        """Run one request call through the state machine."""
        machine = RequestStateMachine(name)
        should_log = True
        self._metrics.record_request()

        try:
            machine.transition(RequestState.ENVIRONMENT_CHECK)
            descriptor = describe(endpoint)
            should_log = descriptor.should_log

            if self._environment != Environment.LIVE or descriptor.uses_sample_data:
                machine.transition(RequestState.MOCK)
                value = await self._mock_request(descriptor, response_type)
            else:
                machine.transition(RequestState.AUTH_GATE)
                await self._authorize()
                value = await self._attempt_loop(machine, descriptor, response_type)

        except ApiError as exc:
            error = self._fail(machine, name, exc, should_log)
            if error is exc:
                raise
            raise error from exc

        except Exception as exc:  # noqa: BLE001
            unknown = self._error_type.unknown_error(f"{type(exc).__name__}: {exc}")
            raise self._fail(machine, name, unknown, should_log) from exc

        machine.transition(RequestState.SUCCESS)
        self._metrics.record_success()
        return value

    async def request_result(
        self, endpoint: Endpoint, response_type: type[T]
    ) -> RequestResult[T]:
        """Perform a request without raising.

        Args:
            endpoint: Endpoint to call.
            response_type: Type the response body is decoded into.

        Returns:
            Success with the decoded value, or Failure with the error.
        """
        try:
            return Success(await self.request(endpoint, response_type))
        except ApiError as error:
            return Failure(error)

    def request_with_callback(
        self,
        endpoint: Endpoint,
        response_type: type[T],
        completion: Callable[[RequestResult[T]], None],
    ) -> "asyncio.Task[None]":
        """Schedule a request and hand its result to a callback.

        Must be called from a running event loop. Keep a reference to the
        returned task; cancelling it abandons the request.

        Args:
            endpoint: Endpoint to call.
            response_type: Type the response body is decoded into.
            completion: Called with the Success or Failure.

        Returns:
            Task running the request.
        """

        async def run() -> None:
            completion(await self.request_result(endpoint, response_type))

        return asyncio.get_running_loop().create_task(run())

    async def aclose(self) -> None:
        """Close the HTTP client and flush the log channel."""
        await self._client.aclose()
        await asyncio.to_thread(self._log_channel.close)

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def _mock_request(
        self, descriptor: EndpointDescriptor, response_type: type[T]
    ) -> T:
        """Answer from sample data without touching the network."""
        request = self._build(descriptor)
        self._hooks.intercept_request(request)

        if self._environment == Environment.PREVIEW:
            await asyncio.sleep(self._config.preview_delay_seconds)

        data = self._hooks.intercept_response_bytes(descriptor.sample_data or b"")
        self._metrics.record_mock_response()
        self._emit(descriptor, request, None, data, attempt=0)

        return decode(
            data,
            response_type,
            descriptor.date_decoding_strategy,
            descriptor.key_decoding_strategy,
        )

    def _check_authentication_state(self) -> None:
        """Fail unless the interceptor reports REACHABLE."""
        state = self._hooks.authentication_state()
        if state == AuthenticationState.NOT_REACHABLE:
            raise self._error_type.connection_error()
        if state == AuthenticationState.NOT_LOGGED_IN:
            raise self._error_type.authentication_error()

    async def _authorize(self) -> None:
        """Gate a live request on authentication state and authenticate()."""
        self._check_authentication_state()

        try:
            authenticated = await self._hooks.authenticate()
        except Exception as exc:  # noqa: BLE001
            self._log.warning("authentication_raised", error=str(exc))
            raise self._error_type.connection_error() from exc

        if not authenticated:
            raise self._error_type.authentication_error()

    async def _attempt_loop(
        self,
        machine: RequestStateMachine,
        descriptor: EndpointDescriptor,
        response_type: type[T],
    ) -> T:
        """Send attempts until one succeeds or the retry budget runs out."""
        retry_count = descriptor.retry_count
        last_error: E | None = None

        for attempt in range(retry_count + 1):
            if last_error is not None:
                delay = self._config.backoff_seconds(attempt - 1)
                self._metrics.record_retry()
                self._log.info(
                    "retry_scheduled",
                    endpoint=descriptor.name,
                    attempt=attempt,
                    delay_seconds=delay,
                    retry_count=retry_count,
                    error=last_error.debug_description,
                )
                await asyncio.sleep(delay)
                self._observe(last_error)
                # Authentication state is re-checked before every later attempt.
                self._check_authentication_state()

            machine.transition(RequestState.ATTEMPT)
            outcome = await self._attempt(descriptor, response_type, attempt)
            if isinstance(outcome, Success):
                return outcome.value

            last_error = outcome.error
            machine.transition(RequestState.RETRY_DECISION)

        # Retry budget exhausted
        raise last_error or self._error_type.unknown_error()

    async def _attempt(
        self,
        descriptor: EndpointDescriptor,
        response_type: type[T],
        attempt: int,
    ) -> "Success[T] | Failure":
        """Send one attempt.

        Returns:
            Success with the decoded value, or Failure for a retryable
            failure (transport error or non-2xx response).

        Raises:
            ApiError: Terminal failures (encoding, decoding a 2xx body).
        """
        request = self._build(descriptor)
        self._hooks.intercept_request(request)
        self._metrics.record_attempt()

        self._log.debug(
            "attempt_started",
            attempt=attempt,
            method=request.method,
            url=redact_url(request.url),
        )

        try:
            response = await self._client.send(request)
        except httpx.HTTPError as exc:
            if isinstance(exc, httpx.TransportError):
                error = self._error_type.connection_error()
            else:
                error = self._error_type.unknown_error(f"{type(exc).__name__}: {exc}")
            error.__cause__ = exc
            record = AttemptRecord(attempt, request, AttemptOutcome.TRANSPORT_ERROR)
            self._log_attempt(record, error, exc)
            return Failure(error)

        data = self._hooks.intercept_response_bytes(response.content)
        self._metrics.record_response(response.status_code, len(data))
        self._emit(descriptor, request, response, data, attempt)

        if classify(response.status_code) == ResponseClass.SUCCESS:
            return Success(
                decode(
                    data,
                    response_type,
                    descriptor.date_decoding_strategy,
                    descriptor.key_decoding_strategy,
                )
            )

        error = self._decode_error(descriptor, data)
        record = AttemptRecord(
            attempt, request, AttemptOutcome.HTTP_FAILURE, response.status_code
        )
        self._log_attempt(record, error)
        return Failure(error)

    def _decode_error(self, descriptor: EndpointDescriptor, data: bytes) -> E:
        """Decode a failed response's body into the error type.

        Falls back to an unknown error when the error type declares no
        payload model or the body does not decode into it.
        """
        payload_model = self._error_type.payload_model
        if payload_model is None:
            return self._error_type.unknown_error()
        try:
            payload = decode(
                data,
                payload_model,
                descriptor.date_decoding_strategy,
                descriptor.key_decoding_strategy,
            )
        except ApiError:
            return self._error_type.unknown_error()
        return self._error_type.from_payload(payload)

    def _build(self, descriptor: EndpointDescriptor) -> httpx.Request:
        """Build the wire request and apply transport defaults."""
        request = build_request(descriptor)
        request.headers.setdefault("User-Agent", self._config.user_agent)
        request.extensions["timeout"] = self._timeout.as_dict()
        return request

    def _emit(
        self,
        descriptor: EndpointDescriptor,
        request: httpx.Request,
        response: httpx.Response | None,
        data: bytes,
        attempt: int,
    ) -> None:
        """Queue an exchange record for the log hook."""
        if not (descriptor.should_log and self._config.log_exchanges):
            return
        self._log_channel.submit(
            ExchangeRecord(
                endpoint_name=descriptor.name,
                request=request,
                response=response,
                data=data,
                attempt=attempt,
            )
        )

    def _log_attempt(
        self,
        record: AttemptRecord,
        error: ApiError,
        cause: BaseException | None = None,
    ) -> None:
        self._log.warning(
            "attempt_failed",
            attempt=record.index,
            method=record.request.method,
            url=redact_url(record.request.url),
            outcome=record.outcome.value,
            status_code=record.status_code,
            error=error.debug_description,
            cause=str(cause) if cause is not None else None,
        )

    def _observe(self, error: ApiError) -> None:
        """Show an error to the interceptor; hook failures are only logged."""
        try:
            self._hooks.intercept_error(error)
        except Exception as exc:  # noqa: BLE001
            self._log.warning("intercept_error_raised", error=str(exc))

    def _fail(
        self,
        machine: RequestStateMachine,
        name: str,
        exc: ApiError,
        should_log: bool,
    ) -> E:
        """Finalize a failed request and return the error to raise."""
        error = self._error_type.from_error(exc)
        if not machine.is_terminal():
            machine.transition(RequestState.FAILURE)
        self._metrics.record_failure(error.kind)
        if should_log:
            self._log.warning(
                "request_failed",
                endpoint=name,
                attempt=machine.attempt,
                **error.to_dict(),
            )
        self._observe(error)
        return error
