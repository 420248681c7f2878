"""Data models for the request controller."""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

import httpx

from apiflux.errors import ApiError


T = TypeVar("T")


class Environment(str, Enum):
    """Where a controller sends its requests.

    - LIVE: Real network calls
    - TEST: No network; endpoints answer with their sample data
    - PREVIEW: Like TEST, with an artificial delay to emulate latency
    """

    LIVE = "live"
    TEST = "test"
    PREVIEW = "preview"


class AttemptOutcome(str, Enum):
    """How a single attempt ended.

    - SUCCESS: 2xx response received
    - HTTP_FAILURE: Non-2xx response received
    - TRANSPORT_ERROR: No response (timeout, refused connection, ...)
    """

    SUCCESS = "success"
    HTTP_FAILURE = "http_failure"
    TRANSPORT_ERROR = "transport_error"


@dataclass(frozen=True)
class AttemptRecord:
    """One try at sending a request.

    Attributes:
        index: 0-based attempt ordinal.
        request: Wire request that was sent.
        outcome: How the attempt ended.
        status_code: Response status, if a response arrived.
    """

    index: int
    request: httpx.Request
    outcome: AttemptOutcome
    status_code: int | None = None


@dataclass(frozen=True)
class ExchangeRecord:
    """Everything the log hook is given about one request/response exchange.

    Attributes:
        endpoint_name: Identity of the endpoint.
        request: Wire request.
        response: Response, or None on the mock path.
        data: Raw response bytes after interception.
        attempt: 0-based attempt index.
    """

    endpoint_name: str
    request: httpx.Request
    response: httpx.Response | None
    data: bytes
    attempt: int

    @property
    def is_mock(self) -> bool:
        """Check whether the exchange came from sample data."""
        return self.response is None


@dataclass(frozen=True)
class Success(Generic[T]):
    """Successful request result.

    Attributes:
        value: Decoded response.
    """

    value: T

    @property
    def is_success(self) -> bool:
        """Always True."""
        return True


@dataclass(frozen=True)
class Failure:
    """Failed request result.

    Attributes:
        error: Taxonomy error the request ended with.
    """

    error: ApiError

    @property
    def is_success(self) -> bool:
        """Always False."""
        return False


RequestResult = Success[T] | Failure
