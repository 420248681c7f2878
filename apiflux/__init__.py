"""apiflux: typed, interceptable HTTP requests over httpx."""

from apiflux.codec import DateStrategy, KeyDecodingStrategy, KeyEncodingStrategy
from apiflux.controller import (
    AuthenticationState,
    ControllerConfig,
    Environment,
    Failure,
    Interceptor,
    RequestController,
    RequestResult,
    Success,
)
from apiflux.endpoint import (
    BodyAndQueryTask,
    BodyTask,
    EmptyTask,
    Endpoint,
    EndpointDescriptor,
    HttpMethod,
    QueryTask,
)
from apiflux.errors import ApiError, ErrorKind


__version__ = "0.1.0"

__all__ = [
    "ApiError",
    "AuthenticationState",
    "BodyAndQueryTask",
    "BodyTask",
    "ControllerConfig",
    "DateStrategy",
    "EmptyTask",
    "Endpoint",
    "EndpointDescriptor",
    "Environment",
    "ErrorKind",
    "Failure",
    "HttpMethod",
    "Interceptor",
    "KeyDecodingStrategy",
    "KeyEncodingStrategy",
    "QueryTask",
    "RequestController",
    "RequestResult",
    "Success",
    "__version__",
]
