"""Declarative description of one API call."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Annotated, Any, Protocol, runtime_checkable

import httpx
from pydantic import BaseModel, ConfigDict, Field, InstanceOf, ValidationError
from pydantic import field_validator

from apiflux.codec import (
    DateDecodingOption,
    DateEncodingOption,
    DateStrategy,
    KeyDecodingOption,
    KeyDecodingStrategy,
    KeyEncodingOption,
    KeyEncodingStrategy,
)
from apiflux.errors import ApiError


class HttpMethod(str, Enum):
    """HTTP request method, valued as its protocol token."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"
    CONNECT = "CONNECT"
    TRACE = "TRACE"


@dataclass(frozen=True)
class EmptyTask:
    """No body and no query parameters."""


@dataclass(frozen=True)
class QueryTask:
    """Query parameters appended to the URL.

    Attributes:
        params: Parameter names to values (strings, numbers, booleans,
            or sequences of those for repeated parameters).
    """

    params: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class BodyTask:
    """JSON body encoded with the endpoint's encoding strategies.

    Attributes:
        body: Model, dataclass, mapping, or JSON-native value.
    """

    body: Any


@dataclass(frozen=True)
class BodyAndQueryTask:
    """JSON body plus query parameters.

    Attributes:
        body: Model, dataclass, mapping, or JSON-native value.
        params: Query parameter names to values.
    """

    body: Any
    params: Mapping[str, Any] = field(default_factory=dict)


HttpTask = EmptyTask | QueryTask | BodyTask | BodyAndQueryTask

_TaskField = (
    InstanceOf[EmptyTask]
    | InstanceOf[QueryTask]
    | InstanceOf[BodyTask]
    | InstanceOf[BodyAndQueryTask]
)


@runtime_checkable
class Endpoint(Protocol):
    """Capability every endpoint supplies.

    Only the four members below are required. Anything else the controller
    reads (headers, codec strategies, retry budget, sample data, logging
    flag, name) is optional and filled in by ``describe``.
    """

    @property
    def base_url(self) -> str | httpx.URL: ...

    @property
    def path(self) -> str: ...

    @property
    def method(self) -> HttpMethod: ...

    @property
    def task(self) -> HttpTask: ...


class EndpointDescriptor(BaseModel):
    """Immutable, fully-defaulted description of one API call.

    Satisfies ``Endpoint`` itself, so simple calls can be described inline
    without declaring an endpoint class.
    """

    model_config = ConfigDict(
        frozen=True, extra="forbid", arbitrary_types_allowed=True
    )

    name: str = "endpoint"
    base_url: Annotated[str, Field(min_length=1)]
    path: str = ""
    method: HttpMethod = HttpMethod.GET
    task: _TaskField = Field(default_factory=EmptyTask)
    headers: dict[str, str] | None = None
    key_encoding_strategy: KeyEncodingOption = KeyEncodingStrategy.USE_DEFAULT_KEYS
    date_encoding_strategy: DateEncodingOption = DateStrategy.DEFERRED
    key_decoding_strategy: KeyDecodingOption = KeyDecodingStrategy.USE_DEFAULT_KEYS
    date_decoding_strategy: DateDecodingOption = DateStrategy.DEFERRED
    retry_count: Annotated[int, Field(ge=0, le=100)] = 0
    sample_data: bytes | None = None
    uses_sample_data: bool = False
    should_log: bool = True

    @field_validator("base_url", mode="before")
    @classmethod
    def validate_base_url(cls, v: Any) -> str:
        """Require an absolute http(s) URL."""
        try:
            url = httpx.URL(str(v))
        except httpx.InvalidURL as exc:
            msg = f"Invalid base_url {v!r}: {exc}"
            raise ValueError(msg) from exc
        if url.scheme not in ("http", "https") or not url.host:
            msg = f"base_url must be an absolute http(s) URL, got {v!r}"
            raise ValueError(msg)
        return str(v)

    @field_validator("path")
    @classmethod
    def validate_path(cls, v: str) -> str:
        """Reject paths that would replace the base URL."""
        if "://" in v or v.startswith("//"):
            msg = f"path must be relative to base_url, got {v!r}"
            raise ValueError(msg)
        return v


# Optional members copied from an endpoint when it defines them.
_OPTIONAL_MEMBERS = (
    "headers",
    "key_encoding_strategy",
    "date_encoding_strategy",
    "key_decoding_strategy",
    "date_decoding_strategy",
    "retry_count",
    "sample_data",
    "uses_sample_data",
    "should_log",
)


def endpoint_name(endpoint: Any) -> str:
    """Get the identity an endpoint is logged under.

    Enum members log as ``Type.MEMBER``; anything else uses its ``name``
    attribute when it is a string, falling back to the class name.

    Args:
        endpoint: Endpoint instance.

    Returns:
        Display name.
    """
    if isinstance(endpoint, Enum):
        return f"{type(endpoint).__name__}.{endpoint.name}"
    name = getattr(endpoint, "name", None)
    if isinstance(name, str) and name:
        return name
    return type(endpoint).__name__


def describe(endpoint: Endpoint) -> EndpointDescriptor:
    """Resolve an endpoint into a descriptor with every default applied.

    Args:
        endpoint: Any object exposing the Endpoint members.

    Returns:
        EndpointDescriptor for the endpoint.

    Raises:
        ApiError: ENCODING kind if the endpoint's values are invalid.
    """
    if isinstance(endpoint, EndpointDescriptor):
        return endpoint

    values: dict[str, Any] = {"name": endpoint_name(endpoint)}
    try:
        values["base_url"] = endpoint.base_url
        values["path"] = endpoint.path
        values["method"] = endpoint.method
        values["task"] = endpoint.task
    except AttributeError as exc:
        msg = f"Endpoint {values['name']} is missing a required member: {exc}"
        raise ApiError.encoding_error(msg) from exc

    for member in _OPTIONAL_MEMBERS:
        value = getattr(endpoint, member, None)
        if value is not None:
            values[member] = value

    try:
        return EndpointDescriptor.model_validate(values)
    except ValidationError as exc:
        msg = f"Invalid endpoint {values['name']}: {exc}"
        raise ApiError.encoding_error(msg) from exc
