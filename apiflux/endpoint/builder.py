"""Pure translation of an endpoint into an httpx request."""

import math
from collections.abc import Mapping
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

import httpx

from apiflux.codec import encode
from apiflux.endpoint.constants import CONTENT_TYPE_HEADER, JSON_CONTENT_TYPE
from apiflux.endpoint.models import (
    BodyAndQueryTask,
    BodyTask,
    Endpoint,
    EndpointDescriptor,
    QueryTask,
    describe,
)
from apiflux.errors import ApiError


QueryValue = str | list[str]


def build_url(base_url: str, path: str) -> str:
    """Join a base URL and a relative path.

    The path is appended only when non-empty, with exactly one ``/``
    between the two parts.

    Args:
        base_url: Absolute base URL.
        path: Relative path, possibly empty or starting with ``/``.

    Returns:
        Joined URL.
    """
    if not path:
        return base_url
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"


def stringify_query_value(value: Any) -> QueryValue:
    """Render a query parameter value in its canonical form.

    Booleans become ``true``/``false``, numbers their decimal form,
    ``None`` an empty string, and sequences a list of rendered items
    (sent as repeated parameters).

    Args:
        value: Parameter value.

    Returns:
        String, or list of strings for sequences.
    """
    if isinstance(value, list | tuple | set | frozenset):
        return [_stringify_scalar(item) for item in value]
    return _stringify_scalar(value)


def _stringify_scalar(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return _stringify_scalar(value.value)
    if isinstance(value, datetime | date):
        return value.isoformat()
    if isinstance(value, float) and math.isfinite(value):
        # Fixed-point, never exponent notation.
        return format(Decimal(repr(value)), "f")
    return str(value)


def build_query(params: Mapping[str, Any]) -> dict[str, QueryValue]:
    """Render every query parameter in canonical form.

    Args:
        params: Parameter names to raw values.

    Returns:
        Parameter names to rendered values, in input order.
    """
    return {str(key): stringify_query_value(value) for key, value in params.items()}


def build_request(endpoint: Endpoint | EndpointDescriptor) -> httpx.Request:
    """Build the wire request for an endpoint.

    Args:
        endpoint: Endpoint to translate.

    Returns:
        Unsent httpx request.

    Raises:
        ApiError: ENCODING kind if the endpoint is invalid or its body
            cannot be encoded.
    """
    descriptor = describe(endpoint)
    task = descriptor.task

    headers = httpx.Headers()
    for key, value in (descriptor.headers or {}).items():
        headers[key] = value

    # Body first: an encoding failure wins over query construction.
    content: bytes | None = None
    if isinstance(task, BodyTask | BodyAndQueryTask):
        content = encode(
            task.body,
            descriptor.date_encoding_strategy,
            descriptor.key_encoding_strategy,
        )
        if CONTENT_TYPE_HEADER not in headers:
            headers[CONTENT_TYPE_HEADER] = JSON_CONTENT_TYPE

    try:
        url = httpx.URL(build_url(descriptor.base_url, descriptor.path))
        if isinstance(task, QueryTask | BodyAndQueryTask):
            url = url.copy_merge_params(build_query(task.params))
    except httpx.InvalidURL as exc:
        msg = f"Invalid URL for {descriptor.name}: {exc}"
        raise ApiError.encoding_error(msg) from exc

    return httpx.Request(
        descriptor.method.value,
        url,
        headers=headers,
        content=content,
    )
