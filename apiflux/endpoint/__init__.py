"""Endpoint descriptions and their translation into wire requests."""

from apiflux.endpoint.builder import (
    build_query,
    build_request,
    build_url,
    stringify_query_value,
)
from apiflux.endpoint.models import (
    BodyAndQueryTask,
    BodyTask,
    EmptyTask,
    Endpoint,
    EndpointDescriptor,
    HttpMethod,
    HttpTask,
    QueryTask,
    describe,
    endpoint_name,
)


__all__ = [
    # Models
    "Endpoint",
    "EndpointDescriptor",
    "HttpMethod",
    "HttpTask",
    "EmptyTask",
    "QueryTask",
    "BodyTask",
    "BodyAndQueryTask",
    "describe",
    "endpoint_name",
    # Builder
    "build_request",
    "build_url",
    "build_query",
    "stringify_query_value",
]
