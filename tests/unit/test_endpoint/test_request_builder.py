"""Unit tests for wire request construction."""

import json
from datetime import date
from enum import Enum

import pytest
from pydantic import BaseModel

from apiflux.codec import KeyEncodingStrategy
from apiflux.endpoint import (
    BodyAndQueryTask,
    BodyTask,
    EndpointDescriptor,
    HttpMethod,
    QueryTask,
    build_query,
    build_request,
    build_url,
    stringify_query_value,
)
from apiflux.errors import ApiError, ErrorKind


class NewUser(BaseModel):
    """Request body model."""

    user_name: str
    is_admin: bool = False


class Color(Enum):
    """Enum query value."""

    RED = "red"


class TestBuildUrl:
    """Tests for joining base URLs and paths."""

    @pytest.mark.parametrize(
        ("base_url", "path", "expected"),
        [
            ("https://api.example.com", "", "https://api.example.com"),
            ("https://api.example.com/", "", "https://api.example.com/"),
            ("https://api.example.com", "users", "https://api.example.com/users"),
            ("https://api.example.com/", "users", "https://api.example.com/users"),
            ("https://api.example.com", "/users", "https://api.example.com/users"),
            ("https://api.example.com/", "/users", "https://api.example.com/users"),
            (
                "https://api.example.com/v1",
                "users/1/posts",
                "https://api.example.com/v1/users/1/posts",
            ),
        ],
    )
    def test_join(self, base_url: str, path: str, expected: str) -> None:
        """Test that exactly one slash separates base and path."""
        assert build_url(base_url, path) == expected


class TestQueryValues:
    """Tests for canonical query value rendering."""

    def test_scalars(self) -> None:
        """Test booleans, numbers, None, enums, and dates."""
        assert stringify_query_value(True) == "true"
        assert stringify_query_value(False) == "false"
        assert stringify_query_value(3) == "3"
        assert stringify_query_value(2.5) == "2.5"
        assert stringify_query_value(1e20) == "100000000000000000000"
        assert stringify_query_value(1e-7) == "0.0000001"
        assert stringify_query_value(None) == ""
        assert stringify_query_value(Color.RED) == "red"
        assert stringify_query_value(date(2024, 2, 29)) == "2024-02-29"

    def test_sequences_repeat(self) -> None:
        """Test that sequences render as a list for repeated parameters."""
        assert stringify_query_value([1, True, "x"]) == ["1", "true", "x"]

    def test_build_query_keeps_order(self) -> None:
        """Test that parameter order is preserved."""
        assert list(build_query({"b": 1, "a": 2})) == ["b", "a"]


class TestBuildRequest:
    """Tests for build_request()."""

    def test_empty_task(self) -> None:
        """Test a bare GET with headers."""
        endpoint = EndpointDescriptor(
            base_url="https://api.example.com",
            path="/health",
            headers={"Accept": "application/json"},
        )

        request = build_request(endpoint)

        assert request.method == "GET"
        assert str(request.url) == "https://api.example.com/health"
        assert request.headers["Accept"] == "application/json"
        assert request.content == b""

    def test_query_task(self) -> None:
        """Test that query parameters are canonical and repeatable."""
        endpoint = EndpointDescriptor(
            base_url="https://api.example.com",
            path="search",
            task=QueryTask({"q": "rust", "exact": False, "tag": ["a", "b"]}),
        )

        request = build_request(endpoint)

        assert request.url.params["q"] == "rust"
        assert request.url.params["exact"] == "false"
        assert request.url.params.get_list("tag") == ["a", "b"]

    def test_body_task(self) -> None:
        """Test that bodies use the endpoint's key strategy and JSON type."""
        endpoint = EndpointDescriptor(
            base_url="https://api.example.com",
            path="users",
            method=HttpMethod.POST,
            task=BodyTask(NewUser(user_name="ada")),
            key_encoding_strategy=KeyEncodingStrategy.CONVERT_TO_CAMEL_CASE,
        )

        request = build_request(endpoint)

        assert request.method == "POST"
        assert json.loads(request.content) == {"userName": "ada", "isAdmin": False}
        assert request.headers["Content-Type"] == "application/json"

    def test_explicit_content_type_kept(self) -> None:
        """Test that an endpoint's own Content-Type is not replaced."""
        endpoint = EndpointDescriptor(
            base_url="https://api.example.com",
            method=HttpMethod.PUT,
            headers={"Content-Type": "application/vnd.api+json"},
            task=BodyTask({"a": 1}),
        )

        request = build_request(endpoint)

        assert request.headers["Content-Type"] == "application/vnd.api+json"

    def test_body_and_query_task(self) -> None:
        """Test that body and query are both applied."""
        endpoint = EndpointDescriptor(
            base_url="https://api.example.com/v2/",
            path="/items",
            method=HttpMethod.PATCH,
            task=BodyAndQueryTask({"count": 2}, {"dry_run": True}),
        )

        request = build_request(endpoint)

        assert request.url.path == "/v2/items"
        assert request.url.params["dry_run"] == "true"
        assert json.loads(request.content) == {"count": 2}

    def test_encoding_error_wins(self) -> None:
        """Test that an unencodable body fails as an encoding error."""
        endpoint = EndpointDescriptor(
            base_url="https://api.example.com",
            method=HttpMethod.POST,
            task=BodyAndQueryTask({"bad": object()}, {"page": 1}),
        )

        with pytest.raises(ApiError) as exc_info:
            build_request(endpoint)

        assert exc_info.value.kind == ErrorKind.ENCODING
