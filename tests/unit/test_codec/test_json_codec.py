"""Unit tests for JSON encoding and decoding."""

import json
from dataclasses import dataclass
from datetime import UTC, datetime

import pytest
from pydantic import BaseModel

from apiflux.codec import (
    DateStrategy,
    KeyDecodingStrategy,
    KeyEncodingStrategy,
    decode,
    encode,
    pretty_json,
)
from apiflux.errors import ApiError, ErrorKind


LAUNCH = datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC)


class Event(BaseModel):
    """Model with a datetime field."""

    event_id: int
    started_at: datetime
    tags: list[str] = []


@dataclass
class Checkpoint:
    """Dataclass with nested datetimes."""

    label: str
    times: list[datetime]


class Envelope(BaseModel):
    """Target that unwraps a ``{"data": ...}`` envelope."""

    value: int

    @classmethod
    def map_payload(cls, data: bytes) -> bytes:
        return data.replace(b'{"data": ', b"", 1)[:-1]


class TestEncode:
    """Tests for encode()."""

    def test_default_keys_and_dates(self) -> None:
        """Test that defaults keep keys and write ISO dates."""
        data = encode(Event(event_id=1, started_at=LAUNCH))

        assert data == b'{"event_id":1,"started_at":"2024-01-02T03:04:05Z","tags":[]}'

    def test_camel_case_keys(self) -> None:
        """Test that every key in the payload is converted."""
        data = encode(
            {"outer_key": {"inner_key": 1}, "list_items": [{"item_id": 2}]},
            key_strategy=KeyEncodingStrategy.CONVERT_TO_CAMEL_CASE,
        )

        assert data == b'{"outerKey":{"innerKey":1},"listItems":[{"itemId":2}]}'

    def test_snake_case_keys(self) -> None:
        """Test conversion to snake_case."""
        data = encode(
            {"userName": "ada", "HTTPStatus": 200},
            key_strategy=KeyEncodingStrategy.CONVERT_TO_SNAKE_CASE,
        )

        assert data == b'{"user_name":"ada","http_status":200}'

    def test_seconds_since_1970(self) -> None:
        """Test epoch-seconds date encoding."""
        data = encode(
            {"at": LAUNCH}, date_strategy=DateStrategy.SECONDS_SINCE_1970
        )

        assert json.loads(data) == {"at": 1704164645.0}

    def test_milliseconds_since_1970(self) -> None:
        """Test epoch-milliseconds date encoding."""
        data = encode(
            {"at": LAUNCH}, date_strategy=DateStrategy.MILLISECONDS_SINCE_1970
        )

        assert json.loads(data) == {"at": 1704164645000.0}

    def test_custom_key_transform(self) -> None:
        """Test that a callable works as a key strategy."""
        data = encode({"a": 1}, key_strategy=str.upper)

        assert data == b'{"A":1}'

    def test_unencodable_value(self) -> None:
        """Test that serialization failures become encoding errors."""
        with pytest.raises(ApiError) as exc_info:
            encode({"value": object()})

        assert exc_info.value.kind == ErrorKind.ENCODING
        assert "dict" in (exc_info.value.detail or "")


class TestDecode:
    """Tests for decode()."""

    def test_model(self) -> None:
        """Test decoding a model with default strategies."""
        event = decode(
            b'{"event_id": 5, "started_at": "2024-01-02T03:04:05Z"}', Event
        )

        assert event == Event(event_id=5, started_at=LAUNCH)

    def test_camel_case_payload(self) -> None:
        """Test reading camelCase keys into snake_case fields."""
        event = decode(
            b'{"eventId": 5, "startedAt": "2024-01-02T03:04:05Z"}',
            Event,
            key_strategy=KeyDecodingStrategy.CONVERT_FROM_CAMEL_CASE,
        )

        assert event.event_id == 5

    def test_epoch_dates_in_dataclass(self) -> None:
        """Test that nested datetimes are found through annotations."""
        checkpoint = decode(
            b'{"label": "x", "times": [1704164645000, 0]}',
            Checkpoint,
            date_strategy=DateStrategy.MILLISECONDS_SINCE_1970,
        )

        assert checkpoint.times == [LAUNCH, datetime(1970, 1, 1, tzinfo=UTC)]

    def test_iso_strategy_rejects_numbers(self) -> None:
        """Test that a number under the ISO strategy is a decoding error."""
        with pytest.raises(ApiError) as exc_info:
            decode(
                b'{"event_id": 1, "started_at": 1704164645}',
                Event,
                date_strategy=DateStrategy.ISO8601,
            )

        assert exc_info.value.kind == ErrorKind.DECODING
        assert "Event" in (exc_info.value.detail or "")

    def test_builtin_targets(self) -> None:
        """Test decoding into builtin and generic types."""
        assert decode(b"[1, 2, 3]", list[int]) == [1, 2, 3]
        assert decode(b'{"a": true}', dict[str, bool]) == {"a": True}

    def test_invalid_json(self) -> None:
        """Test that malformed JSON is a decoding error."""
        with pytest.raises(ApiError) as exc_info:
            decode(b"{not json", Event)

        assert exc_info.value.kind == ErrorKind.DECODING

    def test_empty_bytes(self) -> None:
        """Test that empty input is a decoding error."""
        with pytest.raises(ApiError) as exc_info:
            decode(b"", Event)

        assert exc_info.value.kind == ErrorKind.DECODING

    def test_json_mapper(self) -> None:
        """Test that map_payload rewrites bytes before decoding."""
        assert decode(b'{"data": {"value": 3}}', Envelope) == Envelope(value=3)


class TestStrategyRoundTrip:
    """Tests that symmetric strategies reproduce the original value."""

    @pytest.mark.parametrize(
        ("key_encoding", "key_decoding", "date_strategy"),
        [
            (
                KeyEncodingStrategy.USE_DEFAULT_KEYS,
                KeyDecodingStrategy.USE_DEFAULT_KEYS,
                DateStrategy.DEFERRED,
            ),
            (
                KeyEncodingStrategy.CONVERT_TO_CAMEL_CASE,
                KeyDecodingStrategy.CONVERT_FROM_CAMEL_CASE,
                DateStrategy.ISO8601,
            ),
            (
                KeyEncodingStrategy.CONVERT_TO_CAMEL_CASE,
                KeyDecodingStrategy.CONVERT_FROM_CAMEL_CASE,
                DateStrategy.MILLISECONDS_SINCE_1970,
            ),
        ],
    )
    def test_round_trip(
        self,
        key_encoding: KeyEncodingStrategy,
        key_decoding: KeyDecodingStrategy,
        date_strategy: DateStrategy,
    ) -> None:
        """Test encode then decode under matching strategies."""
        event = Event(event_id=9, started_at=LAUNCH, tags=["a", "b"])

        data = encode(event, date_strategy, key_encoding)
        restored = decode(data, Event, date_strategy, key_decoding)

        assert restored == event


class TestPrettyJson:
    """Tests for pretty_json()."""

    def test_indents_json(self) -> None:
        """Test that JSON is indented with sorted keys."""
        assert pretty_json(b'{"b": 1, "a": 2}') == '{\n  "a": 2,\n  "b": 1\n}'

    def test_non_json(self) -> None:
        """Test that non-JSON and empty input render as None."""
        assert pretty_json(b"<html>") is None
        assert pretty_json(b"") is None
        assert pretty_json(None) is None
