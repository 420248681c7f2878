"""Key and date strategies applied to a whole JSON payload."""

import re
from collections.abc import Callable
from datetime import UTC, datetime
from enum import Enum
from typing import Any


class KeyEncodingStrategy(str, Enum):
    """How model field names are written as JSON object keys.

    - USE_DEFAULT_KEYS: Keys are written unchanged
    - CONVERT_TO_SNAKE_CASE: ``userName`` becomes ``user_name``
    - CONVERT_TO_CAMEL_CASE: ``user_name`` becomes ``userName``
    """

    USE_DEFAULT_KEYS = "use_default_keys"
    CONVERT_TO_SNAKE_CASE = "convert_to_snake_case"
    CONVERT_TO_CAMEL_CASE = "convert_to_camel_case"


class KeyDecodingStrategy(str, Enum):
    """How JSON object keys are matched to model field names.

    - USE_DEFAULT_KEYS: Keys are read unchanged
    - CONVERT_FROM_SNAKE_CASE: ``user_name`` is read as ``userName``
    - CONVERT_FROM_CAMEL_CASE: ``userName`` is read as ``user_name``
    """

    USE_DEFAULT_KEYS = "use_default_keys"
    CONVERT_FROM_SNAKE_CASE = "convert_from_snake_case"
    CONVERT_FROM_CAMEL_CASE = "convert_from_camel_case"


class DateStrategy(str, Enum):
    """How datetimes are represented in JSON.

    - DEFERRED: Left to pydantic (ISO 8601 out, ISO or epoch in)
    - ISO8601: ISO 8601 strings
    - SECONDS_SINCE_1970: Unix timestamp in seconds
    - MILLISECONDS_SINCE_1970: Unix timestamp in milliseconds
    """

    DEFERRED = "deferred"
    ISO8601 = "iso8601"
    SECONDS_SINCE_1970 = "seconds_since_1970"
    MILLISECONDS_SINCE_1970 = "milliseconds_since_1970"


KeyTransform = Callable[[str], str]
DateEncoder = Callable[[datetime], Any]
DateDecoder = Callable[[Any], datetime]

KeyEncodingOption = KeyEncodingStrategy | KeyTransform
KeyDecodingOption = KeyDecodingStrategy | KeyTransform
DateEncodingOption = DateStrategy | DateEncoder
DateDecodingOption = DateStrategy | DateDecoder

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def to_snake_case(key: str) -> str:
    """Convert ``camelCase`` to ``snake_case``.

    Leading and trailing underscores are preserved.

    Args:
        key: Key to convert.

    Returns:
        Converted key.
    """
    stripped = key.strip("_")
    if not stripped:
        return key
    prefix = key[: len(key) - len(key.lstrip("_"))]
    suffix = key[len(key.rstrip("_")) :]
    return prefix + _CAMEL_BOUNDARY.sub("_", stripped).lower() + suffix


def to_camel_case(key: str) -> str:
    """Convert ``snake_case`` to ``camelCase``.

    Args:
        key: Key to convert.

    Returns:
        Converted key.
    """
    stripped = key.strip("_")
    if "_" not in stripped:
        return key
    prefix = key[: len(key) - len(key.lstrip("_"))]
    suffix = key[len(key.rstrip("_")) :]
    head, *rest = [part for part in stripped.split("_") if part]
    camel = head.lower() + "".join(part[:1].upper() + part[1:] for part in rest)
    return prefix + camel + suffix


def resolve_key_encoder(strategy: KeyEncodingOption) -> KeyTransform | None:
    """Resolve an encoding strategy to a key transform.

    Returns:
        Transform function, or None when keys stay unchanged.
    """
    if strategy == KeyEncodingStrategy.USE_DEFAULT_KEYS:
        return None
    if strategy == KeyEncodingStrategy.CONVERT_TO_SNAKE_CASE:
        return to_snake_case
    if strategy == KeyEncodingStrategy.CONVERT_TO_CAMEL_CASE:
        return to_camel_case
    return strategy


def resolve_key_decoder(strategy: KeyDecodingOption) -> KeyTransform | None:
    """Resolve a decoding strategy to a key transform.

    Returns:
        Transform function, or None when keys stay unchanged.
    """
    if strategy == KeyDecodingStrategy.USE_DEFAULT_KEYS:
        return None
    if strategy == KeyDecodingStrategy.CONVERT_FROM_SNAKE_CASE:
        return to_camel_case
    if strategy == KeyDecodingStrategy.CONVERT_FROM_CAMEL_CASE:
        return to_snake_case
    return strategy


def _as_aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def resolve_date_encoder(strategy: DateEncodingOption) -> DateEncoder | None:
    """Resolve a date strategy to a datetime → JSON value function.

    Returns:
        Encoder function, or None when pydantic handles datetimes.
    """
    if strategy == DateStrategy.DEFERRED:
        return None
    if strategy == DateStrategy.ISO8601:
        return lambda value: _as_aware(value).isoformat().replace("+00:00", "Z")
    if strategy == DateStrategy.SECONDS_SINCE_1970:
        return lambda value: _as_aware(value).timestamp()
    if strategy == DateStrategy.MILLISECONDS_SINCE_1970:
        return lambda value: _as_aware(value).timestamp() * 1000
    return strategy


def _parse_iso8601(value: Any) -> datetime:
    if not isinstance(value, str):
        msg = f"Expected ISO 8601 string, got {type(value).__name__}"
        raise TypeError(msg)
    return _as_aware(datetime.fromisoformat(value))


def _parse_epoch(value: Any, scale: float) -> datetime:
    if isinstance(value, bool) or not isinstance(value, int | float):
        msg = f"Expected number, got {type(value).__name__}"
        raise TypeError(msg)
    return datetime.fromtimestamp(value / scale, tz=UTC)


def resolve_date_decoder(strategy: DateDecodingOption) -> DateDecoder | None:
    """Resolve a date strategy to a JSON value → datetime function.

    Returns:
        Decoder function, or None when pydantic handles datetimes.
    """
    if strategy == DateStrategy.DEFERRED:
        return None
    if strategy == DateStrategy.ISO8601:
        return _parse_iso8601
    if strategy == DateStrategy.SECONDS_SINCE_1970:
        return lambda value: _parse_epoch(value, 1)
    if strategy == DateStrategy.MILLISECONDS_SINCE_1970:
        return lambda value: _parse_epoch(value, 1000)
    return strategy

