"""JSON encoding and decoding under per-endpoint key and date strategies."""

import dataclasses
import json
import types
from collections.abc import Mapping, MutableSequence, Sequence
from collections.abc import Set as AbstractSet
from datetime import datetime
from typing import (
    Annotated,
    Any,
    Protocol,
    TypeVar,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)

import pydantic_core
from pydantic import BaseModel, PydanticUserError, TypeAdapter

from apiflux.codec.strategies import (
    DateDecoder,
    DateDecodingOption,
    DateEncoder,
    DateEncodingOption,
    DateStrategy,
    KeyDecodingOption,
    KeyDecodingStrategy,
    KeyEncodingOption,
    KeyEncodingStrategy,
    KeyTransform,
    resolve_date_decoder,
    resolve_date_encoder,
    resolve_key_decoder,
    resolve_key_encoder,
)
from apiflux.errors import ApiError


T = TypeVar("T")

_SEQUENCE_ORIGINS = frozenset(
    {list, set, frozenset, Sequence, MutableSequence, AbstractSet}
)
_MAPPING_ORIGINS = frozenset({dict, Mapping})


class JsonMapper(Protocol):
    """Target type that rewrites raw response bytes before decoding.

    Useful when a payload wraps the interesting object in an envelope or
    needs normalizing before it matches the model.
    """

    @classmethod
    def map_payload(cls, data: bytes) -> bytes:
        """Return the bytes to decode in place of ``data``."""
        ...


def encode(
    value: Any,
    date_strategy: DateEncodingOption = DateStrategy.DEFERRED,
    key_strategy: KeyEncodingOption = KeyEncodingStrategy.USE_DEFAULT_KEYS,
) -> bytes:
    """Serialize a value to JSON bytes.

    Accepts pydantic models, dataclasses, mappings, and JSON-native values.
    Datetimes are rendered with ``date_strategy``; every object key in the
    payload is rewritten with ``key_strategy``.

    Args:
        value: Value to serialize.
        date_strategy: Date representation for the whole payload.
        key_strategy: Key convention for the whole payload.

    Returns:
        UTF-8 JSON bytes.

    Raises:
        ApiError: ENCODING kind when the value cannot be serialized.
    """
    key_transform = resolve_key_encoder(key_strategy)
    date_encoder = resolve_date_encoder(date_strategy)

    try:
        plain = TypeAdapter(type(value)).dump_python(
            value, mode="python", by_alias=True
        )
        if date_encoder is not None:
            plain = _encode_dates(plain, date_encoder)
        if key_transform is not None:
            plain = _rewrite_keys(plain, key_transform)
        return pydantic_core.to_json(plain)
    except (
        PydanticUserError,
        pydantic_core.PydanticSerializationError,
        TypeError,
        ValueError,
        OverflowError,
    ) as exc:
        msg = f"Unable to encode {type(value).__name__}: {exc}"
        raise ApiError.encoding_error(msg) from exc


def decode(
    data: bytes,
    target: type[T],
    date_strategy: DateDecodingOption = DateStrategy.DEFERRED,
    key_strategy: KeyDecodingOption = KeyDecodingStrategy.USE_DEFAULT_KEYS,
) -> T:
    """Decode JSON bytes into an instance of ``target``.

    Keys are rewritten with ``key_strategy`` before validation. Datetime
    fields, located through the target's annotations, are parsed with
    ``date_strategy``. Targets implementing ``JsonMapper`` get to rewrite the
    bytes first.

    Args:
        data: Raw JSON bytes.
        target: Type to validate into (model, dataclass, builtin, generic).
        date_strategy: Date representation for the whole payload.
        key_strategy: Key convention for the whole payload.

    Returns:
        Validated instance.

    Raises:
        ApiError: DECODING kind with a diagnostic string on any failure.
    """
    key_transform = resolve_key_decoder(key_strategy)
    date_decoder = resolve_date_decoder(date_strategy)

    try:
        mapper = getattr(target, "map_payload", None)
        if callable(mapper):
            data = mapper(data)

        parsed = pydantic_core.from_json(data)
        if key_transform is not None:
            parsed = _rewrite_keys(parsed, key_transform)
        if date_decoder is not None:
            parsed = _decode_dates(target, parsed, date_decoder)

        return TypeAdapter(target).validate_python(parsed)
    except (PydanticUserError, KeyError, TypeError, ValueError, OverflowError) as exc:
        msg = f"Unable to decode {_type_name(target)}: {exc}"
        raise ApiError.decoding_error(msg) from exc


def pretty_json(data: bytes | None) -> str | None:
    """Render JSON bytes indented for logs.

    Args:
        data: Raw bytes, possibly not JSON.

    Returns:
        Indented JSON text, or None if the bytes are empty or not JSON.
    """
    if not data:
        return None
    try:
        obj = json.loads(data)
    except (ValueError, UnicodeDecodeError):
        return None
    return json.dumps(obj, indent=2, ensure_ascii=False, sort_keys=True)


def _type_name(target: Any) -> str:
    return getattr(target, "__name__", None) or repr(target)


def _rewrite_keys(value: Any, transform: KeyTransform) -> Any:
    if isinstance(value, dict):
        return {
            (transform(key) if isinstance(key, str) else key): _rewrite_keys(
                item, transform
            )
            for key, item in value.items()
        }
    if isinstance(value, list | tuple):
        return [_rewrite_keys(item, transform) for item in value]
    return value


def _encode_dates(value: Any, encoder: DateEncoder) -> Any:
    if isinstance(value, datetime):
        return encoder(value)
    if isinstance(value, dict):
        return {key: _encode_dates(item, encoder) for key, item in value.items()}
    if isinstance(value, list | tuple | set | frozenset):
        return [_encode_dates(item, encoder) for item in value]
    return value


def _decode_dates(annotation: Any, value: Any, decoder: DateDecoder) -> Any:
    """Parse datetime values the annotation says are datetimes."""
    if value is None:
        return None

    origin = get_origin(annotation)

    if origin is Annotated:
        return _decode_dates(get_args(annotation)[0], value, decoder)

    if annotation is datetime:
        return value if isinstance(value, datetime) else decoder(value)

    if origin is Union or origin is types.UnionType:
        candidates = [arg for arg in get_args(annotation) if arg is not type(None)]
        if len(candidates) == 1:
            return _decode_dates(candidates[0], value, decoder)
        # Ambiguous unions are left to pydantic.
        return value

    if isinstance(annotation, type) and issubclass(annotation, BaseModel):
        if not isinstance(value, dict):
            return value
        converted = dict(value)
        for name, field in annotation.model_fields.items():
            key = field.alias if field.alias in converted else name
            if key in converted:
                converted[key] = _decode_dates(field.annotation, converted[key], decoder)
        return converted

    if dataclasses.is_dataclass(annotation) and isinstance(annotation, type):
        if not isinstance(value, dict):
            return value
        hints = get_type_hints(annotation)
        converted = dict(value)
        for field in dataclasses.fields(annotation):
            if field.name in converted:
                converted[field.name] = _decode_dates(
                    hints.get(field.name, Any), converted[field.name], decoder
                )
        return converted

    args = get_args(annotation)

    if origin in _SEQUENCE_ORIGINS and isinstance(value, list):
        item_type = args[0] if args else Any
        return [_decode_dates(item_type, item, decoder) for item in value]

    if origin is tuple and isinstance(value, list):
        if len(args) == 2 and args[1] is Ellipsis:
            return [_decode_dates(args[0], item, decoder) for item in value]
        return [
            _decode_dates(item_type, item, decoder)
            for item_type, item in zip(args, value, strict=False)
        ] + value[len(args) :]

    if origin in _MAPPING_ORIGINS and isinstance(value, dict) and len(args) == 2:
        return {key: _decode_dates(args[1], item, decoder) for key, item in value.items()}

    return value
