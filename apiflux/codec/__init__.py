"""JSON codec with payload-wide key and date strategies.

Every endpoint fixes one key convention and one date convention for its
whole payload; the codec applies them when encoding request bodies and
decoding responses, and reports failures through the error taxonomy.
"""

from apiflux.codec.codec import JsonMapper, decode, encode, pretty_json
from apiflux.codec.strategies import (
    DateDecodingOption,
    DateEncodingOption,
    DateStrategy,
    KeyDecodingOption,
    KeyDecodingStrategy,
    KeyEncodingOption,
    KeyEncodingStrategy,
    to_camel_case,
    to_snake_case,
)


__all__ = [
    # Codec
    "decode",
    "encode",
    "pretty_json",
    "JsonMapper",
    # Strategies
    "DateStrategy",
    "KeyDecodingStrategy",
    "KeyEncodingStrategy",
    "DateDecodingOption",
    "DateEncodingOption",
    "KeyDecodingOption",
    "KeyEncodingOption",
    "to_camel_case",
    "to_snake_case",
]
