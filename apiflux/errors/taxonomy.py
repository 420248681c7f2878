"""Closed error taxonomy surfaced by the request controller."""

from enum import Enum
from typing import Any, ClassVar, Self


class ErrorKind(str, Enum):
    """Classification of every failure a request can end with.

    - CONNECTION: Transport unreachable, timed out, or refused
    - AUTHENTICATION: Caller is not logged in or authentication was rejected
    - DECODING: Response bytes could not be decoded into the target type
    - ENCODING: Request body could not be encoded
    - UNKNOWN: Anything else, including undecodable server error bodies
    """

    CONNECTION = "connectionError"
    AUTHENTICATION = "authenticationError"
    DECODING = "decodingError"
    ENCODING = "encodingError"
    UNKNOWN = "unknownError"


# Kinds that always carry a diagnostic string.
_DETAIL_REQUIRED = frozenset({ErrorKind.DECODING, ErrorKind.ENCODING})

# Kinds that never carry one.
_DETAIL_FORBIDDEN = frozenset({ErrorKind.CONNECTION, ErrorKind.AUTHENTICATION})


class ApiError(Exception):
    """Failure of a request, expressed as exactly one ErrorKind.

    Subclasses describe the server's error body by setting ``payload_model``
    to a type the codec can decode. When a failed response carries such a
    body, ``from_payload`` turns it into an error instance.

    Attributes:
        kind: Taxonomy classification.
        detail: Diagnostic string (decoding/encoding/unknown only).
        payload: Decoded server error body, if any.
    """

    payload_model: ClassVar[Any] = None

    def __init__(
        self,
        kind: ErrorKind,
        detail: str | None = None,
        payload: Any = None,
    ) -> None:
        """Initialize the error.

        Args:
            kind: Taxonomy classification.
            detail: Diagnostic string.
            payload: Decoded server error body.

        Raises:
            ValueError: If detail does not fit the kind.
        """
        if kind in _DETAIL_REQUIRED and not detail:
            msg = f"{kind.value} requires a detail message"
            raise ValueError(msg)
        if kind in _DETAIL_FORBIDDEN and detail is not None:
            msg = f"{kind.value} does not take a detail message"
            raise ValueError(msg)

        self.kind = kind
        self.detail = detail
        self.payload = payload
        super().__init__(kind, detail, payload)

    @classmethod
    def connection_error(cls) -> Self:
        """Create a connection error."""
        return cls(ErrorKind.CONNECTION)

    @classmethod
    def authentication_error(cls) -> Self:
        """Create an authentication error."""
        return cls(ErrorKind.AUTHENTICATION)

    @classmethod
    def decoding_error(cls, detail: str) -> Self:
        """Create a decoding error with a diagnostic string."""
        return cls(ErrorKind.DECODING, detail)

    @classmethod
    def encoding_error(cls, detail: str) -> Self:
        """Create an encoding error with a diagnostic string."""
        return cls(ErrorKind.ENCODING, detail)

    @classmethod
    def unknown_error(cls, detail: str | None = None) -> Self:
        """Create an unknown error."""
        return cls(ErrorKind.UNKNOWN, detail)

    @classmethod
    def from_error(cls, error: "ApiError") -> Self:
        """Re-express an error of any ApiError type as this type.

        Args:
            error: Error to convert.

        Returns:
            Instance of this class with the same kind, detail and payload.
        """
        if type(error) is cls:
            return error
        return cls(error.kind, error.detail, error.payload)

    @classmethod
    def from_payload(cls, payload: Any) -> Self:
        """Build an error from a decoded server error body.

        The default keeps the body as ``payload`` under the UNKNOWN kind.
        Override to map server error codes onto other kinds.

        Args:
            payload: Instance of ``payload_model``.

        Returns:
            Error carrying the payload.
        """
        return cls(ErrorKind.UNKNOWN, str(payload), payload)

    @property
    def debug_description(self) -> str:
        """Render the error as ``kind`` or ``kind(detail)``."""
        if self.detail is None:
            return self.kind.value
        return f"{self.kind.value}({self.detail})"

    def to_dict(self) -> dict[str, str | None]:
        """Convert error to dictionary for logging.

        Returns:
            Dictionary representation of the error.
        """
        return {
            "kind": self.kind.value,
            "detail": self.detail,
            "error_type": type(self).__name__,
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ApiError):
            return NotImplemented
        return (
            type(self) is type(other)
            and self.kind == other.kind
            and self.detail == other.detail
            and self.payload == other.payload
        )

    def __hash__(self) -> int:
        return hash((type(self), self.kind, self.detail))

    def __str__(self) -> str:
        return self.debug_description

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.debug_description!r})"
