"""Error taxonomy shared by every layer of the request core."""

from apiflux.errors.taxonomy import ApiError, ErrorKind


__all__ = ["ApiError", "ErrorKind"]
