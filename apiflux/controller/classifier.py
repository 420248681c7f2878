"""Response status classification."""

from enum import Enum
from http import HTTPStatus

from apiflux.controller.constants import (
    HTTP_STATUS_CLIENT_ERROR_MAX,
    HTTP_STATUS_INFORMATIONAL_MIN,
    HTTP_STATUS_OK_MAX,
    HTTP_STATUS_OK_MIN,
    HTTP_STATUS_REDIRECT_MAX,
    HTTP_STATUS_SERVER_ERROR_MAX,
    MOCK_LOG_STATUS,
)


class StatusGroup(str, Enum):
    """Range a status code falls in."""

    INFORMATIONAL = "informational"
    SUCCESS = "success"
    REDIRECTION = "redirection"
    CLIENT_ERROR = "client_error"
    SERVER_ERROR = "server_error"
    UNDEFINED = "undefined"


class ResponseClass(str, Enum):
    """Outcome used to pick the decode path."""

    SUCCESS = "success"
    FAILURE = "failure"


def status_group(status_code: int | None) -> StatusGroup:
    """Group a status code by range.

    Args:
        status_code: HTTP status, or None when unset.

    Returns:
        StatusGroup for the code; UNDEFINED outside 100-599.
    """
    if status_code is None:
        return StatusGroup.UNDEFINED
    if HTTP_STATUS_INFORMATIONAL_MIN <= status_code < HTTP_STATUS_OK_MIN:
        return StatusGroup.INFORMATIONAL
    if HTTP_STATUS_OK_MIN <= status_code < HTTP_STATUS_OK_MAX:
        return StatusGroup.SUCCESS
    if HTTP_STATUS_OK_MAX <= status_code < HTTP_STATUS_REDIRECT_MAX:
        return StatusGroup.REDIRECTION
    if HTTP_STATUS_REDIRECT_MAX <= status_code < HTTP_STATUS_CLIENT_ERROR_MAX:
        return StatusGroup.CLIENT_ERROR
    if HTTP_STATUS_CLIENT_ERROR_MAX <= status_code < HTTP_STATUS_SERVER_ERROR_MAX:
        return StatusGroup.SERVER_ERROR
    return StatusGroup.UNDEFINED


def classify(status_code: int | None) -> ResponseClass:
    """Classify a status as success (2xx) or failure (everything else).

    Args:
        status_code: HTTP status, or None when unset.

    Returns:
        ResponseClass.SUCCESS only for 2xx.
    """
    if status_group(status_code) == StatusGroup.SUCCESS:
        return ResponseClass.SUCCESS
    return ResponseClass.FAILURE


def log_status(status_code: int | None) -> int:
    """Status shown in logs; a missing status (mock path) reads as 200."""
    return MOCK_LOG_STATUS if status_code is None else status_code


def status_phrase(status_code: int) -> str:
    """Get the reason phrase for a status, or ``Undefined``."""
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Undefined"
