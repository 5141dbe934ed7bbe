"""
Centralized Error Kind Registry

Single source of truth for the error kinds the gateway returns in the
``error`` field of its error envelope, and the HTTP status each one surfaces
with. Callers branch on the kind, never on the message.

Usage:
    from utils.error_codes import ErrorKind, status_for

    return ResponseModel(
        status_code=status_for(ErrorKind.INVALID_REQUEST),
        error_code=ErrorKind.INVALID_REQUEST,
        error_message='...'
    )
"""

from enum import Enum


class ErrorKind(str, Enum):
    """
    Error kinds surfaced by the gateway.

    UPSTREAM_ERROR has no fixed status; it mirrors the upstream's.
    """

    INVALID_REQUEST = 'INVALID_REQUEST'  # Empty or malformed payload
    METHOD_NOT_ALLOWED = 'METHOD_NOT_ALLOWED'  # Anything but GET/POST
    RATE_LIMIT = 'RATE_LIMIT'  # Upstream returned 429
    UPSTREAM_ERROR = 'UPSTREAM_ERROR'  # Upstream returned another 4xx/5xx
    INTERNAL_ERROR = 'INTERNAL_ERROR'  # Local failure (network, parsing, unexpected)


_STATUS_BY_KIND = {
    ErrorKind.INVALID_REQUEST: 400,
    ErrorKind.METHOD_NOT_ALLOWED: 405,
    ErrorKind.RATE_LIMIT: 429,
    ErrorKind.INTERNAL_ERROR: 500,
}


def status_for(kind: ErrorKind, upstream_status: int | None = None) -> int:
    """Return the HTTP status a given error kind is surfaced with.

    Args:
        kind: Error kind
        upstream_status: Upstream status, used only for UPSTREAM_ERROR

    Returns:
        HTTP status code
    """
    if kind == ErrorKind.UPSTREAM_ERROR:
        return int(upstream_status) if upstream_status else 502
    return _STATUS_BY_KIND[kind]


def is_valid_kind(value: str) -> bool:
    try:
        ErrorKind(value)
        return True
    except ValueError:
        return False
