"""Translation of service errors into HTTP errors."""

from fastapi import HTTPException, status

from api.models.responses import ErrorCodes
from core.exceptions import (
    AdapterError,
    AuthExchangeError,
    AuthExpiredError,
    CalendarBridgeError,
    InvalidEventError,
    NotAuthenticatedError,
)

# Checked in order; first isinstance match wins
ERROR_STATUS: list[tuple[type[CalendarBridgeError], int, str]] = [
    (NotAuthenticatedError, status.HTTP_401_UNAUTHORIZED, ErrorCodes.NOT_AUTHENTICATED),
    (AuthExpiredError, status.HTTP_401_UNAUTHORIZED, ErrorCodes.AUTH_EXPIRED),
    (AuthExchangeError, status.HTTP_401_UNAUTHORIZED, ErrorCodes.AUTH_EXCHANGE_FAILED),
    (InvalidEventError, status.HTTP_400_BAD_REQUEST, ErrorCodes.INVALID_EVENT),
    (AdapterError, status.HTTP_500_INTERNAL_SERVER_ERROR, ErrorCodes.UPSTREAM_ERROR),
]


def http_error(
    status_code: int,
    message: str,
    code: str,
    error: str | None = None,
    details: list[str] | None = None,
    upstream_status: int | None = None,
) -> HTTPException:
    """Build an HTTPException whose detail is the standard error body."""
    return HTTPException(
        status_code=status_code,
        detail={
            "message": message,
            "error": error,
            "code": code,
            "details": details or [],
            "upstream_status": upstream_status,
        },
    )


def to_http_exception(e: CalendarBridgeError) -> HTTPException:
    """Map a service error onto its HTTP status and error code."""
    for error_type, status_code, code in ERROR_STATUS:
        if isinstance(e, error_type):
            break
    else:
        status_code, code = status.HTTP_500_INTERNAL_SERVER_ERROR, ErrorCodes.INTERNAL_ERROR

    return http_error(
        status_code,
        e.message,
        code,
        error=e.reason or str(e),
        upstream_status=e.upstream_status,
    )
