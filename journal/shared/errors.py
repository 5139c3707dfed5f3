"""Named error kinds shared by every route.

Each failure carries a machine-readable ``kind`` next to the human message so
clients don't have to match on message strings. The global exception handlers
in ``journal.app`` render these as ``{"success": false, "message", "error"}``.
"""

from enum import Enum
from typing import Optional, Dict

from fastapi import HTTPException, status


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    RATE_LIMITED = "rate_limited"
    NOT_FOUND = "not_found"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    UPSTREAM_FAILURE = "upstream_failure"
    INTERNAL = "internal"


STATUS_FOR_KIND = {
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.RATE_LIMITED: status.HTTP_429_TOO_MANY_REQUESTS,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorKind.UPSTREAM_FAILURE: status.HTTP_502_BAD_GATEWAY,
    ErrorKind.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def kind_for_status(status_code: int) -> ErrorKind:
    """Best-effort mapping for plain HTTPExceptions raised by FastAPI itself."""
    for kind, code in STATUS_FOR_KIND.items():
        if code == status_code:
            return kind
    if status_code == status.HTTP_422_UNPROCESSABLE_ENTITY:
        return ErrorKind.VALIDATION
    if 400 <= status_code < 500:
        return ErrorKind.VALIDATION
    return ErrorKind.INTERNAL


class ApiError(HTTPException):
    """HTTPException tagged with an ErrorKind."""

    def __init__(self, kind: ErrorKind, message: str, headers: Optional[Dict[str, str]] = None):
        super().__init__(status_code=STATUS_FOR_KIND[kind], detail=message, headers=headers)
        self.kind = kind
        self.message = message


def validation_error(message: str) -> ApiError:
    return ApiError(ErrorKind.VALIDATION, message)


def not_found(message: str = "Not found") -> ApiError:
    return ApiError(ErrorKind.NOT_FOUND, message)


def upstream_failure(message: str) -> ApiError:
    return ApiError(ErrorKind.UPSTREAM_FAILURE, message)


def internal_error(message: str) -> ApiError:
    return ApiError(ErrorKind.INTERNAL, message)
