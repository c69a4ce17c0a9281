# intervium/errors.py
"""
Error taxonomy shared by the store adapter, the recommendation/statistics
core and the routers.

Callers branch on ``error.kind`` (an ``ErrorKind`` member); the HTTP layer maps
each kind to a status code in one place (``intervium.main``).
"""
from enum import Enum
from typing import Any, Optional


class ErrorKind(str, Enum):
    STORE_UNAVAILABLE = "store_unavailable"
    INVALID_IDENTIFIER = "invalid_identifier"
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"
    VALIDATION_FAILURE = "validation_failure"
    UNAUTHORIZED = "unauthorized"


HTTP_STATUS_BY_KIND = {
    ErrorKind.STORE_UNAVAILABLE: 503,
    ErrorKind.INVALID_IDENTIFIER: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.VALIDATION_FAILURE: 422,
    ErrorKind.UNAUTHORIZED: 401,
}


class InterviumError(Exception):
    kind: ErrorKind = ErrorKind.STORE_UNAVAILABLE
    default_message = "internal_error"

    def __init__(self, message: Optional[str] = None, detail: Any = None):
        self.message = message or self.default_message
        self.detail = detail
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return HTTP_STATUS_BY_KIND[self.kind]

    def to_dict(self) -> dict:
        body = {"success": False, "code": self.kind.value, "message": self.message}
        if self.detail is not None:
            body["detail"] = self.detail
        return body


class StoreUnavailable(InterviumError):
    kind = ErrorKind.STORE_UNAVAILABLE
    default_message = "store_unavailable"


class InvalidIdentifier(InterviumError):
    kind = ErrorKind.INVALID_IDENTIFIER
    default_message = "invalid_identifier"


class NotFound(InterviumError):
    kind = ErrorKind.NOT_FOUND
    default_message = "not_found"


class Forbidden(InterviumError):
    kind = ErrorKind.FORBIDDEN
    default_message = "forbidden"


class ValidationFailure(InterviumError):
    kind = ErrorKind.VALIDATION_FAILURE
    default_message = "invalid_request_body"


class Unauthorized(InterviumError):
    kind = ErrorKind.UNAUTHORIZED
    default_message = "unauthorized"
