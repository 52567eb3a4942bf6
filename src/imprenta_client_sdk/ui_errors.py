from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .exceptions import ApiError, AuthError, ForbiddenError, NotFoundError, ValidationError
from .validation import ClientValidationError

GENERIC_ERROR_MESSAGE = "Ocurrió un error al comunicarse con el servidor"


class ErrorCategory(str, Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    TRANSPORT = "transport"
    AUTHORIZATION = "authorization"
    FORBIDDEN = "forbidden"


@dataclass(frozen=True)
class UserFacingError:
    message: str
    category: ErrorCategory
    details: str | None = None
    status_code: int | None = None

    @property
    def technical_details(self) -> str | None:
        if self.details:
            return self.details
        return None


def classify_error(exc: BaseException) -> ErrorCategory:
    if isinstance(exc, ClientValidationError):
        return ErrorCategory.VALIDATION
    if isinstance(exc, AuthError):
        return ErrorCategory.AUTHORIZATION
    if isinstance(exc, ForbiddenError):
        return ErrorCategory.FORBIDDEN
    if isinstance(exc, NotFoundError):
        return ErrorCategory.NOT_FOUND
    if isinstance(exc, ValidationError):
        return ErrorCategory.VALIDATION
    return ErrorCategory.TRANSPORT


def to_user_facing_error(exc: BaseException, fallback: str = GENERIC_ERROR_MESSAGE) -> UserFacingError:
    category = classify_error(exc)
    if isinstance(exc, ClientValidationError):
        return UserFacingError(message=str(exc), category=category)
    if isinstance(exc, ApiError):
        primary = exc.message.strip() if exc.has_server_message and exc.message else fallback
        details = f"{exc.code} (HTTP {exc.status_code})"
        if exc.details:
            details = f"{details}: {exc.details}"
        return UserFacingError(message=primary, category=category, details=details, status_code=exc.status_code)
    return UserFacingError(message=fallback, category=category, details=str(exc) or type(exc).__name__)
