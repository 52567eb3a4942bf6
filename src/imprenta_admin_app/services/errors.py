from __future__ import annotations

from dataclasses import dataclass

from imprenta_client_sdk import ErrorCategory, to_user_facing_error
from imprenta_client_sdk.ui_errors import GENERIC_ERROR_MESSAGE


@dataclass
class ServiceError(RuntimeError):
    message: str
    category: ErrorCategory = ErrorCategory.TRANSPORT
    details: str | None = None
    status_code: int | None = None

    def __str__(self) -> str:
        return self.message


def normalize_error(
    exc: BaseException,
    fallback: str = GENERIC_ERROR_MESSAGE,
    *,
    not_found_message: str | None = None,
) -> ServiceError:
    if isinstance(exc, ServiceError):
        return exc
    facing = to_user_facing_error(exc, fallback)
    message = facing.message
    if not_found_message and facing.category is ErrorCategory.NOT_FOUND:
        message = not_found_message
    return ServiceError(
        message=message,
        category=facing.category,
        details=facing.details,
        status_code=facing.status_code,
    )
