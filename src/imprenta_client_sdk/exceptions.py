from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ApiError(Exception):
    """A failed backend call.

    ``message`` is the backend's own text when it sent one (``message`` or ``error`` in the body),
    ``raw_payload`` the decoded body as received. Transport-level failures use ``status_code`` 0.
    """

    code: str
    message: str
    details: object | None
    status_code: int
    raw_payload: object | None = None

    def __str__(self) -> str:
        if self.status_code:
            return f"{self.code} (HTTP {self.status_code}): {self.message}"
        return f"{self.code}: {self.message}"

    @property
    def has_server_message(self) -> bool:
        payload = self.raw_payload if isinstance(self.raw_payload, dict) else {}
        return bool(payload.get("message") or payload.get("error"))


class AuthError(ApiError):
    """401: the bearer token is missing, expired or was revoked."""


class ForbiddenError(ApiError):
    """403: the session is valid but the backend refused this action."""


class NotFoundError(ApiError):
    pass


class ValidationError(ApiError):
    """400/422: the backend rejected the payload."""


class ConflictError(ApiError):
    """409: the request clashes with current data, e.g. a payment above the pending balance."""


class ServerError(ApiError):
    pass


class TransportError(ApiError):
    """No HTTP response: connection refused, DNS failure or timeout."""


class RequestCancelledError(TransportError):
    """The result is no longer wanted: the session was replaced or the view that asked for it closed."""
