from __future__ import annotations

from ..models import LoginResponse
from .base import BaseClient, _expect_object


class AuthClient(BaseClient):
    def login(self, email: str, password: str) -> LoginResponse:
        payload = {"email": email, "password": password}
        data = self.http.request(
            "POST",
            "/auth/login",
            json_body=payload,
            module="auth",
            operation="login",
            context_key=None,
            auth_required=False,
        )
        return LoginResponse.model_validate(_expect_object(data, "login"))
