from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Callable

from .auth_store import AuthStore
from .clients.auth import AuthClient
from .clients.catalog import (
    ClientsClient,
    MaterialsClient,
    ProductsClient,
    RolesClient,
    ServicesClient,
    UsersClient,
)
from .clients.payments import PaymentsClient
from .clients.quotes import QuotesClient
from .config import ClientConfig
from .exceptions import ApiError
from .http_client import SESSION_CONTEXT, HttpClient
from .logging_utils import get_logger, log_action
from .models import LoginResponse, SessionData, UserSummary
from .session_guard import validate_token

ReauthListener = Callable[[ApiError], None]

logger = get_logger("imprenta_client_sdk.session")


@dataclass
class ApiSession:
    """Explicit session context: credential, identity and an epoch bumped on every identity change."""

    config: ClientConfig
    auth_store: AuthStore | None = None
    http: HttpClient | None = None
    token: str | None = None
    user: UserSummary | None = None
    restore_on_start: bool = True
    _epoch: int = 0
    _reauth_listeners: list[ReauthListener] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def __post_init__(self) -> None:
        self.auth_store = self.auth_store or AuthStore()
        self.http = self.http or HttpClient(config=self.config)
        self.http.register_auth_error_handler(self._handle_auth_error)
        if self.restore_on_start and not self.token:
            self.restore()

    @property
    def epoch(self) -> int:
        return self._epoch

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def restore(self) -> bool:
        stored = self.auth_store.load()
        if stored is None:
            return False
        validation = validate_token(stored.token)
        if not validation.valid:
            log_action(logger, "session", "restore", "discarded", reason=validation.reason)
            self.auth_store.clear()
            return False
        self.token = stored.token
        self.user = stored.user
        log_action(logger, "session", "restore", "success")
        return True

    def login(self, email: str, password: str) -> UserSummary | None:
        response = self.auth_client().login(email, password)
        self.establish(response)
        return self.user

    def establish(self, response: LoginResponse) -> None:
        self._invalidate()
        self.token = response.token
        self.user = response.user
        self.auth_store.save(SessionData(token=response.token, user=response.user, env_name=self.config.env_name))
        log_action(logger, "session", "login", "success", role=self.user.role if self.user else None)

    def logout(self) -> None:
        self._invalidate()
        self.token = None
        self.user = None
        self.auth_store.clear()
        log_action(logger, "session", "logout", "success")

    def add_reauth_listener(self, listener: ReauthListener) -> None:
        self._reauth_listeners.append(listener)

    def _invalidate(self) -> None:
        with self._lock:
            self._epoch += 1
        self.http.switch_context(SESSION_CONTEXT)

    def _handle_auth_error(self, error: ApiError) -> None:
        if not self.token:
            return
        log_action(logger, "session", "reauth_required", "forced", status_code=error.status_code)
        self.logout()
        for listener in list(self._reauth_listeners):
            listener(error)

    def auth_client(self) -> AuthClient:
        return AuthClient(http=self.http, access_token=self.token, module="auth")

    def quotes_client(self) -> QuotesClient:
        return QuotesClient(http=self.http, access_token=self.token)

    def payments_client(self) -> PaymentsClient:
        return PaymentsClient(http=self.http, access_token=self.token)

    def clients_client(self) -> ClientsClient:
        return ClientsClient(http=self.http, access_token=self.token)

    def materials_client(self) -> MaterialsClient:
        return MaterialsClient(http=self.http, access_token=self.token)

    def products_client(self) -> ProductsClient:
        return ProductsClient(http=self.http, access_token=self.token)

    def services_client(self) -> ServicesClient:
        return ServicesClient(http=self.http, access_token=self.token)

    def users_client(self) -> UsersClient:
        return UsersClient(http=self.http, access_token=self.token)

    def roles_client(self) -> RolesClient:
        return RolesClient(http=self.http, access_token=self.token)
