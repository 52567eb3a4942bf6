from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable
from urllib.parse import urljoin

import requests
from requests.adapters import HTTPAdapter

from .config import ClientConfig
from .error_mapper import map_error
from .exceptions import ApiError, AuthError, RequestCancelledError, TransportError
from .logging_utils import get_logger, log_action

ResponseHook = Callable[[requests.Response], None]
RequestHook = Callable[[str, str, dict[str, Any]], None]
AuthErrorHandler = Callable[[ApiError], None]

SESSION_CONTEXT = "session"


@dataclass
class LastOperation:
    module: str
    operation: str
    duration_ms: int
    result: str
    status_code: int | None = None


@dataclass
class HttpClient:
    config: ClientConfig
    session: requests.Session | None = None
    before_request: RequestHook | None = None
    after_response: ResponseHook | None = None
    logger: logging.Logger | None = None
    last_operation: LastOperation | None = None
    _context_versions: dict[str, int] = field(default_factory=dict)
    _auth_error_handlers: list[AuthErrorHandler] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.session is None:
            self.session = requests.Session()
            adapter = HTTPAdapter(
                pool_connections=self.config.max_connections,
                pool_maxsize=self.config.max_connections,
            )
            self.session.mount("http://", adapter)
            self.session.mount("https://", adapter)
        if self.logger is None:
            self.logger = get_logger("imprenta_client_sdk.http")

    def _build_url(self, path: str) -> str:
        base = self.config.api_base_url.rstrip("/") + "/"
        return urljoin(base, path.lstrip("/"))

    def register_auth_error_handler(self, handler: AuthErrorHandler) -> None:
        self._auth_error_handlers.append(handler)

    def request(
        self,
        method: str,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        json_body: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        response_hook: ResponseHook | None = None,
        retry_mutation: bool = False,
        module: str = "unknown",
        operation: str = "unknown",
        context_key: str | None = SESSION_CONTEXT,
        context_version: int | None = None,
        auth_required: bool = True,
    ) -> dict[str, Any] | list[Any] | None:
        if self.session is None:
            raise RuntimeError("HTTP session not initialized")
        request_headers = {"Accept": "application/json"}
        if headers:
            request_headers.update(headers)

        normalized_method = method.upper()
        url = self._build_url(path)
        request_context = {
            "headers": request_headers,
            "json_body": json_body,
            "params": params,
        }
        if self.before_request:
            self.before_request(normalized_method, url, request_context)

        can_retry = normalized_method in {"GET", "HEAD"} or retry_mutation
        attempts = self.config.retries + 1 if can_retry else 1

        started = time.monotonic()
        if context_key and context_version is None:
            context_version = self.get_context_version(context_key)
        response: requests.Response | None = None
        for attempt in range(attempts):
            try:
                response = self.session.request(
                    method=normalized_method,
                    url=url,
                    headers=request_headers,
                    json=json_body,
                    params=params,
                    timeout=self.config.timeout,
                    verify=self.config.verify_ssl,
                )
            except requests.RequestException as exc:
                if attempt >= attempts - 1:
                    self._record_operation(module, operation, started, "transport_error", None, path)
                    raise TransportError(
                        code="TRANSPORT_ERROR",
                        message=str(exc),
                        details={"type": type(exc).__name__},
                        status_code=0,
                        raw_payload=None,
                    ) from exc
            else:
                if response.status_code < 500 or attempt >= attempts - 1:
                    break
            time.sleep(self.config.retry_backoff_seconds * (2**attempt))

        if response is None:
            raise RuntimeError("HTTP request failed without response")

        if context_key and not self._context_is_current(context_key, context_version):
            self._record_operation(module, operation, started, "cancelled", response.status_code, path)
            raise RequestCancelledError(
                code="REQUEST_CANCELLED",
                message="Request cancelled due to context switch",
                details={"type": "context_switched", "context": context_key},
                status_code=0,
                raw_payload=None,
            )

        if self.after_response:
            self.after_response(response)
        if response_hook:
            response_hook(response)
        if response.ok:
            self._record_operation(module, operation, started, "success", response.status_code, path)
            if not response.content:
                return None
            return response.json()

        payload = None
        try:
            payload = response.json()
        except (json.JSONDecodeError, ValueError):
            payload = {"message": response.text}
        self._record_operation(module, operation, started, "error", response.status_code, path)
        error = map_error(response.status_code, payload if isinstance(payload, dict) else None)
        if auth_required and isinstance(error, AuthError):
            for handler in list(self._auth_error_handlers):
                handler(error)
        raise error

    def switch_context(self, context_key: str = SESSION_CONTEXT) -> int:
        new_version = self.get_context_version(context_key) + 1
        self._context_versions[context_key] = new_version
        return new_version

    def get_context_version(self, context_key: str = SESSION_CONTEXT) -> int:
        return self._context_versions.get(context_key, 0)

    def _record_operation(
        self,
        module: str,
        operation: str,
        started: float,
        result: str,
        status_code: int | None,
        path: str,
    ) -> None:
        duration_ms = int((time.monotonic() - started) * 1000)
        self.last_operation = LastOperation(
            module=module,
            operation=operation,
            duration_ms=duration_ms,
            result=result,
            status_code=status_code,
        )
        if self.logger is not None:
            log_action(
                self.logger,
                module,
                operation,
                result,
                level=logging.INFO if result == "success" else logging.WARNING,
                path=path,
                status_code=status_code,
                duration_ms=duration_ms,
            )

    def _context_is_current(self, context_key: str, context_version: int | None) -> bool:
        if context_version is None:
            return True
        return self.get_context_version(context_key) == context_version
