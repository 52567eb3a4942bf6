from __future__ import annotations

import base64
import json
import time
from pathlib import Path

import pytest
import responses
from responses import matchers

from imprenta_client_sdk import ApiSession, AuthError, AuthStore, ForbiddenError, SessionData, UserSummary, load_config
from imprenta_client_sdk.session_guard import validate_token

from conftest import BASE_URL


def _jwt(exp: float | None) -> str:
    def _part(payload: dict) -> str:
        return base64.urlsafe_b64encode(json.dumps(payload).encode()).decode().rstrip("=")

    claims = {"sub": "1"} if exp is None else {"sub": "1", "exp": exp}
    return f"{_part({'alg': 'HS256'})}.{_part(claims)}.signature"


@pytest.fixture
def store(tmp_path: Path) -> AuthStore:
    return AuthStore(base_dir=tmp_path)


@responses.activate
def test_login_persists_and_logout_invalidates(api_env, store: AuthStore) -> None:
    token = _jwt(time.time() + 3600)
    responses.add(
        responses.POST,
        f"{BASE_URL}/auth/login",
        match=[matchers.json_params_matcher({"email": "ana@example.com", "password": "secreto"})],
        json={"token": token, "user": {"name": "Ana", "email": "ana@example.com", "role": "admin"}},
        status=200,
    )
    session = ApiSession(config=load_config(), auth_store=store)
    assert session.is_authenticated is False

    user = session.login("ana@example.com", "secreto")

    assert user.role == "admin"
    assert session.is_authenticated
    assert store.load().token == token
    epoch = session.epoch

    session.logout()

    assert session.is_authenticated is False
    assert session.epoch == epoch + 1
    assert session.http.get_context_version() >= 2
    assert store.load() is None


def test_restore_keeps_valid_session(api_env, store: AuthStore) -> None:
    token = _jwt(time.time() + 3600)
    store.save(SessionData(token=token, user=UserSummary(name="Ana", email="ana@example.com")))

    session = ApiSession(config=load_config(), auth_store=store)

    assert session.is_authenticated
    assert session.user.name == "Ana"
    assert session.quotes_client().access_token == token


def test_restore_discards_expired_session(api_env, store: AuthStore) -> None:
    store.save(SessionData(token=_jwt(time.time() - 10)))

    session = ApiSession(config=load_config(), auth_store=store)

    assert session.is_authenticated is False
    assert store.load() is None


def test_corrupt_store_is_cleared(store: AuthStore, tmp_path: Path) -> None:
    (tmp_path / "session.json").write_text("{not json")

    assert store.load() is None
    assert not (tmp_path / "session.json").exists()


@responses.activate
def test_unauthorized_response_forces_reauthentication(api_env, store: AuthStore) -> None:
    store.save(SessionData(token=_jwt(None)))
    session = ApiSession(config=load_config(), auth_store=store)
    notified: list[int] = []
    session.add_reauth_listener(lambda error: notified.append(error.status_code))
    responses.add(responses.GET, f"{BASE_URL}/quotes/12", json={"message": "Token expirado"}, status=401)

    with pytest.raises(AuthError):
        session.quotes_client().get_quote(12)

    assert notified == [401]
    assert session.is_authenticated is False
    assert store.load() is None


def test_validate_token_reasons() -> None:
    assert validate_token(None).reason == "missing_token"
    assert validate_token("abc").reason == "corrupt_token"
    assert validate_token(_jwt(time.time() - 1)).reason == "expired_token"
    assert validate_token(_jwt(time.time() + 60)).valid


@responses.activate
def test_forbidden_action_keeps_session(api_env, store: AuthStore) -> None:
    store.save(SessionData(token=_jwt(None)))
    session = ApiSession(config=load_config(), auth_store=store)
    notified: list[int] = []
    session.add_reauth_listener(lambda error: notified.append(error.status_code))
    responses.add(
        responses.DELETE,
        f"{BASE_URL}/payments/5",
        json={"message": "No se pueden eliminar pagos de pedidos entregados"},
        status=403,
    )

    with pytest.raises(ForbiddenError) as exc:
        session.payments_client().delete_payment(5)

    assert exc.value.message == "No se pueden eliminar pagos de pedidos entregados"
    assert notified == []
    assert session.is_authenticated
    assert store.load() is not None
