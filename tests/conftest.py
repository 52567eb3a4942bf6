from __future__ import annotations

import pytest

from imprenta_client_sdk import HttpClient, load_config

BASE_URL = "https://api.example.com/api"


@pytest.fixture
def api_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("IMPRENTA_ENV", raising=False)
    monkeypatch.delenv("IMPRENTA_API_BASE_URL_DEV", raising=False)
    monkeypatch.setenv("IMPRENTA_API_BASE_URL", BASE_URL)
    monkeypatch.setenv("IMPRENTA_RETRY_BACKOFF_SECONDS", "0")


@pytest.fixture
def http(api_env) -> HttpClient:
    return HttpClient(load_config())
