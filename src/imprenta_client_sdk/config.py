from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Callable, TypeVar

from dotenv import load_dotenv

ENV_PREFIX = "IMPRENTA_"
READ_TIMEOUT_RANGE = (10.0, 30.0)

NumberT = TypeVar("NumberT", int, float)


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class ClientConfig:
    """Connection settings for the print shop backend plus UI timing knobs."""

    env_name: str
    api_base_url: str
    connect_timeout_seconds: float = 5.0
    read_timeout_seconds: float = 15.0
    retries: int = 2
    retry_backoff_seconds: float = 0.3
    max_connections: int = 10
    verify_ssl: bool = True
    notification_ttl_seconds: float = 5.0

    @property
    def timeout(self) -> tuple[float, float]:
        return (self.connect_timeout_seconds, self.read_timeout_seconds)


def _var(name: str) -> str:
    return f"{ENV_PREFIX}{name}"


def _raw(name: str) -> str | None:
    value = os.getenv(_var(name))
    if value is None or not value.strip():
        return None
    return value.strip()


def _number(
    name: str,
    default: NumberT,
    cast: Callable[[str], NumberT],
    *,
    lower: float | None = None,
    upper: float | None = None,
    lower_inclusive: bool = True,
) -> NumberT:
    raw = _raw(name)
    if raw is None:
        value = default
    else:
        try:
            value = cast(raw)
        except ValueError as exc:
            kind = "an integer" if cast is int else "a number"
            raise ConfigError(f"Invalid {_var(name)}: expected {kind}, got {raw!r}") from exc
    too_low = lower is not None and (value < lower if lower_inclusive else value <= lower)
    too_high = upper is not None and value > upper
    if too_low or too_high:
        if upper is not None and lower is not None:
            expected = f"between {lower:g} and {upper:g}"
        else:
            expected = f"{'>=' if lower_inclusive else '>'} {lower:g}"
        raise ConfigError(f"Invalid {_var(name)}: expected {expected}, got {value}")
    return value


def _flag(name: str, default: bool) -> bool:
    raw = _raw(name)
    if raw is None:
        return default
    return raw.lower() in {"1", "true", "yes", "on"}


def _base_url(env_name: str) -> str:
    url = _raw(f"API_BASE_URL_{env_name.upper()}") or _raw("API_BASE_URL")
    if not url:
        raise ConfigError(
            f"Missing {_var('API_BASE_URL')} (or {_var('API_BASE_URL_' + env_name.upper())}); "
            "the backend address has no built-in default"
        )
    return url.rstrip("/")


def load_config(env_file: str | None = None) -> ClientConfig:
    """Build a :class:`ClientConfig` from ``IMPRENTA_*`` variables, after loading ``env_file`` if given.

    ``IMPRENTA_TIMEOUT_SECONDS`` is a shorthand: connect defaults to at most 5 s of it and read
    to at least 15 s of it, each overridable on its own.
    """
    load_dotenv(env_file)

    env_name = _raw("ENV") or "dev"
    base_url = _base_url(env_name)

    overall = _number("TIMEOUT_SECONDS", 10.0, float, lower=0, lower_inclusive=False)
    connect = _number("CONNECT_TIMEOUT_SECONDS", min(overall, 5.0), float, lower=0, lower_inclusive=False)
    low, high = READ_TIMEOUT_RANGE
    read = _number("READ_TIMEOUT_SECONDS", max(overall, 15.0), float, lower=low, upper=high)

    return ClientConfig(
        env_name=env_name,
        api_base_url=base_url,
        connect_timeout_seconds=connect,
        read_timeout_seconds=read,
        retries=_number("RETRIES", 2, int, lower=0),
        retry_backoff_seconds=_number("RETRY_BACKOFF_SECONDS", 0.3, float, lower=0),
        max_connections=_number("MAX_CONNECTIONS", 10, int, lower=1),
        verify_ssl=_flag("VERIFY_SSL", True),
        notification_ttl_seconds=_number("NOTIFICATION_TTL_SECONDS", 5.0, float, lower=0, lower_inclusive=False),
    )
