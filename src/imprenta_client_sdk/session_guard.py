from __future__ import annotations

import base64
import json
from dataclasses import dataclass
from datetime import datetime, timezone


@dataclass(frozen=True)
class TokenValidation:
    valid: bool
    reason: str | None = None


def validate_token(token: str | None, now_utc: datetime | None = None) -> TokenValidation:
    if not token:
        return TokenValidation(valid=False, reason="missing_token")

    parts = token.split(".")
    if len(parts) != 3:
        return TokenValidation(valid=False, reason="corrupt_token")

    payload_part = parts[1]
    padded = payload_part + ("=" * (-len(payload_part) % 4))
    try:
        decoded = base64.urlsafe_b64decode(padded.encode("utf-8")).decode("utf-8")
        payload = json.loads(decoded)
    except (ValueError, UnicodeDecodeError):
        return TokenValidation(valid=False, reason="corrupt_token")

    exp = payload.get("exp") if isinstance(payload, dict) else None
    if exp is None:
        return TokenValidation(valid=True)
    if not isinstance(exp, (int, float)):
        return TokenValidation(valid=False, reason="corrupt_token")

    now = now_utc or datetime.now(tz=timezone.utc)
    if float(exp) <= now.timestamp():
        return TokenValidation(valid=False, reason="expired_token")
    return TokenValidation(valid=True)
