from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel

from .money import format_amount, parse_amount

Money = Annotated[
    Decimal,
    BeforeValidator(parse_amount),
    PlainSerializer(format_amount, return_type=str, when_used="json"),
]


class WireModel(BaseModel):
    """Backend response: camelCase on the wire, unknown fields kept."""

    model_config = ConfigDict(extra="allow", alias_generator=to_camel, populate_by_name=True)


class WireRequest(BaseModel):
    """Outgoing payload: camelCase on the wire, unknown fields rejected."""

    model_config = ConfigDict(extra="forbid", alias_generator=to_camel, populate_by_name=True)

    def to_payload(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class UserSummary(WireModel):
    name: str | None = None
    email: str | None = None
    role: str | None = None


class LoginResponse(WireModel):
    token: str
    user: UserSummary | None = None


class SessionData(BaseModel):
    token: str
    user: UserSummary | None = None
    env_name: str | None = None


class Role(WireModel):
    id: int
    name: str
    description: str | None = None


class User(WireModel):
    id: int
    name: str
    email: str
    role_id: int | None = None
    role: Role | None = Field(default=None, alias="Role")
    created_at: datetime | None = None
    updated_at: datetime | None = None


class UserWrite(WireRequest):
    name: str = Field(min_length=1)
    email: str = Field(min_length=3)
    role_id: int
    password: str | None = None
