from __future__ import annotations

from datetime import datetime

from pydantic import Field

from .models import Money, WireModel, WireRequest


class Client(WireModel):
    id: int
    name: str
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ClientWrite(WireRequest):
    name: str = Field(min_length=1)
    email: str | None = None
    phone: str | None = None
    address: str | None = None


class Material(WireModel):
    id: int
    name: str
    unit: str | None = None
    unit_cost: Money
    created_at: datetime | None = None
    updated_at: datetime | None = None


class MaterialWrite(WireRequest):
    name: str = Field(min_length=1)
    unit: str | None = None
    unit_cost: Money = Field(ge=0)


class Product(WireModel):
    id: int
    name: str
    description: str | None = None
    base_price: Money
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ProductWrite(WireRequest):
    name: str = Field(min_length=1)
    description: str | None = None
    base_price: Money = Field(ge=0)


class Service(WireModel):
    id: int
    name: str
    description: str | None = None
    price: Money
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ServiceWrite(WireRequest):
    name: str = Field(min_length=1)
    description: str | None = None
    price: Money = Field(ge=0)
