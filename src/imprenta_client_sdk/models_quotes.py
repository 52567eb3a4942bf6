from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Iterable

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from .models import Money, WireModel, WireRequest
from .money import ZERO, parse_amount

Quantity = Annotated[Decimal, BeforeValidator(parse_amount)]


class QuoteStatus(str, Enum):
    CREATED = "CREADA"
    ACCEPTED = "ACEPTADA"
    IN_PROGRESS = "EN_PROCESO"
    FINISHED = "FINALIZADA"
    PAID = "PAGADA"
    DELIVERED = "ENTREGADA"
    CANCELLED = "CANCELADA"


STATUS_LABELS = {
    QuoteStatus.CREATED: "Creada",
    QuoteStatus.ACCEPTED: "Aceptada",
    QuoteStatus.IN_PROGRESS: "En proceso",
    QuoteStatus.FINISHED: "Finalizada",
    QuoteStatus.PAID: "Pagada",
    QuoteStatus.DELIVERED: "Entregada",
    QuoteStatus.CANCELLED: "Cancelada",
}


def coerce_status(value: QuoteStatus | str) -> QuoteStatus:
    if isinstance(value, QuoteStatus):
        return value
    raw = str(value).strip().upper()
    try:
        return QuoteStatus(raw)
    except ValueError:
        return QuoteStatus[raw]


class PartyRef(WireModel):
    name: str | None = None
    email: str | None = None


class QuoteItemMaterial(WireModel):
    id: int | None = None
    material_id: int
    quantity: Quantity
    unit_price: Money
    cost: Money | None = None
    material: PartyRef | None = Field(default=None, alias="Material")


class QuoteItem(WireModel):
    id: int | None = None
    product_id: int
    quantity: int
    unit_price: Money
    materials_cost: Money | None = None
    product: PartyRef | None = Field(default=None, alias="Product")
    materials: list[QuoteItemMaterial] = Field(default_factory=list, alias="QuoteItemMaterials")


class QuoteServiceLine(WireModel):
    id: int | None = None
    service_id: int
    price: Money
    service: PartyRef | None = Field(default=None, alias="Service")


class Quote(WireModel):
    id: int
    client_id: int | None = None
    user_id: int | None = None
    delivery_date: datetime | None = None
    status: QuoteStatus
    total: Money
    qr_code_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    client: PartyRef | None = Field(default=None, alias="Client")
    user: PartyRef | None = Field(default=None, alias="User")
    items: list[QuoteItem] = Field(default_factory=list, alias="QuoteItems")
    services: list[QuoteServiceLine] = Field(default_factory=list, alias="QuoteServices")

    def shadow_total(self) -> Decimal:
        return compute_shadow_total(self.items, self.services)


class QuoteQRInfo(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    quote_id: int | None = Field(default=None, alias="cotizacion_id")
    client_name: str | None = Field(default=None, alias="cliente")
    total: Money | None = None
    status: QuoteStatus | None = Field(default=None, alias="estado")
    delivery_date: str | None = Field(default=None, alias="fecha_entrega")
    created_at: str | None = Field(default=None, alias="fecha_creacion")
    qr_url: str | None = None


class QuoteMaterialLine(WireRequest):
    material_id: int
    quantity: Quantity = Field(gt=0)
    unit_price: Money = Field(ge=0)


class QuoteItemLine(WireRequest):
    product_id: int
    quantity: int = Field(ge=1)
    unit_price: Money = Field(ge=0)
    materials: list[QuoteMaterialLine] = Field(default_factory=list)


class QuoteServiceEntry(WireRequest):
    service_id: int
    price: Money = Field(ge=0)


class QuoteCreateRequest(WireRequest):
    client_id: int
    user_id: int | None = None
    delivery_date: date
    items: list[QuoteItemLine] = Field(default_factory=list)
    services: list[QuoteServiceEntry] = Field(default_factory=list)

    def shadow_total(self) -> Decimal:
        return compute_shadow_total(self.items, self.services)


class QuoteStatusUpdate(WireRequest):
    status: QuoteStatus


class QuoteListQuery(WireRequest):
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1, le=100)
    status: QuoteStatus | None = None
    client_id: int | None = Field(default=None, ge=1)

    def to_params(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class QuoteListPagination(WireModel):
    current_page: int = 1
    total_pages: int = 1
    total_quotes: int = 0
    quotes_per_page: int = 10


class QuoteListResponse(WireModel):
    quotes: list[Quote] = Field(default_factory=list)
    pagination: QuoteListPagination = Field(default_factory=QuoteListPagination)


def compute_shadow_total(items: Iterable[Any], services: Iterable[Any]) -> Decimal:
    """Display-only recomputation of a quote total; the server ``total`` stays authoritative."""
    total = ZERO
    for item in items:
        total += Decimal(item.quantity) * item.unit_price
        for material in item.materials:
            total += material.quantity * material.unit_price
    for service in services:
        total += service.price
    return total
