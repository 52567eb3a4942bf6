from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any

from imprenta_client_sdk import (
    ApiSession,
    ClientValidationError,
    Material,
    Product,
    Quote,
    QuoteCreateRequest,
    QuoteItemLine,
    QuoteMaterialLine,
    QuoteServiceEntry,
    Service,
    ValidationIssue,
    compute_shadow_total,
    parse_amount,
)
from imprenta_client_sdk.logging_utils import get_logger, log_action

from .errors import normalize_error

logger = get_logger("imprenta_admin_app.quote_drafts")


@dataclass
class DraftMaterial:
    material_id: int
    name: str
    quantity: Decimal
    unit_price: Decimal


@dataclass
class DraftItem:
    product_id: int
    name: str
    quantity: int
    unit_price: Decimal
    materials: list[DraftMaterial] = field(default_factory=list)


@dataclass
class DraftService:
    service_id: int
    name: str
    price: Decimal


@dataclass
class QuoteDraft:
    client_id: int | None = None
    user_id: int | None = None
    delivery_date: date | None = None
    items: list[DraftItem] = field(default_factory=list)
    services: list[DraftService] = field(default_factory=list)

    def add_product(self, product: Product, quantity: int = 1) -> DraftItem:
        item = DraftItem(
            product_id=product.id,
            name=product.name,
            quantity=quantity,
            unit_price=product.base_price,
        )
        self.items.append(item)
        return item

    def add_material(self, item_index: int, material: Material, quantity: Any = 1) -> DraftMaterial:
        line = DraftMaterial(
            material_id=material.id,
            name=material.name,
            quantity=parse_amount(quantity),
            unit_price=material.unit_cost,
        )
        self.items[item_index].materials.append(line)
        return line

    def add_service(self, service: Service) -> DraftService:
        line = DraftService(service_id=service.id, name=service.name, price=service.price)
        self.services.append(line)
        return line

    def remove_item(self, index: int) -> None:
        del self.items[index]

    def remove_service(self, index: int) -> None:
        del self.services[index]

    def shadow_total(self) -> Decimal:
        return compute_shadow_total(self.items, self.services)

    def validate(self) -> list[ValidationIssue]:
        issues: list[ValidationIssue] = []
        if self.client_id is None:
            issues.append(ValidationIssue("client_id", "Seleccione un cliente"))
        if self.delivery_date is None:
            issues.append(ValidationIssue("delivery_date", "Seleccione una fecha de entrega"))
        if not self.items and not self.services:
            issues.append(ValidationIssue("items", "Agregue al menos un producto o servicio"))
        for idx, item in enumerate(self.items):
            if item.quantity < 1:
                issues.append(ValidationIssue(f"items[{idx}].quantity", "La cantidad debe ser al menos 1"))
            if item.unit_price < 0:
                issues.append(ValidationIssue(f"items[{idx}].unit_price", "El precio no puede ser negativo"))
            for m_idx, material in enumerate(item.materials):
                if material.quantity <= 0:
                    issues.append(
                        ValidationIssue(
                            f"items[{idx}].materials[{m_idx}].quantity",
                            "La cantidad de material debe ser mayor que 0",
                        )
                    )
        for idx, service in enumerate(self.services):
            if service.price < 0:
                issues.append(ValidationIssue(f"services[{idx}].price", "El precio no puede ser negativo"))
        return issues

    def to_request(self) -> QuoteCreateRequest:
        issues = self.validate()
        if issues:
            raise ClientValidationError(issues)
        return QuoteCreateRequest(
            client_id=self.client_id,
            user_id=self.user_id,
            delivery_date=self.delivery_date,
            items=[
                QuoteItemLine(
                    product_id=item.product_id,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                    materials=[
                        QuoteMaterialLine(
                            material_id=material.material_id,
                            quantity=material.quantity,
                            unit_price=material.unit_price,
                        )
                        for material in item.materials
                    ],
                )
                for item in self.items
            ],
            services=[QuoteServiceEntry(service_id=s.service_id, price=s.price) for s in self.services],
        )


class QuoteDraftService:
    def __init__(self, session: ApiSession) -> None:
        self.session = session

    def submit(self, draft: QuoteDraft) -> Quote:
        request = draft.to_request()
        try:
            quote = self.session.quotes_client().create_quote(request)
        except Exception as exc:
            raise normalize_error(exc, "No se pudo crear la cotización") from exc
        log_action(logger, "quotes", "create_quote", "success", quote_id=quote.id)
        return quote
