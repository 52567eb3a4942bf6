from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Any

from pydantic import Field, model_validator

from .models import Money, WireModel, WireRequest
from .models_quotes import QuoteStatus


class PaymentMethod(str, Enum):
    CASH = "EFECTIVO"
    CREDIT_CARD = "TARJETA_CREDITO"
    DEBIT_CARD = "TARJETA_DEBITO"
    TRANSFER = "TRANSFERENCIA"
    CHECK = "CHEQUE"
    DEPOSIT = "DEPOSITO"
    OTHER = "OTROS"


class PaymentStatus(str, Enum):
    PENDING = "PENDIENTE"
    CONFIRMED = "CONFIRMADO"
    REJECTED = "RECHAZADO"


class PaymentType(str, Enum):
    PARTIAL = "PARCIAL"
    COMPLETE = "COMPLETO"


METHOD_LABELS = {
    PaymentMethod.CASH: "Efectivo",
    PaymentMethod.CREDIT_CARD: "Tarjeta de crédito",
    PaymentMethod.DEBIT_CARD: "Tarjeta de débito",
    PaymentMethod.TRANSFER: "Transferencia",
    PaymentMethod.CHECK: "Cheque",
    PaymentMethod.DEPOSIT: "Depósito",
    PaymentMethod.OTHER: "Otros",
}


class PaymentQuoteRef(WireModel):
    id: int | None = None
    status: QuoteStatus | None = None
    total: Money | None = None


class Payment(WireModel):
    id: int
    quote_id: int
    amount: Money = Field(gt=0)
    payment_date: datetime | None = None
    payment_method: PaymentMethod
    payment_type: PaymentType | None = None
    status: PaymentStatus = PaymentStatus.CONFIRMED
    transaction_reference: str | None = None
    notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    quote: PaymentQuoteRef | None = Field(default=None, alias="Quote")


class PaymentSummary(WireModel):
    total_quote: Money
    total_paid: Money
    remaining_amount: Money
    is_fully_paid: bool
    payment_count: int | None = None


class DeliveryEligibility(WireModel):
    can_deliver: bool
    current_status: QuoteStatus | None = None
    total_quote: Money | None = None
    total_paid: Money | None = None
    is_fully_paid: bool = False
    is_already_delivered: bool = False
    message: str | None = None


class QuotePaymentsResponse(WireModel):
    payments: list[Payment] = Field(default_factory=list)
    summary: PaymentSummary | None = None


class CreatePaymentRequest(WireRequest):
    quote_id: int = Field(gt=0)
    amount: Money = Field(gt=0)
    payment_method: PaymentMethod
    transaction_reference: str | None = None
    notes: str | None = None
    payment_date: datetime | None = None


class UpdatePaymentRequest(WireRequest):
    """Only these two fields are mutable once a payment exists."""

    notes: str | None = None
    transaction_reference: str | None = None


class PaymentMutationResponse(WireModel):
    message: str | None = None
    payment: Payment | None = None
    payment_summary: PaymentSummary | None = None


class PaymentListQuery(WireRequest):
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=20, ge=1, le=100)
    quote_id: int | None = Field(default=None, ge=1)
    status: PaymentStatus | None = None
    payment_method: PaymentMethod | None = None
    date_from: date | None = None
    date_to: date | None = None

    @model_validator(mode="after")
    def _check_dates(self) -> "PaymentListQuery":
        if self.date_from and self.date_to and self.date_from > self.date_to:
            raise ValueError("dateFrom must not be after dateTo")
        return self

    def to_params(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class PaymentListPagination(WireModel):
    current_page: int = 1
    total_pages: int = 1
    total_payments: int = 0
    payments_per_page: int = 20
    page_total: Money | None = None


class PaymentListResponse(WireModel):
    payments: list[Payment] = Field(default_factory=list)
    pagination: PaymentListPagination = Field(default_factory=PaymentListPagination)
    filters: dict[str, Any] | None = None


class PaymentReportQuery(WireRequest):
    start_date: date
    end_date: date

    def to_params(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ReportPeriod(WireModel):
    start_date: date | datetime | None = None
    end_date: date | datetime | None = None
    days_in_period: int | None = None


class ReportTotals(WireModel):
    total_amount: Money
    count: int = 0
    average_amount: Money | None = None


class MethodBreakdown(WireModel):
    method: PaymentMethod
    count: int = 0
    total_amount: Money


class DayBreakdown(WireModel):
    date: str
    count: int = 0
    total_amount: Money


class ReportBreakdowns(WireModel):
    by_payment_method: list[MethodBreakdown] = Field(default_factory=list)
    by_day: list[DayBreakdown] = Field(default_factory=list)


class PaymentSummaryReport(WireModel):
    period: ReportPeriod | None = None
    summary: ReportTotals
    breakdowns: ReportBreakdowns = Field(default_factory=ReportBreakdowns)
