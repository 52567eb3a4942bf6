from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import Decimal
from typing import Any, Sequence

from .models_payments import Payment, PaymentMethod, PaymentSummary, PaymentType
from .money import ZERO, format_amount, parse_amount, quantize_money
from .validation import ClientValidationError, ValidationIssue

MAX_REPORT_RANGE = timedelta(days=366)


@dataclass(frozen=True)
class PaymentValidationResult:
    ok: bool
    issues: list[ValidationIssue]
    amount: Decimal | None = None
    method: PaymentMethod | None = None

    def raise_for_issues(self) -> None:
        if not self.ok:
            raise ClientValidationError(self.issues)


def _coerce_method(value: Any) -> PaymentMethod | None:
    if isinstance(value, PaymentMethod):
        return value
    if value is None:
        return None
    raw = str(value).strip().upper()
    if not raw:
        return None
    try:
        return PaymentMethod(raw)
    except ValueError:
        return PaymentMethod.__members__.get(raw)


def validate_new_payment(
    *,
    amount: Any,
    method: Any,
    summary: PaymentSummary | None = None,
) -> PaymentValidationResult:
    issues: list[ValidationIssue] = []
    parsed: Decimal | None
    try:
        parsed = parse_amount(amount)
    except ValueError:
        parsed = None
        issues.append(ValidationIssue("amount", "Ingrese un monto válido"))
    if parsed is not None and parsed <= 0:
        issues.append(ValidationIssue("amount", "El monto debe ser mayor que 0"))
    elif parsed is not None and parsed != quantize_money(parsed):
        issues.append(ValidationIssue("amount", "El monto no puede tener más de dos decimales"))
    elif parsed is not None and summary is not None:
        remaining = max(summary.remaining_amount, ZERO)
        if parsed > remaining:
            issues.append(
                ValidationIssue(
                    "amount",
                    f"El monto no puede exceder Q{format_amount(remaining)} (monto pendiente)",
                )
            )

    resolved_method = _coerce_method(method)
    if resolved_method is None:
        issues.append(ValidationIssue("payment_method", "Seleccione un método de pago válido"))

    return PaymentValidationResult(
        ok=not issues,
        issues=issues,
        amount=parsed,
        method=resolved_method,
    )


def validate_report_range(start: date | None, end: date | None) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    if start is None or end is None:
        issues.append(ValidationIssue("date_range", "Seleccione fecha de inicio y fecha de fin"))
        return issues
    if start > end:
        issues.append(ValidationIssue("date_range", "La fecha de inicio debe ser anterior a la fecha de fin"))
    elif end - start > MAX_REPORT_RANGE:
        issues.append(ValidationIssue("date_range", "El rango de fechas no puede ser mayor a 1 año"))
    return issues


@dataclass(frozen=True)
class PaymentStats:
    count: int
    total_amount: Decimal
    by_method: dict[PaymentMethod, Decimal] = field(default_factory=dict)
    by_type: dict[PaymentType, Decimal] = field(default_factory=dict)


def payment_stats(payments: Sequence[Payment]) -> PaymentStats:
    by_method: dict[PaymentMethod, Decimal] = {}
    by_type: dict[PaymentType, Decimal] = {}
    total = ZERO
    for payment in payments:
        total += payment.amount
        by_method[payment.payment_method] = by_method.get(payment.payment_method, ZERO) + payment.amount
        if payment.payment_type is not None:
            by_type[payment.payment_type] = by_type.get(payment.payment_type, ZERO) + payment.amount
    return PaymentStats(count=len(payments), total_amount=total, by_method=by_method, by_type=by_type)
