from __future__ import annotations

from datetime import date
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from imprenta_client_sdk import (
    ApiSession,
    ClientValidationError,
    ErrorCategory,
    Payment,
    PaymentListQuery,
    PaymentReportQuery,
    PaymentStats,
    PaymentSummaryReport,
    QuoteStatus,
    ValidationIssue,
    payment_stats,
    validate_report_range,
)

from ..services.errors import normalize_error
from ..ui.notification_center import NotificationCenter
from ..ui.pagination import PaginationState
from .listing import _validation_error_from_pydantic


class PaymentsAdminPage:
    """Cross-quote payment listing with filters, period report and deletion."""

    def __init__(self, session: ApiSession, notifications: NotificationCenter) -> None:
        self.session = session
        self.notifications = notifications
        self.query = PaymentListQuery()
        self.rows: list[Payment] = []
        self.pagination = PaginationState(page_size=self.query.page_size)
        self.report: PaymentSummaryReport | None = None
        self.pending_delete: Payment | None = None

    @property
    def stats(self) -> PaymentStats:
        return payment_stats(self.rows)

    def set_filters(self, **changes: Any) -> bool:
        if "page" not in changes:
            changes["page"] = 1
        try:
            self.query = PaymentListQuery.model_validate({**self.query.model_dump(), **changes})
        except PydanticValidationError as exc:
            self._report(_validation_error_from_pydantic(exc), "Filtros inválidos")
            return False
        return self.load()

    def clear_filters(self) -> bool:
        self.query = PaymentListQuery(page_size=self.query.page_size)
        return self.load()

    def load(self) -> bool:
        try:
            response = self.session.payments_client().list_payments(self.query)
        except Exception as exc:
            self._report(exc, "No se pudieron cargar los pagos")
            return False
        self.rows = list(response.payments)
        self.pagination = PaginationState(
            page=response.pagination.current_page,
            page_size=response.pagination.payments_per_page,
            total_pages=max(1, response.pagination.total_pages),
        )
        return True

    def next_page(self) -> bool:
        if not self.pagination.has_next:
            return False
        return self.set_filters(page=self.pagination.page + 1)

    def prev_page(self) -> bool:
        if not self.pagination.has_prev:
            return False
        return self.set_filters(page=self.pagination.page - 1)

    def load_report(self, start: date | None, end: date | None) -> PaymentSummaryReport | None:
        issues = validate_report_range(start, end)
        if issues:
            self._report(ClientValidationError(issues), "Rango de fechas inválido")
            return None
        try:
            self.report = self.session.payments_client().summary_report(
                PaymentReportQuery(start_date=start, end_date=end)
            )
        except Exception as exc:
            self._report(exc, "No se pudo generar el resumen de pagos")
            return None
        return self.report

    def request_delete(self, payment_id: int) -> bool:
        payment = next((row for row in self.rows if row.id == payment_id), None)
        if payment is None:
            self._report(
                ClientValidationError([ValidationIssue("payment_id", "Pago no encontrado")]),
                "Pago no encontrado",
            )
            return False
        if payment.quote is not None and payment.quote.status == QuoteStatus.DELIVERED:
            self._report(
                ClientValidationError(
                    [ValidationIssue("payment_id", "No se pueden eliminar pagos de una cotización entregada")]
                ),
                "Operación no permitida",
            )
            return False
        self.pending_delete = payment
        return True

    def confirm_delete(self) -> bool:
        payment = self.pending_delete
        self.pending_delete = None
        if payment is None:
            return False
        try:
            message = self.session.payments_client().delete_payment(payment.id)
        except Exception as exc:
            self._report(exc, "No se pudo eliminar el pago")
            return False
        self.notifications.success(message or "Pago eliminado")
        return self.load()

    def _report(self, exc: BaseException, fallback: str) -> None:
        error = normalize_error(exc, fallback)
        if error.category is ErrorCategory.AUTHORIZATION:
            return
        self.notifications.error(error.message, category=error.category, details=error.details)
