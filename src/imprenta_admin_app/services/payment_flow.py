from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from imprenta_client_sdk import (
    ApiSession,
    ClientValidationError,
    CreatePaymentRequest,
    Payment,
    PaymentMethod,
    PaymentMutationResponse,
    PaymentStatus,
    UpdatePaymentRequest,
    ValidationIssue,
    parse_entity_id,
    validate_new_payment,
)
from imprenta_client_sdk.logging_utils import get_logger, log_action
from imprenta_client_sdk.money import format_amount

from .errors import ServiceError, normalize_error
from .quote_reconciliation import QuoteReconciler

logger = get_logger("imprenta_admin_app.payments")

READ_ONLY_ON_EDIT = frozenset({"amount", "payment_method", "status", "payment_date"})
FORM_FIELDS = frozenset({"amount", "payment_method", "transaction_reference", "notes", "status", "payment_date"})


class ReadOnlyFieldError(ClientValidationError):
    pass


class PaymentFormMode(str, Enum):
    NEW = "new"
    EDIT = "edit"


@dataclass
class PaymentForm:
    mode: PaymentFormMode
    quote_id: int
    payment_id: int | None = None
    amount: str = ""
    payment_method: PaymentMethod | str | None = None
    transaction_reference: str = ""
    notes: str = ""
    status: PaymentStatus | None = None
    payment_date: datetime | None = None

    @classmethod
    def new(cls, quote_id: int, *, suggested_amount: Any = None) -> "PaymentForm":
        amount = format_amount(suggested_amount) if suggested_amount is not None else ""
        return cls(mode=PaymentFormMode.NEW, quote_id=quote_id, amount=amount, payment_method=PaymentMethod.CASH)

    @classmethod
    def for_edit(cls, payment: Payment) -> "PaymentForm":
        return cls(
            mode=PaymentFormMode.EDIT,
            quote_id=payment.quote_id,
            payment_id=payment.id,
            amount=format_amount(payment.amount),
            payment_method=payment.payment_method,
            transaction_reference=payment.transaction_reference or "",
            notes=payment.notes or "",
            status=payment.status,
            payment_date=payment.payment_date,
        )

    def is_read_only(self, field: str) -> bool:
        return self.mode is PaymentFormMode.EDIT and field in READ_ONLY_ON_EDIT

    def set_field(self, field: str, value: Any) -> None:
        if field not in FORM_FIELDS:
            raise ClientValidationError([ValidationIssue(field, f"Campo desconocido: {field}")])
        if self.is_read_only(field):
            raise ReadOnlyFieldError([ValidationIssue(field, "Este campo no se puede modificar")])
        setattr(self, field, value)

    def build_update_request(self) -> UpdatePaymentRequest:
        return UpdatePaymentRequest(
            notes=self.notes.strip(),
            transaction_reference=self.transaction_reference.strip(),
        )


@dataclass(frozen=True)
class PaymentSubmission:
    response: PaymentMutationResponse
    refreshed: bool
    refresh_error: ServiceError | None = None

    @property
    def message(self) -> str | None:
        return self.response.message


@dataclass(frozen=True)
class DeleteConfirmation:
    payment_id: int
    quote_id: int


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


class PaymentSubmissionFlow:
    def __init__(self, session: ApiSession, reconciler: QuoteReconciler) -> None:
        self.session = session
        self.reconciler = reconciler

    def submit_new_payment(
        self,
        quote_id: Any,
        amount: Any,
        method: Any,
        transaction_reference: str | None = None,
        notes: str | None = None,
    ) -> PaymentSubmission:
        parsed_quote_id = parse_entity_id(quote_id, field="quote_id", label="ID de cotización")
        state = self.reconciler.state
        summary = None
        if state.quote is not None and state.quote.id == parsed_quote_id:
            reason = state.new_payment_block_reason()
            if reason is not None:
                raise ClientValidationError([ValidationIssue("quote_id", reason)])
            summary = state.summary
        validation = validate_new_payment(amount=amount, method=method, summary=summary)
        validation.raise_for_issues()

        request = CreatePaymentRequest(
            quote_id=parsed_quote_id,
            amount=validation.amount,
            payment_method=validation.method,
            transaction_reference=_clean(transaction_reference),
            notes=_clean(notes),
        )
        try:
            response = self.session.payments_client().create_payment(request)
        except Exception as exc:
            raise normalize_error(exc, "No se pudo registrar el pago") from exc
        log_action(logger, "payments", "create_payment", "success", quote_id=parsed_quote_id)
        return self._after_mutation(parsed_quote_id, response)

    def submit_payment_edit(
        self,
        payment_id: Any,
        *,
        quote_id: Any,
        notes: str | None = None,
        transaction_reference: str | None = None,
    ) -> PaymentSubmission:
        parsed_payment_id = parse_entity_id(payment_id, field="payment_id", label="ID de pago")
        parsed_quote_id = parse_entity_id(quote_id, field="quote_id", label="ID de cotización")
        request = UpdatePaymentRequest(notes=notes, transaction_reference=transaction_reference)
        try:
            response = self.session.payments_client().update_payment(parsed_payment_id, request)
        except Exception as exc:
            raise normalize_error(exc, "No se pudo actualizar el pago") from exc
        log_action(logger, "payments", "update_payment", "success", payment_id=parsed_payment_id)
        return self._after_mutation(parsed_quote_id, response)

    def submit_form(self, form: PaymentForm) -> PaymentSubmission:
        if form.mode is PaymentFormMode.NEW:
            return self.submit_new_payment(
                form.quote_id,
                form.amount,
                form.payment_method,
                transaction_reference=form.transaction_reference,
                notes=form.notes,
            )
        if form.payment_id is None:
            raise ClientValidationError([ValidationIssue("payment_id", "Seleccione un pago")])
        update = form.build_update_request()
        return self.submit_payment_edit(
            form.payment_id,
            quote_id=form.quote_id,
            notes=update.notes,
            transaction_reference=update.transaction_reference,
        )

    def request_delete(self, payment_id: Any) -> DeleteConfirmation:
        parsed_payment_id = parse_entity_id(payment_id, field="payment_id", label="ID de pago")
        state = self.reconciler.state
        if state.quote is None:
            raise ClientValidationError([ValidationIssue("quote_id", "Busque una cotización primero")])
        if not any(payment.id == parsed_payment_id for payment in state.payments):
            raise ClientValidationError([ValidationIssue("payment_id", "El pago no pertenece a esta cotización")])
        if not state.actions.can_delete_payment:
            raise ClientValidationError(
                [ValidationIssue("payment_id", "No se pueden eliminar pagos de una cotización entregada")]
            )
        return DeleteConfirmation(payment_id=parsed_payment_id, quote_id=state.quote.id)

    def confirm_delete(self, confirmation: DeleteConfirmation) -> PaymentSubmission:
        try:
            message = self.session.payments_client().delete_payment(confirmation.payment_id)
        except Exception as exc:
            raise normalize_error(exc, "No se pudo eliminar el pago") from exc
        log_action(logger, "payments", "delete_payment", "success", payment_id=confirmation.payment_id)
        return self._after_mutation(confirmation.quote_id, PaymentMutationResponse(message=message))

    def _after_mutation(self, quote_id: int, response: PaymentMutationResponse) -> PaymentSubmission:
        try:
            refreshed = self.reconciler.reconcile(quote_id, keep_previous=True)
        except ServiceError as exc:
            log_action(logger, "payments", "refresh_after_mutation", "error", quote_id=quote_id)
            return PaymentSubmission(response=response, refreshed=False, refresh_error=exc)
        return PaymentSubmission(response=response, refreshed=refreshed)
