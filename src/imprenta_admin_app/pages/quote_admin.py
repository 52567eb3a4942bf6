from __future__ import annotations

import logging
from typing import Any, Callable

from imprenta_client_sdk import ApiError, ApiSession, ErrorCategory, QuoteStatus, to_user_facing_error
from imprenta_client_sdk.logging_utils import get_logger, log_action

from ..services.errors import ServiceError
from ..services.payment_flow import DeleteConfirmation, PaymentForm, PaymentFormMode, PaymentSubmissionFlow
from ..services.quote_reconciliation import CancelConfirmation, QuoteReconciler, ReconciledQuoteState
from ..ui.notification_center import NotificationCenter

logger = get_logger("imprenta_admin_app.quote_admin")


class QuoteAdminPage:
    """Quote workspace: search a quote, inspect its payments and drive status and payment actions."""

    def __init__(
        self,
        session: ApiSession,
        *,
        notifications: NotificationCenter | None = None,
        reconciler: QuoteReconciler | None = None,
        on_reauth_required: Callable[[], None] | None = None,
    ) -> None:
        self.session = session
        self.notifications = notifications or NotificationCenter(
            ttl_seconds=session.config.notification_ttl_seconds
        )
        self.reconciler = reconciler or QuoteReconciler(session)
        self.payment_flow = PaymentSubmissionFlow(session, self.reconciler)
        self.search_input = ""
        self.payment_form: PaymentForm | None = None
        self.pending_cancel: CancelConfirmation | None = None
        self.pending_delete: DeleteConfirmation | None = None
        self._on_reauth_required = on_reauth_required
        session.add_reauth_listener(self._handle_reauth)

    @property
    def state(self) -> ReconciledQuoteState:
        return self.reconciler.state

    def search(self, quote_id: Any = None) -> bool:
        target = self.search_input if quote_id is None else quote_id
        self._reset_dialogs()
        try:
            return self.reconciler.reconcile(target)
        except Exception as exc:
            self._report(exc)
            return False

    def select_quote(self, quote_id: int) -> bool:
        self.search_input = str(quote_id)
        return self.search(quote_id)

    def open_new_payment(self) -> PaymentForm | None:
        state = self.state
        reason = state.new_payment_block_reason()
        if reason is not None or state.quote is None:
            self.notifications.error(reason or "Busque una cotización primero", category=ErrorCategory.VALIDATION)
            return None
        suggested = state.summary.remaining_amount if state.summary is not None else None
        self.payment_form = PaymentForm.new(state.quote.id, suggested_amount=suggested)
        return self.payment_form

    def open_edit_payment(self, payment_id: int) -> PaymentForm | None:
        payment = next((row for row in self.state.payments if row.id == payment_id), None)
        if payment is None:
            self.notifications.error("Pago no encontrado", category=ErrorCategory.NOT_FOUND)
            return None
        self.payment_form = PaymentForm.for_edit(payment)
        return self.payment_form

    def close_payment_form(self) -> None:
        self.payment_form = None

    def submit_payment_form(self) -> bool:
        form = self.payment_form
        if form is None:
            return False
        try:
            submission = self.payment_flow.submit_form(form)
        except Exception as exc:
            self._report(exc)
            return False
        default = "Pago registrado" if form.mode is PaymentFormMode.NEW else "Pago actualizado"
        self.notifications.success(submission.message or default)
        if submission.refresh_error is not None:
            self._report(submission.refresh_error)
        self.payment_form = None
        return True

    def change_status(self, new_status: QuoteStatus | str) -> bool:
        try:
            self.reconciler.change_status(new_status)
        except Exception as exc:
            self._report(exc)
            return False
        self.notifications.success("Estado actualizado")
        return True

    def request_cancel(self) -> bool:
        try:
            self.pending_cancel = self.reconciler.request_cancel()
        except Exception as exc:
            self._report(exc)
            return False
        return True

    def confirm_cancel(self) -> bool:
        confirmation = self.pending_cancel
        self.pending_cancel = None
        if confirmation is None:
            return False
        try:
            self.reconciler.confirm_cancel(confirmation)
        except Exception as exc:
            self._report(exc)
            return False
        self.notifications.success("Cotización cancelada")
        return True

    def abort_cancel(self) -> None:
        self.pending_cancel = None

    def request_delete_payment(self, payment_id: int) -> bool:
        try:
            self.pending_delete = self.payment_flow.request_delete(payment_id)
        except Exception as exc:
            self._report(exc)
            return False
        return True

    def confirm_delete_payment(self) -> bool:
        confirmation = self.pending_delete
        self.pending_delete = None
        if confirmation is None:
            return False
        try:
            submission = self.payment_flow.confirm_delete(confirmation)
        except Exception as exc:
            self._report(exc)
            return False
        self.notifications.success(submission.message or "Pago eliminado")
        if submission.refresh_error is not None:
            self._report(submission.refresh_error)
        return True

    def unmount(self) -> None:
        self._reset_dialogs()
        self.reconciler.dispose()
        self.notifications.clear()

    def _reset_dialogs(self) -> None:
        self.payment_form = None
        self.pending_cancel = None
        self.pending_delete = None

    def _handle_reauth(self, error: ApiError) -> None:
        if self.reconciler.disposed:
            return
        self._reset_dialogs()
        self.notifications.error("Su sesión ha expirado, inicie sesión nuevamente", category=ErrorCategory.AUTHORIZATION)
        if self._on_reauth_required:
            self._on_reauth_required()

    def _report(self, exc: BaseException) -> None:
        if self.reconciler.disposed:
            return
        if isinstance(exc, ServiceError):
            message, category, details = exc.message, exc.category, exc.details
        else:
            facing = to_user_facing_error(exc)
            message, category, details = facing.message, facing.category, facing.details
        if category is ErrorCategory.AUTHORIZATION:
            return
        if category is not ErrorCategory.VALIDATION:
            log_action(
                logger,
                "quote_admin",
                "user_error",
                category.value,
                level=logging.ERROR,
                details=details,
            )
        self.notifications.error(message, category=category, details=details)
