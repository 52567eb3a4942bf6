from __future__ import annotations

import logging
import threading
from concurrent.futures import CancelledError, Future, ThreadPoolExecutor
from dataclasses import dataclass, replace
from typing import Any

from imprenta_client_sdk import (
    ApiSession,
    ClientValidationError,
    DeliveryEligibility,
    ErrorCategory,
    Payment,
    PaymentSummary,
    Quote,
    QuoteActionAvailability,
    QuoteQRInfo,
    QuoteStatus,
    RequestCancelledError,
    ValidationIssue,
    coerce_status,
    new_payment_block_reason,
    parse_entity_id,
    quote_action_availability,
)
from imprenta_client_sdk.logging_utils import get_logger, log_action

from .errors import ServiceError, normalize_error

logger = get_logger("imprenta_admin_app.quotes")

QUOTE_NOT_FOUND_MESSAGE = "Cotización no encontrada"


@dataclass(frozen=True)
class ReconciledQuoteState:
    quote: Quote | None = None
    qr_info: QuoteQRInfo | None = None
    payments: tuple[Payment, ...] = ()
    summary: PaymentSummary | None = None
    eligibility: DeliveryEligibility | None = None

    @property
    def is_empty(self) -> bool:
        return self.quote is None

    @property
    def status(self) -> QuoteStatus | None:
        return self.quote.status if self.quote is not None else None

    @property
    def actions(self) -> QuoteActionAvailability:
        return quote_action_availability(self.status, self.summary, self.eligibility)

    def new_payment_block_reason(self) -> str | None:
        return new_payment_block_reason(self.status, self.summary, self.eligibility)


EMPTY_STATE = ReconciledQuoteState()


@dataclass(frozen=True)
class ReconcileTicket:
    generation: int
    quote_id: int
    session_epoch: int


@dataclass(frozen=True)
class CancelConfirmation:
    quote_id: int
    generation: int


@dataclass(frozen=True)
class _PaymentsSnapshot:
    payments: tuple[Payment, ...]
    summary: PaymentSummary | None
    eligibility: DeliveryEligibility | None


_VIEW_CLOSED = {"code": "REQUEST_CANCELLED", "message": "La vista de cotización fue cerrada", "status_code": 0}


def _result(future: Future) -> Any:
    try:
        return future.result()
    except CancelledError as exc:
        raise RequestCancelledError(details={"type": "cancelled"}, **_VIEW_CLOSED) from exc


def apply_optimistic_status(state: ReconciledQuoteState, status: QuoteStatus) -> ReconciledQuoteState:
    """Patch quote status and the cached QR ``estado`` after the server accepted a transition."""
    if state.quote is None:
        return state
    qr_info = state.qr_info.model_copy(update={"status": status}) if state.qr_info is not None else None
    return replace(state, quote=state.quote.model_copy(update={"status": status}), qr_info=qr_info)


class QuoteReconciler:
    """Owns the reconciled view of one quote: quote, QR metadata, payments and delivery eligibility.

    Every reconciliation is tagged with a ticket. Results are committed only while the ticket is
    still the latest one for the selected quote under the same session epoch, so late responses
    for a previous quote or a previous login are dropped.
    """

    def __init__(self, session: ApiSession, *, max_workers: int = 4) -> None:
        self.session = session
        self._lock = threading.RLock()
        self._generation = 0
        self._selected_quote_id: int | None = None
        self._state = EMPTY_STATE
        self._disposed = False
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="quote-reconcile")

    @property
    def state(self) -> ReconciledQuoteState:
        with self._lock:
            return self._state

    @property
    def selected_quote_id(self) -> int | None:
        with self._lock:
            return self._selected_quote_id

    @property
    def disposed(self) -> bool:
        return self._disposed

    def begin(self, quote_id: Any, *, keep_previous: bool = False) -> ReconcileTicket:
        """Start a reconciliation. The shown state is cleared unless ``keep_previous`` reloads the selected quote."""
        parsed = parse_entity_id(quote_id, field="quote_id", label="ID de cotización")
        with self._lock:
            if self._disposed:
                raise RuntimeError("QuoteReconciler has been disposed")
            self._generation += 1
            if not (keep_previous and parsed == self._selected_quote_id):
                self._state = EMPTY_STATE
            self._selected_quote_id = parsed
            return ReconcileTicket(
                generation=self._generation,
                quote_id=parsed,
                session_epoch=self.session.epoch,
            )

    def is_current(self, ticket: ReconcileTicket) -> bool:
        with self._lock:
            return self._is_current_locked(ticket)

    def load(self, ticket: ReconcileTicket) -> ReconciledQuoteState:
        quotes = self.session.quotes_client()
        quote_future = self._submit(quotes.get_quote, ticket.quote_id)
        qr_future = self._submit(quotes.get_qr_info, ticket.quote_id)
        try:
            quote = _result(quote_future)
        except RequestCancelledError:
            qr_future.cancel()
            raise
        except Exception as exc:
            qr_future.cancel()
            log_action(
                logger,
                "quotes",
                "load_quote",
                "error",
                level=logging.WARNING,
                quote_id=ticket.quote_id,
                error=type(exc).__name__,
            )
            raise normalize_error(exc, not_found_message=QUOTE_NOT_FOUND_MESSAGE) from exc
        qr_info = self._optional_result(qr_future, "load_qr_info", ticket.quote_id)
        snapshot = self._load_payments(ticket.quote_id)
        return ReconciledQuoteState(
            quote=quote,
            qr_info=qr_info,
            payments=snapshot.payments,
            summary=snapshot.summary,
            eligibility=snapshot.eligibility,
        )

    def commit(self, ticket: ReconcileTicket, state: ReconciledQuoteState) -> bool:
        with self._lock:
            if not self._is_current_locked(ticket):
                log_action(
                    logger,
                    "quotes",
                    "reconcile",
                    "discarded_stale",
                    quote_id=ticket.quote_id,
                    generation=ticket.generation,
                )
                return False
            self._state = state
            return True

    def reconcile(self, quote_id: Any, *, keep_previous: bool = False) -> bool:
        """Load and publish a quote. With ``keep_previous`` a failed reload of the selected quote
        leaves its last good state in place; only a missing quote clears it.
        """
        ticket = self.begin(quote_id, keep_previous=keep_previous)
        try:
            state = self.load(ticket)
        except RequestCancelledError:
            log_action(logger, "quotes", "reconcile", "cancelled", quote_id=ticket.quote_id)
            return False
        except ServiceError as exc:
            with self._lock:
                if not self._is_current_locked(ticket):
                    return False
                if exc.category is ErrorCategory.NOT_FOUND:
                    self._state = EMPTY_STATE
            raise
        return self.commit(ticket, state)

    def refresh(self) -> bool:
        quote_id = self.selected_quote_id
        if quote_id is None:
            return False
        return self.reconcile(quote_id, keep_previous=True)

    def refresh_payments(self) -> bool:
        with self._lock:
            quote = self._state.quote
            if quote is None or self._disposed:
                return False
            ticket = ReconcileTicket(self._generation, quote.id, self.session.epoch)
        try:
            snapshot = self._load_payments(quote.id)
        except RequestCancelledError:
            return False
        with self._lock:
            if not self._is_current_locked(ticket) or self._state.quote is None:
                return False
            refreshed_quote = self._state.quote
            eligibility = snapshot.eligibility
            if eligibility is not None and eligibility.current_status is not None:
                refreshed_quote = refreshed_quote.model_copy(update={"status": eligibility.current_status})
            self._state = replace(
                self._state,
                quote=refreshed_quote,
                payments=snapshot.payments,
                summary=snapshot.summary,
                eligibility=eligibility,
            )
            return True

    def change_status(self, new_status: QuoteStatus | str) -> ReconciledQuoteState:
        try:
            target = coerce_status(new_status)
        except (KeyError, ValueError):
            raise ClientValidationError([ValidationIssue("status", f"Estado inválido: {new_status}")]) from None
        with self._lock:
            state = self._state
            ticket = ReconcileTicket(self._generation, self._selected_quote_id or 0, self.session.epoch)
        if state.quote is None:
            raise ClientValidationError([ValidationIssue("quote_id", "Busque una cotización primero")])
        if not state.actions.can_change_status:
            raise ClientValidationError(
                [ValidationIssue("status", "No se puede cambiar el estado de una cotización cancelada")]
            )
        if target == state.quote.status:
            raise ClientValidationError([ValidationIssue("status", "La cotización ya tiene ese estado")])

        quotes = self.session.quotes_client()
        try:
            quotes.update_status(state.quote.id, target)
        except RequestCancelledError:
            return self.state
        except Exception as exc:
            raise normalize_error(exc, "No se pudo actualizar el estado") from exc
        log_action(logger, "quotes", "change_status", "success", quote_id=state.quote.id, status=target.value)

        with self._lock:
            if not self._is_current_locked(ticket):
                return self._state
            self._state = apply_optimistic_status(self._state, target)

        qr_info: QuoteQRInfo | None
        try:
            qr_info = quotes.get_qr_info(state.quote.id)
        except RequestCancelledError:
            return self.state
        except Exception as exc:
            log_action(
                logger,
                "quotes",
                "load_qr_info",
                "degraded",
                level=logging.WARNING,
                quote_id=state.quote.id,
                error=type(exc).__name__,
            )
            qr_info = None
        if qr_info is not None:
            with self._lock:
                if self._is_current_locked(ticket):
                    self._state = replace(self._state, qr_info=qr_info)

        self.refresh_payments()
        return self.state

    def request_cancel(self) -> CancelConfirmation:
        with self._lock:
            state = self._state
            generation = self._generation
        if state.quote is None:
            raise ClientValidationError([ValidationIssue("quote_id", "Busque una cotización primero")])
        if not state.actions.can_cancel:
            raise ClientValidationError([ValidationIssue("status", "La cotización ya está cancelada")])
        return CancelConfirmation(quote_id=state.quote.id, generation=generation)

    def confirm_cancel(self, confirmation: CancelConfirmation) -> ReconciledQuoteState:
        with self._lock:
            valid = (
                confirmation.generation == self._generation
                and self._state.quote is not None
                and self._state.quote.id == confirmation.quote_id
            )
        if not valid:
            raise ClientValidationError(
                [ValidationIssue("quote_id", "La confirmación de cancelación ya no es válida")]
            )
        return self.change_status(QuoteStatus.CANCELLED)

    def dispose(self) -> None:
        with self._lock:
            self._disposed = True
            self._state = EMPTY_STATE
            self._selected_quote_id = None
        self._executor.shutdown(wait=False, cancel_futures=True)

    def _is_current_locked(self, ticket: ReconcileTicket) -> bool:
        return (
            not self._disposed
            and ticket.generation == self._generation
            and ticket.quote_id == self._selected_quote_id
            and ticket.session_epoch == self.session.epoch
        )

    def _submit(self, fn: Any, *args: Any) -> Future:
        with self._lock:
            if self._disposed:
                raise RequestCancelledError(details={"type": "disposed"}, **_VIEW_CLOSED)
            try:
                return self._executor.submit(fn, *args)
            except RuntimeError as exc:
                raise RequestCancelledError(details={"type": "disposed"}, **_VIEW_CLOSED) from exc

    def _load_payments(self, quote_id: int) -> _PaymentsSnapshot:
        payments_client = self.session.payments_client()
        payments_future = self._submit(payments_client.quote_payments, quote_id)
        eligibility_future = self._submit(payments_client.delivery_check, quote_id)
        payments_response = self._optional_result(payments_future, "load_payments", quote_id)
        eligibility = self._optional_result(eligibility_future, "load_delivery_check", quote_id)
        if payments_response is None:
            return _PaymentsSnapshot(payments=(), summary=None, eligibility=eligibility)
        return _PaymentsSnapshot(
            payments=tuple(payments_response.payments),
            summary=payments_response.summary,
            eligibility=eligibility,
        )

    @staticmethod
    def _optional_result(future: Future, action: str, quote_id: int) -> Any:
        try:
            return _result(future)
        except RequestCancelledError:
            raise
        except Exception as exc:
            log_action(
                logger,
                "quotes",
                action,
                "degraded",
                level=logging.WARNING,
                quote_id=quote_id,
                error=type(exc).__name__,
            )
            return None
