from __future__ import annotations

from decimal import Decimal

import pytest

from imprenta_client_sdk import (
    ClientValidationError,
    ConflictError,
    PaymentMethod,
    QuoteStatus,
    ServerError,
    TransportError,
    UpdatePaymentRequest,
)

from fakes import build_session, make_payment, make_quote
from imprenta_admin_app.services.errors import ServiceError
from imprenta_admin_app.services.payment_flow import (
    PaymentForm,
    PaymentFormMode,
    PaymentSubmissionFlow,
    ReadOnlyFieldError,
)
from imprenta_admin_app.services.quote_reconciliation import QuoteReconciler


@pytest.fixture
def workspace():
    session = build_session(make_quote(12), payments={12: [make_payment(1, 12, "400.00")]})
    reconciler = QuoteReconciler(session)
    reconciler.reconcile(12)
    yield session, reconciler, PaymentSubmissionFlow(session, reconciler)
    reconciler.dispose()


def test_partial_then_final_payment_settles_quote(workspace) -> None:
    session, reconciler, flow = workspace
    assert reconciler.state.summary.remaining_amount == Decimal("600.00")
    assert reconciler.state.actions.can_accept_new_payment is True

    submission = flow.submit_new_payment(12, "600", PaymentMethod.TRANSFER, transaction_reference=" TRX-9 ")

    assert submission.refreshed is True
    assert submission.message == "Pago registrado exitosamente"
    request = session.payments.created[0]
    assert request.amount == Decimal("600")
    assert request.transaction_reference == "TRX-9"
    assert request.notes is None
    state = reconciler.state
    assert state.summary.is_fully_paid is True
    assert state.summary.remaining_amount == Decimal("0.00")
    assert state.actions.can_accept_new_payment is False


@pytest.mark.parametrize("amount", ["0", "-5", "abc", ""])
def test_invalid_amount_is_rejected_without_network(workspace, amount) -> None:
    session, _, flow = workspace

    with pytest.raises(ClientValidationError):
        flow.submit_new_payment(12, amount, "EFECTIVO")
    assert session.payments.created == []


def test_amount_above_remaining_cites_maximum(workspace) -> None:
    session, reconciler, flow = workspace
    flow.submit_new_payment(12, "450.00", "EFECTIVO")
    assert reconciler.state.summary.remaining_amount == Decimal("150.00")

    with pytest.raises(ClientValidationError) as exc:
        flow.submit_new_payment(12, "150.01", "EFECTIVO")

    assert "150.00" in str(exc.value)
    assert len(session.payments.created) == 1


def test_fractional_cent_over_remaining_is_not_sent(workspace) -> None:
    session, reconciler, flow = workspace
    flow.submit_new_payment(12, "450.00", "EFECTIVO")
    assert reconciler.state.summary.remaining_amount == Decimal("150.00")

    with pytest.raises(ClientValidationError):
        flow.submit_new_payment(12, "150.004", "EFECTIVO")

    assert [request.amount for request in session.payments.created] == [Decimal("450.00")]


def test_unknown_method_is_rejected(workspace) -> None:
    session, _, flow = workspace

    with pytest.raises(ClientValidationError):
        flow.submit_new_payment(12, "10", "BITCOIN")
    assert session.payments.created == []


def test_new_payment_refused_for_delivered_quote() -> None:
    session = build_session(make_quote(12, QuoteStatus.DELIVERED))
    reconciler = QuoteReconciler(session)
    reconciler.reconcile(12)
    flow = PaymentSubmissionFlow(session, reconciler)

    with pytest.raises(ClientValidationError) as exc:
        flow.submit_new_payment(12, "10", "EFECTIVO")

    assert "entregada" in str(exc.value)
    assert session.payments.created == []
    reconciler.dispose()


def test_server_rejection_message_is_shown_verbatim(workspace) -> None:
    session, reconciler, flow = workspace
    session.payments.fail_create = ConflictError(
        code="CONFLICT",
        message="El monto excede el saldo pendiente",
        details=None,
        status_code=409,
        raw_payload={"message": "El monto excede el saldo pendiente"},
    )
    before = reconciler.state

    with pytest.raises(ServiceError) as exc:
        flow.submit_new_payment(12, "100", "EFECTIVO")

    assert exc.value.message == "El monto excede el saldo pendiente"
    assert reconciler.state == before


def test_transport_failure_uses_generic_message(workspace) -> None:
    session, _, flow = workspace
    session.payments.fail_create = TransportError(
        code="TRANSPORT_ERROR", message="Connection refused", details=None, status_code=0
    )

    with pytest.raises(ServiceError) as exc:
        flow.submit_new_payment(12, "100", "EFECTIVO")

    assert exc.value.message == "No se pudo registrar el pago"


def test_edit_form_locks_immutable_fields(workspace) -> None:
    _, reconciler, _ = workspace
    form = PaymentForm.for_edit(reconciler.state.payments[0])

    assert form.mode is PaymentFormMode.EDIT
    for field in ("amount", "payment_method", "status", "payment_date"):
        assert form.is_read_only(field)
        with pytest.raises(ReadOnlyFieldError):
            form.set_field(field, "999")
    form.set_field("notes", "saldo en dos pagos")
    assert form.notes == "saldo en dos pagos"


def test_edit_submission_only_sends_mutable_fields(workspace) -> None:
    session, reconciler, flow = workspace
    form = PaymentForm.for_edit(reconciler.state.payments[0])
    form.set_field("transaction_reference", "BOLETA-77")
    form.amount = "1.00"

    submission = flow.submit_form(form)

    payment_id, request = session.payments.updated[0]
    assert payment_id == 1
    assert isinstance(request, UpdatePaymentRequest)
    assert request.to_payload() == {"notes": "anticipo", "transactionReference": "BOLETA-77"}
    assert submission.refreshed is True


def test_update_request_rejects_amount() -> None:
    with pytest.raises(ValueError):
        UpdatePaymentRequest.model_validate({"notes": "x", "amount": "10.00"})


def test_delete_requires_confirmation_and_refreshes(workspace) -> None:
    session, reconciler, flow = workspace

    confirmation = flow.request_delete(1)
    assert session.payments.deleted == []

    flow.confirm_delete(confirmation)

    assert session.payments.deleted == [1]
    assert reconciler.state.payments == ()
    assert reconciler.state.summary.remaining_amount == Decimal("1000.00")


def test_delete_refused_for_delivered_quote() -> None:
    session = build_session(
        make_quote(12, QuoteStatus.DELIVERED),
        payments={12: [make_payment(1, 12, "1000.00")]},
    )
    reconciler = QuoteReconciler(session)
    reconciler.reconcile(12)
    flow = PaymentSubmissionFlow(session, reconciler)

    with pytest.raises(ClientValidationError):
        flow.request_delete(1)
    reconciler.dispose()


def test_new_form_suggests_remaining_amount(workspace) -> None:
    _, reconciler, _ = workspace

    form = PaymentForm.new(12, suggested_amount=reconciler.state.summary.remaining_amount)

    assert form.amount == "600.00"
    assert form.payment_method is PaymentMethod.CASH
    assert not form.is_read_only("amount")


def test_failed_refresh_after_save_keeps_open_quote(workspace) -> None:
    session, reconciler, flow = workspace
    session.quotes.fail_quote[12] = ServerError(
        code="HTTP_ERROR", message="Service Unavailable", details=None, status_code=503, raw_payload={}
    )

    submission = flow.submit_new_payment(12, "100.00", "EFECTIVO")

    assert [request.amount for request in session.payments.created] == [Decimal("100.00")]
    assert submission.refreshed is False
    assert submission.refresh_error is not None
    state = reconciler.state
    assert state.quote.id == 12
    assert [payment.id for payment in state.payments] == [1]
    assert state.summary.remaining_amount == Decimal("600.00")
