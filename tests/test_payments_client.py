from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest
import responses
from responses import matchers

from imprenta_client_sdk import (
    CreatePaymentRequest,
    HttpClient,
    PaymentListQuery,
    PaymentMethod,
    PaymentStatus,
    PaymentType,
    QuoteStatus,
)
from imprenta_client_sdk.clients.payments import PaymentsClient

from conftest import BASE_URL

AUTH = {"Authorization": "Bearer token"}


def _payment(**overrides):
    payload = {
        "id": 5,
        "quoteId": 12,
        "amount": "400.00",
        "paymentDate": "2026-10-10T15:00:00.000Z",
        "paymentMethod": "EFECTIVO",
        "paymentType": "PARCIAL",
        "status": "CONFIRMADO",
        "transactionReference": None,
        "notes": "anticipo",
    }
    payload.update(overrides)
    return payload


@responses.activate
def test_quote_payments_and_delivery_check(http: HttpClient) -> None:
    client = PaymentsClient(http=http, access_token="token")
    responses.add(
        responses.GET,
        f"{BASE_URL}/payments/quote/12",
        match=[matchers.header_matcher(AUTH)],
        json={
            "payments": [_payment(), _payment(id=6, amount=150.5, paymentMethod="TRANSFERENCIA")],
            "summary": {
                "totalQuote": "1000.00",
                "totalPaid": 550.5,
                "remainingAmount": "449.50",
                "isFullyPaid": False,
                "paymentCount": 2,
            },
        },
        status=200,
    )
    responses.add(
        responses.GET,
        f"{BASE_URL}/payments/quote/12/delivery-check",
        json={
            "canDeliver": False,
            "currentStatus": "FINALIZADA",
            "totalQuote": "1000.00",
            "totalPaid": "550.50",
            "isFullyPaid": False,
            "message": "Pago pendiente",
        },
        status=200,
    )

    history = client.quote_payments(12)
    eligibility = client.delivery_check(12)

    assert [p.payment_method for p in history.payments] == [PaymentMethod.CASH, PaymentMethod.TRANSFER]
    assert history.payments[1].amount == Decimal("150.5")
    assert history.payments[0].payment_type is PaymentType.PARTIAL
    assert history.summary.total_paid == Decimal("550.5")
    assert history.summary.remaining_amount == Decimal("449.50")
    assert eligibility.current_status is QuoteStatus.FINISHED
    assert eligibility.is_already_delivered is False


@responses.activate
def test_create_payment_posts_camel_case_payload(http: HttpClient) -> None:
    client = PaymentsClient(http=http, access_token="token")
    responses.add(
        responses.POST,
        f"{BASE_URL}/payments",
        match=[
            matchers.json_params_matcher(
                {
                    "quoteId": 12,
                    "amount": "600.00",
                    "paymentMethod": "TARJETA_DEBITO",
                    "transactionReference": "AUT-1",
                }
            )
        ],
        json={
            "message": "Pago registrado exitosamente",
            "payment": _payment(id=7, amount="600.00", paymentMethod="TARJETA_DEBITO", paymentType="COMPLETO"),
            "paymentSummary": {
                "totalQuote": "1000.00",
                "totalPaid": "1000.00",
                "remainingAmount": "0.00",
                "isFullyPaid": True,
            },
        },
        status=201,
    )

    result = client.create_payment(
        CreatePaymentRequest(
            quote_id=12,
            amount=Decimal("600"),
            payment_method=PaymentMethod.DEBIT_CARD,
            transaction_reference="AUT-1",
        )
    )

    assert result.message == "Pago registrado exitosamente"
    assert result.payment.payment_type is PaymentType.COMPLETE
    assert result.payment_summary.is_fully_paid is True


@responses.activate
def test_update_payment_sends_only_mutable_fields(http: HttpClient) -> None:
    client = PaymentsClient(http=http, access_token="token")
    responses.add(
        responses.PUT,
        f"{BASE_URL}/payments/5",
        match=[matchers.json_params_matcher({"notes": "saldo", "transactionReference": "BOL-1"}, strict_match=True)],
        json={"message": "Pago actualizado exitosamente", "payment": _payment(notes="saldo")},
        status=200,
    )

    result = client.update_payment(5, {"notes": "saldo", "transaction_reference": "BOL-1"})

    assert result.payment.notes == "saldo"


def test_update_payment_refuses_amount(http: HttpClient) -> None:
    client = PaymentsClient(http=http, access_token="token")

    with pytest.raises(ValueError):
        client.update_payment(5, {"amount": "1.00", "paymentMethod": "EFECTIVO"})


@responses.activate
def test_list_payments_uses_typed_filters(http: HttpClient) -> None:
    client = PaymentsClient(http=http, access_token="token")
    responses.add(
        responses.GET,
        f"{BASE_URL}/payments",
        match=[
            matchers.query_param_matcher(
                {
                    "page": "2",
                    "pageSize": "50",
                    "status": "PENDIENTE",
                    "paymentMethod": "CHEQUE",
                    "dateFrom": "2026-10-01",
                    "dateTo": "2026-10-31",
                }
            )
        ],
        json={
            "payments": [_payment(status="PENDIENTE", paymentMethod="CHEQUE", Quote={"id": 12, "status": "ENTREGADA"})],
            "pagination": {
                "currentPage": 2,
                "totalPages": 3,
                "totalPayments": 120,
                "paymentsPerPage": 50,
                "pageTotal": "400.00",
            },
            "filters": {"status": "PENDIENTE"},
        },
        status=200,
    )

    query = PaymentListQuery(
        page=2,
        page_size=50,
        status=PaymentStatus.PENDING,
        payment_method=PaymentMethod.CHECK,
        date_from=date(2026, 10, 1),
        date_to=date(2026, 10, 31),
    )
    result = client.list_payments(query)

    assert result.pagination.total_payments == 120
    assert result.pagination.page_total == Decimal("400.00")
    assert result.payments[0].quote.status is QuoteStatus.DELIVERED


def test_list_query_rejects_oversized_pages_and_unknown_keys() -> None:
    with pytest.raises(ValueError):
        PaymentListQuery(page_size=500)
    with pytest.raises(ValueError):
        PaymentListQuery.model_validate({"sort": "amount"})
    with pytest.raises(ValueError):
        PaymentListQuery(date_from=date(2026, 2, 1), date_to=date(2026, 1, 1))


@responses.activate
def test_delete_and_summary_report(http: HttpClient) -> None:
    client = PaymentsClient(http=http, access_token="token")
    responses.add(responses.DELETE, f"{BASE_URL}/payments/5", json={"message": "Pago eliminado"}, status=200)
    responses.add(
        responses.GET,
        f"{BASE_URL}/payments/summary",
        match=[matchers.query_param_matcher({"startDate": "2026-10-01", "endDate": "2026-10-31"})],
        json={
            "period": {"startDate": "2026-10-01", "endDate": "2026-10-31", "daysInPeriod": 31},
            "summary": {"totalAmount": "2500.00", "count": 4, "averageAmount": "625.00"},
            "breakdowns": {
                "byPaymentMethod": [{"method": "EFECTIVO", "count": 3, "totalAmount": "1500.00"}],
                "byDay": [{"date": "2026-10-10", "count": 1, "totalAmount": "400.00"}],
            },
        },
        status=200,
    )

    assert client.delete_payment(5) == "Pago eliminado"
    report = client.summary_report({"start_date": "2026-10-01", "end_date": "2026-10-31"})

    assert report.summary.total_amount == Decimal("2500.00")
    assert report.period.days_in_period == 31
    assert report.breakdowns.by_payment_method[0].method is PaymentMethod.CASH
    assert report.breakdowns.by_day[0].total_amount == Decimal("400.00")
