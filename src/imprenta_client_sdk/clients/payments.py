from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from ..models_payments import (
    CreatePaymentRequest,
    DeliveryEligibility,
    Payment,
    PaymentListQuery,
    PaymentListResponse,
    PaymentMutationResponse,
    PaymentReportQuery,
    PaymentSummaryReport,
    QuotePaymentsResponse,
    UpdatePaymentRequest,
)
from .base import BaseClient, _coerce_model, _expect_object


@dataclass
class PaymentsClient(BaseClient):
    module: str = "payments"

    def quote_payments(self, quote_id: int) -> QuotePaymentsResponse:
        data = self._request("GET", f"/payments/quote/{quote_id}", operation="quote_payments")
        return QuotePaymentsResponse.model_validate(_expect_object(data, "quote payments"))

    def delivery_check(self, quote_id: int) -> DeliveryEligibility:
        data = self._request("GET", f"/payments/quote/{quote_id}/delivery-check", operation="delivery_check")
        return DeliveryEligibility.model_validate(_expect_object(data, "delivery check"))

    def create_payment(self, payload: CreatePaymentRequest | Mapping[str, Any]) -> PaymentMutationResponse:
        request = _coerce_model(payload, CreatePaymentRequest)
        data = self._request("POST", "/payments", json_body=request.to_payload(), operation="create_payment")
        return PaymentMutationResponse.model_validate(_expect_object(data, "create payment"))

    def get_payment(self, payment_id: int) -> Payment:
        data = self._request("GET", f"/payments/{payment_id}", operation="get_payment")
        return Payment.model_validate(_expect_object(data, "payment"))

    def update_payment(
        self,
        payment_id: int,
        payload: UpdatePaymentRequest | Mapping[str, Any],
    ) -> PaymentMutationResponse:
        request = _coerce_model(payload, UpdatePaymentRequest)
        data = self._request(
            "PUT",
            f"/payments/{payment_id}",
            json_body=request.to_payload(),
            operation="update_payment",
        )
        return PaymentMutationResponse.model_validate(_expect_object(data, "update payment"))

    def delete_payment(self, payment_id: int) -> str | None:
        data = self._request("DELETE", f"/payments/{payment_id}", operation="delete_payment")
        if isinstance(data, dict):
            message = data.get("message")
            return str(message) if message is not None else None
        return None

    def list_payments(self, filters: PaymentListQuery | Mapping[str, Any] | None = None) -> PaymentListResponse:
        query = _coerce_model(filters, PaymentListQuery) if filters is not None else PaymentListQuery()
        data = self._request("GET", "/payments", params=query.to_params(), operation="list_payments")
        return PaymentListResponse.model_validate(_expect_object(data, "payment list"))

    def summary_report(self, query: PaymentReportQuery | Mapping[str, Any]) -> PaymentSummaryReport:
        request = _coerce_model(query, PaymentReportQuery)
        data = self._request("GET", "/payments/summary", params=request.to_params(), operation="summary_report")
        return PaymentSummaryReport.model_validate(_expect_object(data, "payment summary"))
