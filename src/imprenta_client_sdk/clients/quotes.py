from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from ..models_quotes import (
    Quote,
    QuoteCreateRequest,
    QuoteListQuery,
    QuoteListResponse,
    QuoteQRInfo,
    QuoteStatus,
    QuoteStatusUpdate,
)
from .base import BaseClient, _coerce_model, _expect_object


@dataclass
class QuotesClient(BaseClient):
    module: str = "quotes"

    def get_quote(self, quote_id: int) -> Quote:
        data = self._request("GET", f"/quotes/{quote_id}", operation="get_quote")
        return Quote.model_validate(_expect_object(data, "quote"))

    def get_qr_info(self, quote_id: int) -> QuoteQRInfo:
        data = self._request("GET", f"/quotes/{quote_id}/qr-info", operation="get_qr_info")
        return QuoteQRInfo.model_validate(_expect_object(data, "QR info"))

    def list_quotes(self, filters: QuoteListQuery | Mapping[str, Any] | None = None) -> QuoteListResponse:
        query = _coerce_model(filters, QuoteListQuery) if filters is not None else QuoteListQuery()
        data = self._request("GET", "/quotes", params=query.to_params(), operation="list_quotes")
        return QuoteListResponse.model_validate(_expect_object(data, "quote list"))

    def create_quote(self, payload: QuoteCreateRequest | Mapping[str, Any]) -> Quote:
        request = _coerce_model(payload, QuoteCreateRequest)
        data = self._request("POST", "/quotes", json_body=request.to_payload(), operation="create_quote")
        return Quote.model_validate(_expect_object(data, "create quote"))

    def update_status(self, quote_id: int, status: QuoteStatus) -> dict[str, Any]:
        request = QuoteStatusUpdate(status=status)
        data = self._request(
            "PUT",
            f"/quotes/{quote_id}/status",
            json_body=request.to_payload(),
            operation="update_status",
        )
        return data if isinstance(data, dict) else {}
