from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

CENT = Decimal("0.01")
ZERO = Decimal("0.00")
CURRENCY_SYMBOL = "Q"


def parse_amount(value: Any) -> Decimal:
    """Normalize a backend or user supplied amount (number or numeric string) to Decimal."""
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, bool):
        raise ValueError("amount must be numeric")
    elif isinstance(value, int):
        amount = Decimal(value)
    elif isinstance(value, float):
        amount = Decimal(str(value))
    elif isinstance(value, str):
        cleaned = value.strip().replace(",", "")
        if cleaned.startswith(CURRENCY_SYMBOL):
            cleaned = cleaned[len(CURRENCY_SYMBOL):].strip()
        if not cleaned:
            raise ValueError("amount is empty")
        try:
            amount = Decimal(cleaned)
        except InvalidOperation as exc:
            raise ValueError(f"invalid amount: {value!r}") from exc
    else:
        raise ValueError(f"invalid amount type: {type(value).__name__}")
    if not amount.is_finite():
        raise ValueError(f"invalid amount: {value!r}")
    return amount


def quantize_money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def format_amount(value: Decimal | None) -> str:
    if value is None:
        return "0.00"
    return f"{quantize_money(value):.2f}"


def format_currency(value: Decimal | None) -> str:
    amount = quantize_money(value if value is not None else ZERO)
    return f"{CURRENCY_SYMBOL}{amount:,.2f}"
