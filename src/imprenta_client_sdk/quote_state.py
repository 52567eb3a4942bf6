from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .models_payments import DeliveryEligibility, PaymentSummary
from .models_quotes import QuoteStatus

NO_NEW_PAYMENT_STATUSES = frozenset({QuoteStatus.CANCELLED, QuoteStatus.DELIVERED})


class DeliveryBadge(str, Enum):
    ALREADY_DELIVERED = "ALREADY_DELIVERED"
    READY_FOR_DELIVERY = "READY_FOR_DELIVERY"
    NOT_READY = "NOT_READY"


@dataclass(frozen=True)
class QuoteActionAvailability:
    can_accept_new_payment: bool
    can_change_status: bool
    can_cancel: bool
    can_delete_payment: bool
    delivery_badge: DeliveryBadge


def quote_action_availability(
    status: QuoteStatus | None,
    summary: PaymentSummary | None,
    eligibility: DeliveryEligibility | None,
) -> QuoteActionAvailability:
    if status is None:
        return QuoteActionAvailability(False, False, False, False, DeliveryBadge.NOT_READY)

    already_delivered = bool(eligibility and eligibility.is_already_delivered)
    can_accept = (
        status not in NO_NEW_PAYMENT_STATUSES
        and summary is not None
        and not summary.is_fully_paid
        and eligibility is not None
        and not already_delivered
    )
    return QuoteActionAvailability(
        can_accept_new_payment=can_accept,
        can_change_status=status != QuoteStatus.CANCELLED,
        can_cancel=status != QuoteStatus.CANCELLED,
        can_delete_payment=status != QuoteStatus.DELIVERED and not already_delivered,
        delivery_badge=delivery_badge(eligibility),
    )


def delivery_badge(eligibility: DeliveryEligibility | None) -> DeliveryBadge:
    if eligibility is None:
        return DeliveryBadge.NOT_READY
    if eligibility.is_already_delivered:
        return DeliveryBadge.ALREADY_DELIVERED
    if eligibility.can_deliver:
        return DeliveryBadge.READY_FOR_DELIVERY
    return DeliveryBadge.NOT_READY


def new_payment_block_reason(
    status: QuoteStatus | None,
    summary: PaymentSummary | None,
    eligibility: DeliveryEligibility | None,
) -> str | None:
    if status is None:
        return "Busque una cotización primero"
    if status == QuoteStatus.CANCELLED:
        return "No se pueden agregar pagos a una cotización cancelada"
    if status == QuoteStatus.DELIVERED or (eligibility and eligibility.is_already_delivered):
        return "No se pueden agregar pagos a una cotización entregada"
    if summary is None or eligibility is None:
        return "La información de pagos no está disponible"
    if summary.is_fully_paid:
        return "La cotización ya está completamente pagada"
    return None
