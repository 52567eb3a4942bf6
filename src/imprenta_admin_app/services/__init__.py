from .errors import ServiceError
from .payment_flow import PaymentForm, PaymentFormMode, PaymentSubmission, PaymentSubmissionFlow, ReadOnlyFieldError
from .quote_drafts import QuoteDraft, QuoteDraftService
from .quote_reconciliation import (
    CancelConfirmation,
    QuoteReconciler,
    ReconciledQuoteState,
    ReconcileTicket,
    apply_optimistic_status,
)

__all__ = [
    "CancelConfirmation",
    "PaymentForm",
    "PaymentFormMode",
    "PaymentSubmission",
    "PaymentSubmissionFlow",
    "QuoteDraft",
    "QuoteDraftService",
    "QuoteReconciler",
    "ReadOnlyFieldError",
    "ReconcileTicket",
    "ReconciledQuoteState",
    "ServiceError",
    "apply_optimistic_status",
]
