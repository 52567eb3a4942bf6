from .auth_store import AuthStore
from .config import ClientConfig, ConfigError, load_config
from .exceptions import (
    ApiError,
    AuthError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    RequestCancelledError,
    ServerError,
    TransportError,
    ValidationError,
)
from .http_client import HttpClient
from .models import LoginResponse, Role, SessionData, User, UserSummary, UserWrite
from .models_catalog import (
    Client,
    ClientWrite,
    Material,
    MaterialWrite,
    Product,
    ProductWrite,
    Service,
    ServiceWrite,
)
from .models_payments import (
    CreatePaymentRequest,
    DeliveryEligibility,
    Payment,
    PaymentListQuery,
    PaymentListResponse,
    PaymentMethod,
    PaymentMutationResponse,
    PaymentReportQuery,
    PaymentStatus,
    PaymentSummary,
    PaymentSummaryReport,
    PaymentType,
    QuotePaymentsResponse,
    UpdatePaymentRequest,
)
from .models_quotes import (
    Quote,
    QuoteCreateRequest,
    QuoteItemLine,
    QuoteListQuery,
    QuoteListResponse,
    QuoteMaterialLine,
    QuoteQRInfo,
    QuoteServiceEntry,
    QuoteStatus,
    coerce_status,
    compute_shadow_total,
)
from .money import format_currency, parse_amount, quantize_money
from .payment_validation import (
    PaymentStats,
    PaymentValidationResult,
    payment_stats,
    validate_new_payment,
    validate_report_range,
)
from .quote_state import (
    DeliveryBadge,
    QuoteActionAvailability,
    delivery_badge,
    new_payment_block_reason,
    quote_action_availability,
)
from .session import ApiSession
from .ui_errors import ErrorCategory, UserFacingError, classify_error, to_user_facing_error
from .validation import ClientValidationError, ValidationIssue, parse_entity_id

__all__ = [
    "ApiError",
    "ApiSession",
    "AuthError",
    "AuthStore",
    "Client",
    "ClientConfig",
    "ClientValidationError",
    "ClientWrite",
    "ConfigError",
    "ConflictError",
    "CreatePaymentRequest",
    "DeliveryBadge",
    "DeliveryEligibility",
    "ErrorCategory",
    "ForbiddenError",
    "HttpClient",
    "LoginResponse",
    "Material",
    "MaterialWrite",
    "NotFoundError",
    "Payment",
    "PaymentListQuery",
    "PaymentListResponse",
    "PaymentMethod",
    "PaymentMutationResponse",
    "PaymentReportQuery",
    "PaymentStats",
    "PaymentStatus",
    "PaymentSummary",
    "PaymentSummaryReport",
    "PaymentType",
    "PaymentValidationResult",
    "Product",
    "ProductWrite",
    "Quote",
    "QuoteActionAvailability",
    "QuoteCreateRequest",
    "QuoteItemLine",
    "QuoteListQuery",
    "QuoteListResponse",
    "QuoteMaterialLine",
    "QuotePaymentsResponse",
    "QuoteQRInfo",
    "QuoteServiceEntry",
    "QuoteStatus",
    "RequestCancelledError",
    "Role",
    "ServerError",
    "Service",
    "ServiceWrite",
    "SessionData",
    "TransportError",
    "UpdatePaymentRequest",
    "User",
    "UserFacingError",
    "UserSummary",
    "UserWrite",
    "ValidationError",
    "ValidationIssue",
    "classify_error",
    "coerce_status",
    "compute_shadow_total",
    "delivery_badge",
    "format_currency",
    "load_config",
    "new_payment_block_reason",
    "parse_amount",
    "parse_entity_id",
    "payment_stats",
    "quantize_money",
    "quote_action_availability",
    "to_user_facing_error",
    "validate_new_payment",
    "validate_report_range",
]
