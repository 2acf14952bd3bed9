"""Pydantic models and interfaces for the Stripe adapter."""

from .enums import (
    CheckoutMode,
    CheckoutSessionStatus,
    ProductInterval,
    TransactionStatus,
    WebhookEventKind,
    WebhookResult,
)
from .errors import (
    ERROR_MESSAGES,
    AuthenticationError,
    ConfigurationError,
    ErrorCode,
    ErrorResponse,
    IntegrityError,
    PaymentProviderError,
    PaymentRequestError,
    ProviderAPIError,
)
from .interfaces import (
    ParametersInterface,
    PaymentGateway,
    ProductInterface,
    TransactionInterface,
    UserInterface,
    WebhookHandlerInterface,
)
from .payment import CheckoutContext, Product, RemoteSession, Transaction, User
from .stripe_webhook import (
    CheckoutCompletedPayload,
    CheckoutSessionCompletedEvent,
    InvoicePaidEvent,
    InvoicePaidPayload,
    InvoicePaymentFailedEvent,
    InvoicePaymentFailedPayload,
    UnhandledEvent,
    WebhookEvent,
    WebhookOutcome,
)

__all__ = [
    # Enums
    "CheckoutMode",
    "CheckoutSessionStatus",
    "ProductInterval",
    "TransactionStatus",
    "WebhookEventKind",
    "WebhookResult",
    # Errors
    "ERROR_MESSAGES",
    "AuthenticationError",
    "ConfigurationError",
    "ErrorCode",
    "ErrorResponse",
    "IntegrityError",
    "PaymentProviderError",
    "PaymentRequestError",
    "ProviderAPIError",
    # Interfaces
    "ParametersInterface",
    "PaymentGateway",
    "ProductInterface",
    "TransactionInterface",
    "UserInterface",
    "WebhookHandlerInterface",
    # Payment
    "CheckoutContext",
    "Product",
    "RemoteSession",
    "Transaction",
    "User",
    # Webhook
    "CheckoutCompletedPayload",
    "CheckoutSessionCompletedEvent",
    "InvoicePaidEvent",
    "InvoicePaidPayload",
    "InvoicePaymentFailedEvent",
    "InvoicePaymentFailedPayload",
    "UnhandledEvent",
    "WebhookEvent",
    "WebhookOutcome",
]
