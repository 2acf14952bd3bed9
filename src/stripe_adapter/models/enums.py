"""Enumeration types for Stripe adapter data models."""

from enum import Enum


class TransactionStatus(str, Enum):
    """Status of a host transaction."""

    UNKNOWN = "unknown"
    CREATED = "created"
    APPROVED = "approved"
    FAILED = "failed"


class CheckoutSessionStatus(str, Enum):
    """Status of a Stripe Checkout Session."""

    OPEN = "open"
    COMPLETE = "complete"
    EXPIRED = "expired"


class CheckoutMode(str, Enum):
    """Checkout Session mode."""

    PAYMENT = "payment"
    SUBSCRIPTION = "subscription"


class ProductInterval(str, Enum):
    """Billing interval of a recurring product."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


class WebhookEventKind(str, Enum):
    """Webhook event kinds handled by the processor.

    Values are the Stripe event type strings, except UNHANDLED which
    stands for every type the processor does not act on.
    """

    CHECKOUT_SESSION_COMPLETED = "checkout.session.completed"
    INVOICE_PAID = "invoice.paid"
    INVOICE_PAYMENT_FAILED = "invoice.payment_failed"
    UNHANDLED = "unhandled"


class WebhookResult(str, Enum):
    """Outcome of processing one webhook delivery."""

    DISPATCHED = "dispatched"
    DROPPED = "dropped"
    IGNORED = "ignored"
