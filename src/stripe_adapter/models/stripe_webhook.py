"""Stripe webhook event models.

A verified Stripe event is decoded into one variant of WebhookEvent,
discriminated by ``kind``. Event types the adapter does not act on
decode to UnhandledEvent.
"""

from datetime import datetime
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from .enums import WebhookEventKind, WebhookResult


class CheckoutCompletedPayload(BaseModel):
    """Fields of a completed checkout session."""

    model_config = ConfigDict(strict=True, frozen=True)

    user_id: int = Field(..., description="Host user ID from session metadata")
    product_id: int = Field(..., description="Host product ID from session metadata")
    customer_id: str = Field(..., description="Stripe Customer ID (cus_xxx)")
    amount_total: int = Field(..., description="Total charged in minor units")
    session_id: str = Field(
        ...,
        description="Stripe Checkout Session ID (cs_xxx)",
        examples=["cs_test_abc123"],
    )


class InvoicePaidPayload(BaseModel):
    """Fields of a paid invoice."""

    model_config = ConfigDict(strict=True, frozen=True)

    customer_id: str = Field(..., description="Stripe Customer ID (cus_xxx)")
    amount_paid: int = Field(..., description="Amount paid in minor units")
    invoice_id: str = Field(
        ...,
        description="Stripe Invoice ID (in_xxx)",
        examples=["in_1ABC123DEF456"],
    )
    period_start: datetime = Field(..., description="Billing period start (UTC)")
    period_end: datetime = Field(..., description="Billing period end (UTC)")


class InvoicePaymentFailedPayload(BaseModel):
    """Fields of an invoice whose payment failed."""

    model_config = ConfigDict(strict=True, frozen=True)

    customer_id: str = Field(..., description="Stripe Customer ID (cus_xxx)")


class CheckoutSessionCompletedEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal[WebhookEventKind.CHECKOUT_SESSION_COMPLETED] = (
        WebhookEventKind.CHECKOUT_SESSION_COMPLETED
    )
    event_id: str | None = None
    payload: CheckoutCompletedPayload


class InvoicePaidEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal[WebhookEventKind.INVOICE_PAID] = WebhookEventKind.INVOICE_PAID
    event_id: str | None = None
    payload: InvoicePaidPayload


class InvoicePaymentFailedEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal[WebhookEventKind.INVOICE_PAYMENT_FAILED] = (
        WebhookEventKind.INVOICE_PAYMENT_FAILED
    )
    event_id: str | None = None
    payload: InvoicePaymentFailedPayload


class UnhandledEvent(BaseModel):
    """Any Stripe event type the adapter ignores."""

    model_config = ConfigDict(frozen=True)

    kind: Literal[WebhookEventKind.UNHANDLED] = WebhookEventKind.UNHANDLED
    event_id: str | None = None
    event_type: str = Field(..., examples=["customer.created"])


WebhookEvent = Annotated[
    Union[
        CheckoutSessionCompletedEvent,
        InvoicePaidEvent,
        InvoicePaymentFailedEvent,
        UnhandledEvent,
    ],
    Field(discriminator="kind"),
]


class WebhookOutcome(BaseModel):
    """Result of processing one verified webhook delivery."""

    model_config = ConfigDict(frozen=True)

    result: WebhookResult
    event_type: str | None = Field(None, examples=["invoice.paid"])
    event_id: str | None = None
