"""Webhook processing for Stripe subscription and invoice events.

A delivery goes through three steps:
- verify the Stripe-Signature header against the webhook secret
- decode the event into a WebhookEvent variant
- dispatch the variant to the host WebhookHandlerInterface

Incomplete events and events of another tenant are dropped without an
error. Stripe may send them before all fields are populated.
"""

import datetime as dt
from typing import Any

import stripe

from ..models.enums import WebhookEventKind, WebhookResult
from ..models.errors import AuthenticationError, ConfigurationError, ErrorCode
from ..models.interfaces import WebhookHandlerInterface
from ..models.stripe_webhook import (
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
from ..utils.logging import (
    correlation_scope,
    get_correlation_id,
    get_logger,
    log_webhook_event,
)

logger = get_logger(__name__)

SIGNATURE_TOLERANCE_SECONDS = 300


def classify_event(event_type: str | None) -> WebhookEventKind:
    """Map a Stripe event type string to a WebhookEventKind."""
    try:
        kind = WebhookEventKind(event_type)
    except ValueError:
        return WebhookEventKind.UNHANDLED
    return kind


def _customer_id(obj: dict) -> str | None:
    customer = obj.get("customer")
    # expanded customer objects carry the id inside
    if isinstance(customer, dict):
        customer = customer.get("id")
    return str(customer) if customer else None


def _metadata(obj: dict) -> dict:
    metadata = obj.get("metadata")
    return metadata if isinstance(metadata, dict) else {}


def _as_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _from_timestamp(value: Any) -> dt.datetime | None:
    timestamp = _as_int(value)
    if timestamp is None:
        return None
    try:
        return dt.datetime.fromtimestamp(timestamp, tz=dt.UTC)
    except (ValueError, OverflowError, OSError):
        return None


def _event_id(event: dict) -> str | None:
    event_id = event.get("id")
    return str(event_id) if event_id is not None else None


def belongs_to_domain(obj: dict, domain: str | None) -> bool:
    """Check the tenant tag stored in the object metadata.

    Objects without a domain tag belong to every domain.
    """
    if domain is None:
        return True
    event_domain = _metadata(obj).get("domain")
    return event_domain is None or event_domain == domain


def extract_checkout_completed(obj: dict) -> CheckoutCompletedPayload | None:
    """Extract the payload of a checkout.session.completed object.

    Returns:
        The payload, or None if metadata, customer or amount_total is missing.
    """
    metadata = _metadata(obj)
    if not metadata:
        return None

    user_id = _as_int(metadata.get("user_id"))
    product_id = _as_int(metadata.get("product_id"))
    if user_id is None or product_id is None:
        return None

    customer_id = _customer_id(obj)
    if customer_id is None:
        return None

    amount_total = _as_int(obj.get("amount_total"))
    if amount_total is None:
        return None

    session_id = obj.get("id")
    if not session_id:
        return None

    return CheckoutCompletedPayload(
        user_id=user_id,
        product_id=product_id,
        customer_id=customer_id,
        amount_total=amount_total,
        session_id=str(session_id),
    )


def _invoice_period(obj: dict) -> tuple[dt.datetime, dt.datetime]:
    """Billing period of an invoice.

    The last line item carrying a period wins. Falls back to the invoice's
    own period_start/period_end, then to the current time.
    """
    start = _from_timestamp(obj.get("period_start"))
    end = _from_timestamp(obj.get("period_end"))

    lines = obj.get("lines")
    items = lines.get("data") if isinstance(lines, dict) else None
    for item in items or []:
        period = item.get("period") if isinstance(item, dict) else None
        if not isinstance(period, dict):
            continue
        start = _from_timestamp(period.get("start")) or start
        end = _from_timestamp(period.get("end")) or end

    now = dt.datetime.now(dt.UTC)
    return start or now, end or now


def extract_invoice_paid(obj: dict) -> InvoicePaidPayload | None:
    """Extract the payload of an invoice.paid object.

    Returns:
        The payload, or None if customer or invoice id is missing.
    """
    customer_id = _customer_id(obj)
    if customer_id is None:
        return None

    invoice_id = obj.get("id")
    if not invoice_id:
        return None

    period_start, period_end = _invoice_period(obj)

    return InvoicePaidPayload(
        customer_id=customer_id,
        amount_paid=_as_int(obj.get("amount_paid")) or 0,
        invoice_id=str(invoice_id),
        period_start=period_start,
        period_end=period_end,
    )


def extract_invoice_payment_failed(obj: dict) -> InvoicePaymentFailedPayload | None:
    customer_id = _customer_id(obj)
    if customer_id is None:
        return None
    return InvoicePaymentFailedPayload(customer_id=customer_id)


def decode_event(event: dict, domain: str | None = None) -> WebhookEvent | None:
    """Decode a verified Stripe event.

    Args:
        event: Parsed Stripe event JSON.
        domain: Configured tenant domain, if any.

    Returns:
        The decoded event, UnhandledEvent for types the adapter does not act
        on, or None if the event is incomplete or belongs to another domain.
    """
    event_id = _event_id(event)
    event_type = event.get("type")
    kind = classify_event(event_type)

    if kind is WebhookEventKind.UNHANDLED:
        return UnhandledEvent(event_id=event_id, event_type=str(event_type))

    data = event.get("data")
    obj = data.get("object") if isinstance(data, dict) else None
    if not isinstance(obj, dict):
        return None

    if not belongs_to_domain(obj, domain):
        return None

    if kind is WebhookEventKind.CHECKOUT_SESSION_COMPLETED:
        payload = extract_checkout_completed(obj)
        if payload is None:
            return None
        return CheckoutSessionCompletedEvent(event_id=event_id, payload=payload)

    if kind is WebhookEventKind.INVOICE_PAID:
        payload = extract_invoice_paid(obj)
        if payload is None:
            return None
        return InvoicePaidEvent(event_id=event_id, payload=payload)

    payload = extract_invoice_payment_failed(obj)
    if payload is None:
        return None
    return InvoicePaymentFailedEvent(event_id=event_id, payload=payload)


def dispatch_event(event: WebhookEvent, handler: WebhookHandlerInterface) -> bool:
    """Invoke the handler callback matching the event.

    Returns:
        True if a callback was invoked.
    """
    if isinstance(event, CheckoutSessionCompletedEvent):
        p = event.payload
        handler.completed(p.user_id, p.product_id, p.customer_id, p.amount_total, p.session_id)
        return True
    if isinstance(event, InvoicePaidEvent):
        p = event.payload
        handler.paid(p.customer_id, p.amount_paid, p.invoice_id, p.period_start, p.period_end)
        return True
    if isinstance(event, InvoicePaymentFailedEvent):
        handler.failed(event.payload.customer_id)
        return True
    return False


class WebhookProcessor:
    """Turns one signed Stripe delivery into zero or one handler callback.

    Deliveries are not deduplicated: Stripe retries at least once and the
    handler is expected to be idempotent on session_id / invoice_id.
    """

    def __init__(self, tolerance: int = SIGNATURE_TOLERANCE_SECONDS) -> None:
        self._tolerance = tolerance

    def verify(self, payload: bytes, signature: str | None, webhook_secret: str) -> dict:
        """Verify the signature and parse the event.

        Raises:
            AuthenticationError: On a missing or invalid signature, a
                timestamp outside the tolerance, or a malformed payload.
        """
        if not signature:
            logger.warning("Webhook request missing Stripe-Signature header")
            raise AuthenticationError(details={"reason": "Missing Stripe-Signature header"})

        try:
            event = stripe.Webhook.construct_event(
                payload, signature, webhook_secret, tolerance=self._tolerance
            )
        except stripe.SignatureVerificationError as e:
            logger.warning("Invalid webhook signature: %s", str(e))
            raise AuthenticationError(details={"reason": "Invalid signature"}) from e
        except (ValueError, AttributeError) as e:
            # undecodable bytes, invalid JSON, or a JSON value that is not an object
            logger.warning("Malformed webhook payload: %s", str(e))
            raise AuthenticationError(details={"reason": "Malformed payload"}) from e

        parsed = event.to_dict()
        logger.info("Webhook signature verified for event: %s", parsed.get("id"))
        return parsed

    def handle(
        self,
        payload: bytes,
        signature: str | None,
        handler: WebhookHandlerInterface,
        webhook_secret: str | None = None,
        domain: str | None = None,
    ) -> WebhookOutcome:
        """Verify, decode and dispatch one webhook delivery.

        Args:
            payload: Raw request body bytes.
            signature: Stripe-Signature header value.
            handler: Host callbacks.
            webhook_secret: Endpoint signing secret (whsec_xxx).
            domain: Tenant domain; events tagged with another domain are dropped.

        Returns:
            The outcome with the verified event type and id. The result is
            DISPATCHED, DROPPED (incomplete or foreign event) or IGNORED
            (event type not handled).

        Raises:
            ConfigurationError: If no webhook secret is configured.
            AuthenticationError: If signature verification fails.
        """
        if not webhook_secret:
            logger.error("Webhook received but no webhook secret is configured")
            raise ConfigurationError(ErrorCode.WEBHOOK_SECRET_MISSING)

        event = self.verify(payload, signature, webhook_secret)
        event_id = _event_id(event)
        event_type = event.get("type")
        if event_type is not None:
            event_type = str(event_type)

        # in-process callers without a request scope are traced by event id
        with correlation_scope(get_correlation_id() or event_id):
            log_webhook_event(logger, event_type, event_id, result="received")

            decoded = decode_event(event, domain)
            if decoded is None:
                result = WebhookResult.DROPPED
                reason = "incomplete event or foreign domain"
            elif not dispatch_event(decoded, handler):
                result = WebhookResult.IGNORED
                reason = "event type not handled"
            else:
                result = WebhookResult.DISPATCHED
                reason = None

            log_webhook_event(logger, event_type, event_id, result=result.value, reason=reason)

        return WebhookOutcome(result=result, event_type=event_type, event_id=event_id)

    def process(
        self,
        payload: bytes,
        signature: str | None,
        handler: WebhookHandlerInterface,
        webhook_secret: str | None = None,
        domain: str | None = None,
    ) -> WebhookResult:
        """Verify, decode and dispatch one webhook delivery.

        See handle; only the result is returned.
        """
        outcome = self.handle(
            payload,
            signature,
            handler,
            webhook_secret=webhook_secret,
            domain=domain,
        )
        return outcome.result
