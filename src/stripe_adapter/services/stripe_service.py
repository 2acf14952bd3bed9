"""Stripe payment provider for checkout sessions, billing portal and webhooks.

Usage:
    provider = StripePaymentProvider()
    url = provider.checkout(
        connection,
        product=Product(id=3, name="Pro", price=500),
        user=User(id=7, email="user@example.com"),
        context=CheckoutContext(
            currency="eur",
            return_url="https://example.com/success",
            cancel_url="https://example.com/cancel",
        ),
    )
"""

from typing import Any

from ..models.enums import CheckoutMode, ProductInterval, WebhookResult
from ..models.errors import ErrorCode, IntegrityError
from ..models.interfaces import (
    ProductInterface,
    UserInterface,
    WebhookHandlerInterface,
)
from ..models.payment import CheckoutContext
from ..utils.logging import get_logger, log_payment_operation
from .connection import get_gateway
from .webhook_handler import WebhookProcessor

logger = get_logger(__name__)

SESSION_ID_PLACEHOLDER = "{CHECKOUT_SESSION_ID}"


def build_success_url(return_url: str) -> str:
    """Append the session id placeholder to the return URL."""
    separator = "&" if "?" in return_url else "?"
    return f"{return_url}{separator}session_id={SESSION_ID_PLACEHOLDER}"


def build_line_item(product: ProductInterface, currency: str) -> dict[str, Any]:
    """Build the single checkout line item for a product.

    A product linked to a Stripe Price is charged by reference, otherwise
    price data is sent inline.
    """
    if product.external_id:
        item: dict[str, Any] = {"price": product.external_id}
    else:
        price_data: dict[str, Any] = {
            "currency": currency,
            "product_data": {"name": product.name},
            "unit_amount": product.price,
        }
        if product.interval:
            price_data["recurring"] = {"interval": ProductInterval(product.interval).value}
        item = {"price_data": price_data}

    item["quantity"] = 1
    return item


def build_checkout_params(
    product: ProductInterface,
    user: UserInterface,
    context: CheckoutContext,
) -> dict[str, Any]:
    """Build Checkout Session create parameters."""
    mode = CheckoutMode.SUBSCRIPTION if product.interval else CheckoutMode.PAYMENT

    metadata = {
        "user_id": str(user.id),
        "product_id": str(product.id),
    }
    if context.domain:
        metadata["domain"] = context.domain

    params: dict[str, Any] = {
        "line_items": [build_line_item(product, context.currency)],
        "mode": mode.value,
        "client_reference_id": str(user.id),
        "success_url": build_success_url(context.return_url),
        "cancel_url": context.cancel_url,
        "metadata": metadata,
    }

    if user.external_id:
        params["customer"] = user.external_id
    elif user.email:
        params["customer_email"] = user.email

    return params


class StripePaymentProvider:
    """Payment provider for Stripe Checkout, billing portal and webhooks.

    Handles:
    - Checkout session creation (one-off payments and subscriptions)
    - Billing portal redirection for known customers
    - Webhook verification and dispatch to the host handler
    """

    def __init__(self, processor: WebhookProcessor | None = None) -> None:
        self._processor = processor or WebhookProcessor()

    def checkout(
        self,
        connection: Any,
        product: ProductInterface,
        user: UserInterface,
        context: CheckoutContext,
    ) -> str:
        """Create a Stripe Checkout session.

        Args:
            connection: Connection handle resolving to a PaymentGateway.
            product: Product to sell.
            user: Buying user.
            context: Currency, redirect URLs and tenant domain.

        Returns:
            The checkout URL to redirect the user to.

        Raises:
            ConfigurationError: If the connection is not a Stripe client.
            IntegrityError: If Stripe returns no checkout URL.
            ProviderAPIError: If the Stripe API call fails.
        """
        gateway = get_gateway(connection)
        params = build_checkout_params(product, user, context)

        session = gateway.create_checkout_session(params)

        log_payment_operation(
            logger,
            "checkout",
            session_id=session.id,
            user_id=user.id,
            product_id=product.id,
            amount=product.price,
            mode=params["mode"],
        )

        if not session.url:
            raise IntegrityError(
                ErrorCode.MISSING_REDIRECT_URL,
                details={"session_id": session.id},
            )
        return session.url

    def portal(
        self,
        connection: Any,
        user: UserInterface,
        return_url: str,
        configuration_id: str | None = None,
    ) -> str | None:
        """Create a billing portal session for a known Stripe customer.

        Returns:
            The portal URL, or None if the user has no Stripe customer.
        """
        gateway = get_gateway(connection)

        if not user.external_id:
            logger.info("User %s has no Stripe customer, no billing portal", user.id)
            return None

        params: dict[str, Any] = {
            "customer": user.external_id,
            "return_url": return_url,
        }
        if configuration_id:
            params["configuration"] = configuration_id

        session = gateway.create_portal_session(params)

        log_payment_operation(logger, "portal", session_id=session.id, user_id=user.id)

        if not session.url:
            raise IntegrityError(
                ErrorCode.MISSING_REDIRECT_URL,
                details={"session_id": session.id},
            )
        return session.url

    def webhook(
        self,
        payload: bytes,
        signature: str | None,
        handler: WebhookHandlerInterface,
        webhook_secret: str | None = None,
        domain: str | None = None,
    ) -> WebhookResult:
        """Verify a webhook delivery and dispatch it to the handler.

        See WebhookProcessor.process.
        """
        return self._processor.process(
            payload,
            signature,
            handler,
            webhook_secret=webhook_secret,
            domain=domain,
        )
