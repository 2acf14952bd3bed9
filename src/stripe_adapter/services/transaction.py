"""One-shot checkout flow reconciling host transactions.

prepare() creates a checkout session for a transaction, execute() re-fetches
it after the user returns. Both store the session id on the transaction and
derive its status from the session status.
"""

from typing import Any

from ..models.enums import CheckoutMode, CheckoutSessionStatus, TransactionStatus
from ..models.errors import ErrorCode, IntegrityError, PaymentRequestError
from ..models.interfaces import (
    ParametersInterface,
    ProductInterface,
    TransactionInterface,
)
from ..models.payment import CheckoutContext, RemoteSession
from ..utils.logging import get_logger, log_payment_operation
from .connection import get_gateway
from .ssm_service import SESSION_ID
from .stripe_service import build_success_url

logger = get_logger(__name__)

_STATUS_MAP: dict[CheckoutSessionStatus, TransactionStatus] = {
    CheckoutSessionStatus.OPEN: TransactionStatus.CREATED,
    CheckoutSessionStatus.COMPLETE: TransactionStatus.APPROVED,
    CheckoutSessionStatus.EXPIRED: TransactionStatus.FAILED,
}


def map_transaction_status(status: str | None) -> TransactionStatus:
    """Map a Checkout Session status to the host transaction status.

    open -> created, complete -> approved, expired -> failed, anything
    else -> unknown.
    """
    try:
        session_status = CheckoutSessionStatus(status)
    except ValueError:
        return TransactionStatus.UNKNOWN
    return _STATUS_MAP[session_status]


def update_transaction(session: RemoteSession, transaction: TransactionInterface) -> None:
    transaction.set_status(map_transaction_status(session.status))
    transaction.set_remote_id(session.id)


class StripeTransactionProvider:
    """Prepare/execute checkout provider for one-off payments."""

    def prepare(
        self,
        connection: Any,
        product: ProductInterface,
        transaction: TransactionInterface,
        context: CheckoutContext,
    ) -> str:
        """Create a checkout session for a transaction.

        Returns:
            The checkout URL to redirect the user to.

        Raises:
            ConfigurationError: If the connection is not a Stripe client.
            IntegrityError: If Stripe returns no checkout URL.
        """
        gateway = get_gateway(connection)

        session = gateway.create_checkout_session(
            {
                "line_items": [
                    {
                        "price_data": {
                            "currency": context.currency,
                            "product_data": {"name": product.name},
                            "unit_amount": product.price,
                        },
                        "quantity": 1,
                    }
                ],
                "mode": CheckoutMode.PAYMENT.value,
                "client_reference_id": str(transaction.id),
                "success_url": build_success_url(context.return_url),
                "cancel_url": context.cancel_url,
            }
        )

        update_transaction(session, transaction)

        log_payment_operation(
            logger,
            "prepare",
            session_id=session.id,
            product_id=product.id,
            amount=product.price,
            status=session.status,
            transaction_id=transaction.id,
        )

        if not session.url:
            raise IntegrityError(
                ErrorCode.MISSING_REDIRECT_URL,
                details={"session_id": session.id},
            )
        return session.url

    def execute(
        self,
        connection: Any,
        product: ProductInterface,
        transaction: TransactionInterface,
        parameters: ParametersInterface,
    ) -> None:
        """Re-fetch the checkout session and update the transaction.

        Raises:
            PaymentRequestError: If the session_id parameter is missing.
        """
        gateway = get_gateway(connection)

        session_id = parameters.get(SESSION_ID)
        if not session_id:
            raise PaymentRequestError(ErrorCode.MISSING_SESSION_ID)

        session = gateway.retrieve_checkout_session(session_id)

        update_transaction(session, transaction)

        log_payment_operation(
            logger,
            "execute",
            session_id=session.id,
            product_id=product.id,
            status=session.status,
            transaction_id=transaction.id,
        )
