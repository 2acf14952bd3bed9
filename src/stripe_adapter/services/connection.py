"""Stripe connection factory and gateway adapter.

StripeConnection builds a client from stored credentials. The client is
wrapped in StripeGateway, the PaymentGateway implementation the payment
providers talk to.
"""

import logging
from typing import Any

import stripe
from stripe import StripeClient

from .._version import __version__
from ..models.errors import ConfigurationError, ErrorCode, ProviderAPIError
from ..models.interfaces import ParametersInterface, PaymentGateway
from ..models.payment import RemoteSession
from .ssm_service import API_KEY, CLIENT_ID

logger = logging.getLogger(__name__)

APP_NAME = "stripe-adapter"


class StripeGateway:
    """PaymentGateway backed by the Stripe StripeClient."""

    def __init__(self, client: StripeClient) -> None:
        self._client = client

    @property
    def client(self) -> StripeClient:
        return self._client

    def create_checkout_session(self, params: dict) -> RemoteSession:
        try:
            session = self._client.checkout.sessions.create(params=params)
        except stripe.StripeError as e:
            raise _api_error("create checkout session", e) from e
        return _to_remote_session(session)

    def retrieve_checkout_session(self, session_id: str) -> RemoteSession:
        try:
            session = self._client.checkout.sessions.retrieve(session_id)
        except stripe.StripeError as e:
            raise _api_error("retrieve checkout session", e) from e
        return _to_remote_session(session)

    def create_portal_session(self, params: dict) -> RemoteSession:
        try:
            session = self._client.billing_portal.sessions.create(params=params)
        except stripe.StripeError as e:
            raise _api_error("create billing portal session", e) from e
        return _to_remote_session(session)


def _to_remote_session(session: Any) -> RemoteSession:
    return RemoteSession(
        id=session.id,
        url=getattr(session, "url", None),
        status=getattr(session, "status", None),
    )


def _api_error(operation: str, error: stripe.StripeError) -> ProviderAPIError:
    error_code = getattr(error, "code", None)
    logger.error(
        "Stripe %s failed: %s (code: %s)",
        operation,
        str(error),
        error_code,
    )
    return ProviderAPIError(
        details={"operation": operation},
        stripe_error_code=error_code,
    )


def get_gateway(connection: Any) -> PaymentGateway:
    """Resolve a connection handle to a PaymentGateway.

    Accepts any PaymentGateway, or a bare StripeClient which gets wrapped.

    Raises:
        ConfigurationError: If the connection is neither.
    """
    if isinstance(connection, PaymentGateway):
        return connection
    if isinstance(connection, StripeClient):
        return StripeGateway(connection)
    raise ConfigurationError(
        ErrorCode.INVALID_CONNECTION,
        details={"connection_type": type(connection).__name__},
    )


class StripeConnection:
    """Connection factory turning stored credentials into a StripeGateway."""

    def get_name(self) -> str:
        return "Stripe"

    def get_connection(self, config: ParametersInterface) -> StripeGateway:
        """Build a Stripe client from configuration.

        Args:
            config: Parameters providing api_key and optionally client_id.
                An empty api_key is allowed for sandbox setups.

        Returns:
            StripeGateway wrapping a fresh StripeClient.
        """
        stripe.set_app_info(APP_NAME, version=__version__)

        options: dict[str, Any] = {}
        client_id = config.get(CLIENT_ID)
        if client_id:
            options["client_id"] = client_id

        client = StripeClient(config.get(API_KEY) or "", **options)
        logger.info("Stripe client initialized (client_id set: %s)", bool(client_id))
        return StripeGateway(client)
