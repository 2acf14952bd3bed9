"""Host-side interfaces consumed by the adapter.

The host platform owns users, products, transactions and configuration.
The adapter only reads and updates them through these protocols.
"""

import datetime as dt
from typing import Protocol, runtime_checkable

from .enums import ProductInterval, TransactionStatus
from .payment import RemoteSession


class ProductInterface(Protocol):
    id: int
    name: str
    price: int
    interval: ProductInterval | None
    external_id: str | None


class UserInterface(Protocol):
    id: int
    email: str | None
    external_id: str | None


class TransactionInterface(Protocol):
    id: int

    def set_status(self, status: TransactionStatus) -> None: ...

    def set_remote_id(self, remote_id: str) -> None: ...


class ParametersInterface(Protocol):
    """Key-value configuration lookup (api_key, client_id, webhook_secret, ...)."""

    def get(self, key: str) -> str | None: ...


class WebhookHandlerInterface(Protocol):
    """Host callbacks invoked for reconciled webhook events.

    Stripe delivers events at least once, so implementations must be
    idempotent on session_id / invoice_id.
    """

    def completed(
        self,
        user_id: int,
        product_id: int,
        customer_id: str,
        amount_total: int,
        session_id: str,
    ) -> None: ...

    def paid(
        self,
        customer_id: str,
        amount_paid: int,
        invoice_id: str,
        period_start: dt.datetime,
        period_end: dt.datetime,
    ) -> None: ...

    def failed(self, customer_id: str) -> None: ...


@runtime_checkable
class PaymentGateway(Protocol):
    """Client able to create checkout and billing portal sessions."""

    def create_checkout_session(self, params: dict) -> RemoteSession: ...

    def retrieve_checkout_session(self, session_id: str) -> RemoteSession: ...

    def create_portal_session(self, params: dict) -> RemoteSession: ...
