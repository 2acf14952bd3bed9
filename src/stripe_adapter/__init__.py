"""Stripe adapter for a host API-management platform.

Provides:
- A connection factory building a Stripe client from stored credentials
- A payment provider for checkout sessions, billing portal and webhooks
- The prepare/execute checkout flow reconciling host transactions
"""

from ._version import __version__
from .services.connection import StripeConnection, StripeGateway
from .services.stripe_service import StripePaymentProvider
from .services.transaction import StripeTransactionProvider, map_transaction_status
from .services.webhook_handler import WebhookProcessor

__all__ = [
    "__version__",
    "StripeConnection",
    "StripeGateway",
    "StripePaymentProvider",
    "StripeTransactionProvider",
    "WebhookProcessor",
    "map_transaction_status",
]
