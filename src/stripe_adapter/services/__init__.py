"""Stripe connection, payment provider and webhook services."""

from .connection import StripeConnection, StripeGateway, get_gateway
from .ssm_service import Parameters, SSMParameters, get_parameters
from .stripe_service import StripePaymentProvider
from .transaction import StripeTransactionProvider, map_transaction_status
from .webhook_handler import WebhookProcessor, decode_event

__all__ = [
    "Parameters",
    "SSMParameters",
    "StripeConnection",
    "StripeGateway",
    "StripePaymentProvider",
    "StripeTransactionProvider",
    "WebhookProcessor",
    "decode_event",
    "get_gateway",
    "get_parameters",
    "map_transaction_status",
]
