"""Pytest configuration and fixtures for Stripe adapter tests.

This module provides reusable fixtures for testing:
- HMAC-signed Stripe webhook payloads
- A mocked Stripe client wrapped in StripeGateway
- Sample products, users and checkout contexts
- SSM Parameter Store mocking with moto
"""

import hashlib
import hmac
import json
import os
import time
from collections.abc import Callable
from typing import Any, Generator
from unittest.mock import MagicMock

import boto3
import pytest
from moto import mock_aws

from stripe_adapter.models import CheckoutContext, Product, ProductInterval, User
from stripe_adapter.services.connection import StripeGateway
from stripe_adapter.services.ssm_service import SSMParameters, get_parameters

# === Environment Setup ===

os.environ.setdefault("AWS_DEFAULT_REGION", "eu-west-1")
if not os.environ.get("AWS_PROFILE") and not os.environ.get("AWS_ACCESS_KEY_ID"):
    os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
    os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")


# === Test Configuration ===

TEST_WEBHOOK_SECRET = "whsec_test_secret_for_testing"


def create_stripe_signature(
    payload: bytes,
    secret: str = TEST_WEBHOOK_SECRET,
    timestamp: int | None = None,
) -> str:
    """Create a Stripe webhook signature.

    Stripe signatures use HMAC-SHA256 with format: t={timestamp},v1={signature}
    """
    ts = str(timestamp if timestamp is not None else int(time.time()))
    signed_payload = f"{ts}.{payload.decode('utf-8')}"
    signature = hmac.new(
        secret.encode("utf-8"),
        signed_payload.encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()
    return f"t={ts},v1={signature}"


# === Webhook Fixtures ===


@pytest.fixture
def webhook_secret() -> str:
    return TEST_WEBHOOK_SECRET


@pytest.fixture
def sign_payload() -> Callable[..., str]:
    """Return a callable signing a payload with the test webhook secret."""
    return create_stripe_signature


@pytest.fixture
def encode_event() -> Callable[[dict[str, Any]], bytes]:
    """Return a callable serializing an event to a raw request body."""

    def _encode(event: dict[str, Any]) -> bytes:
        return json.dumps(event).encode("utf-8")

    return _encode


@pytest.fixture
def webhook_handler() -> MagicMock:
    """Mock host webhook handler recording completed/paid/failed calls."""
    return MagicMock(spec=["completed", "paid", "failed"])


@pytest.fixture
def checkout_completed_event() -> dict[str, Any]:
    """Sample checkout.session.completed webhook event."""
    return {
        "id": "evt_test_checkout_completed_123",
        "type": "checkout.session.completed",
        "created": int(time.time()),
        "data": {
            "object": {
                "id": "sess_1",
                "object": "checkout.session",
                "customer": "cus_1",
                "amount_total": 500,
                "currency": "eur",
                "status": "complete",
                "payment_status": "paid",
                "metadata": {
                    "user_id": 7,
                    "product_id": 3,
                },
            }
        },
    }


@pytest.fixture
def invoice_paid_event() -> dict[str, Any]:
    """Sample invoice.paid webhook event."""
    return {
        "id": "evt_test_invoice_paid_456",
        "type": "invoice.paid",
        "created": int(time.time()),
        "data": {
            "object": {
                "id": "in_test_789",
                "object": "invoice",
                "customer": "cus_1",
                "amount_paid": 1500,
                "period_start": 1704067200,
                "period_end": 1704067200,
                "lines": {
                    "object": "list",
                    "data": [
                        {
                            "id": "il_test_1",
                            "period": {
                                "start": 1704067200,  # 2024-01-01 00:00:00 UTC
                                "end": 1706745600,  # 2024-02-01 00:00:00 UTC
                            },
                        }
                    ],
                },
            }
        },
    }


@pytest.fixture
def invoice_payment_failed_event() -> dict[str, Any]:
    """Sample invoice.payment_failed webhook event."""
    return {
        "id": "evt_test_invoice_failed_789",
        "type": "invoice.payment_failed",
        "created": int(time.time()),
        "data": {
            "object": {
                "id": "in_test_790",
                "object": "invoice",
                "customer": "cus_1",
                "amount_paid": 0,
            }
        },
    }


# === Stripe Client Fixtures ===


def make_stripe_session(
    session_id: str = "cs_test_123",
    url: str | None = "https://checkout.stripe.com/c/pay/cs_test_123",
    status: str | None = "open",
) -> MagicMock:
    """Build a mock Stripe session object."""
    session = MagicMock()
    session.id = session_id
    session.url = url
    session.status = status
    return session


@pytest.fixture
def mock_stripe_client() -> MagicMock:
    """Mock StripeClient with default checkout and portal responses."""
    client = MagicMock()
    client.checkout.sessions.create.return_value = make_stripe_session()
    client.checkout.sessions.retrieve.return_value = make_stripe_session(status="complete")
    client.billing_portal.sessions.create.return_value = make_stripe_session(
        session_id="bps_test_123",
        url="https://billing.stripe.com/p/session/bps_test_123",
        status=None,
    )
    return client


@pytest.fixture
def gateway(mock_stripe_client: MagicMock) -> StripeGateway:
    """StripeGateway over the mocked client."""
    return StripeGateway(mock_stripe_client)


# === Sample Data Fixtures ===


@pytest.fixture
def product() -> Product:
    return Product(id=3, name="Pro Plan", price=500)


@pytest.fixture
def subscription_product() -> Product:
    return Product(id=4, name="Pro Monthly", price=900, interval=ProductInterval.MONTH)


@pytest.fixture
def user() -> User:
    return User(id=7, email="user@example.com")


@pytest.fixture
def checkout_context() -> CheckoutContext:
    return CheckoutContext(
        currency="eur",
        return_url="https://example.com/success",
        cancel_url="https://example.com/cancel",
    )


# === SSM Fixtures ===


@pytest.fixture(autouse=True)
def reset_parameter_cache() -> Generator[None, None, None]:
    """Reset the SSM parameter cache and singleton around each test."""
    SSMParameters._cache.clear()
    get_parameters.cache_clear()
    yield
    SSMParameters._cache.clear()
    get_parameters.cache_clear()


@pytest.fixture
def ssm_client() -> Generator[Any, None, None]:
    """Create a mocked SSM client."""
    with mock_aws():
        client = boto3.client("ssm", region_name=os.environ["AWS_DEFAULT_REGION"])
        yield client
