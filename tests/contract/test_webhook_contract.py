"""Contract tests for POST /webhooks/stripe.

Test categories:
- Signature validation (403)
- Missing webhook secret (500)
- Event dispatch, drop and ignore (200)
- Correlation ID propagation
"""

from typing import Any
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from starlette.status import (
    HTTP_200_OK,
    HTTP_403_FORBIDDEN,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

from stripe_adapter.api import create_app
from stripe_adapter.services.ssm_service import Parameters

WEBHOOK_PATH = "/webhooks/stripe"


@pytest.fixture
def client(webhook_handler: MagicMock, webhook_secret: str) -> TestClient:
    app = create_app(
        webhook_handler=webhook_handler,
        parameters=Parameters({"webhook_secret": webhook_secret, "domain": "shop.example.com"}),
    )
    return TestClient(app)


def _post(client: TestClient, payload: bytes, signature: str | None) -> Any:
    headers = {"Content-Type": "application/json"}
    if signature is not None:
        headers["Stripe-Signature"] = signature
    return client.post(WEBHOOK_PATH, content=payload, headers=headers)


class TestSignatureValidation:
    def test_invalid_signature_returns_403(
        self, client, webhook_handler, checkout_completed_event, encode_event, sign_payload
    ):
        payload = encode_event(checkout_completed_event)

        response = _post(client, payload, sign_payload(payload, secret="whsec_wrong"))

        assert response.status_code == HTTP_403_FORBIDDEN
        body = response.json()
        assert body["success"] is False
        assert body["error_code"] == "ERR_AUTH_001"
        webhook_handler.completed.assert_not_called()

    def test_missing_signature_returns_403(self, client, checkout_completed_event, encode_event):
        response = _post(client, encode_event(checkout_completed_event), None)

        assert response.status_code == HTTP_403_FORBIDDEN


class TestMissingSecret:
    def test_missing_secret_returns_500(
        self, webhook_handler, checkout_completed_event, encode_event, sign_payload
    ):
        client = TestClient(create_app(webhook_handler=webhook_handler, parameters=Parameters()))
        payload = encode_event(checkout_completed_event)

        response = _post(client, payload, sign_payload(payload))

        assert response.status_code == HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json()["error_code"] == "ERR_CONFIG_001"
        webhook_handler.completed.assert_not_called()


class TestEventProcessing:
    def test_checkout_completed_dispatched(
        self, client, webhook_handler, checkout_completed_event, encode_event, sign_payload
    ):
        payload = encode_event(checkout_completed_event)

        response = _post(client, payload, sign_payload(payload))

        assert response.status_code == HTTP_200_OK
        assert response.json() == {
            "received": True,
            "event_type": "checkout.session.completed",
            "result": "dispatched",
        }
        webhook_handler.completed.assert_called_once_with(7, 3, "cus_1", 500, "sess_1")

    def test_foreign_domain_dropped(
        self, client, webhook_handler, checkout_completed_event, encode_event, sign_payload
    ):
        checkout_completed_event["data"]["object"]["metadata"]["domain"] = "other.example.com"
        payload = encode_event(checkout_completed_event)

        response = _post(client, payload, sign_payload(payload))

        assert response.status_code == HTTP_200_OK
        assert response.json()["result"] == "dropped"
        webhook_handler.completed.assert_not_called()

    def test_unhandled_event_ignored(self, client, webhook_handler, encode_event, sign_payload):
        payload = encode_event({"id": "evt_1", "type": "customer.updated", "data": {"object": {}}})

        response = _post(client, payload, sign_payload(payload))

        assert response.status_code == HTTP_200_OK
        assert response.json()["event_type"] == "customer.updated"
        assert response.json()["result"] == "ignored"
        assert webhook_handler.mock_calls == []

    def test_invoice_payment_failed_dispatched(
        self, client, webhook_handler, invoice_payment_failed_event, encode_event, sign_payload
    ):
        payload = encode_event(invoice_payment_failed_event)

        response = _post(client, payload, sign_payload(payload))

        assert response.status_code == HTTP_200_OK
        webhook_handler.failed.assert_called_once_with("cus_1")


class TestCorrelationId:
    def test_echoes_correlation_id(self, client):
        response = client.get("/ping", headers={"X-Correlation-ID": "req-abc"})

        assert response.status_code == HTTP_200_OK
        assert response.headers["X-Correlation-ID"] == "req-abc"
        assert response.json()["status"] == "ok"
