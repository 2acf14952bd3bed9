"""Stripe webhook endpoint.

These endpoints do NOT require authentication as they receive signed
payloads from Stripe. Responses:
- 200: event verified (dispatched, dropped or ignored)
- 403: signature verification failed
- 500: no webhook secret configured
"""

from fastapi import APIRouter, Request
from pydantic import BaseModel
from starlette.concurrency import run_in_threadpool

from ...models.enums import WebhookResult
from ...models.errors import ErrorResponse
from ...services.ssm_service import DOMAIN, WEBHOOK_SECRET

router = APIRouter(tags=["webhooks"])

SIGNATURE_HEADER = "Stripe-Signature"


class WebhookResponse(BaseModel):
    """Standard webhook response."""

    received: bool
    event_type: str | None = None
    result: WebhookResult


@router.post(
    "/webhooks/stripe",
    summary="Receive Stripe webhook events",
    description="""
Endpoint for Stripe webhook events. Handles:
- checkout.session.completed: calls the handler's `completed` callback
- invoice.paid: calls the handler's `paid` callback
- invoice.payment_failed: calls the handler's `failed` callback

Other event types are acknowledged and ignored. Deliveries are not
deduplicated.
""",
    response_model=WebhookResponse,
    responses={
        403: {"description": "Invalid signature", "model": ErrorResponse},
        500: {"description": "Webhook secret not configured", "model": ErrorResponse},
    },
)
async def handle_stripe_webhook(request: Request) -> WebhookResponse:
    """Verify the delivery and dispatch it to the configured handler."""
    state = request.app.state
    signature = request.headers.get(SIGNATURE_HEADER)
    payload = await request.body()

    webhook_secret = await run_in_threadpool(state.parameters.get, WEBHOOK_SECRET)
    domain = await run_in_threadpool(state.parameters.get, DOMAIN)

    outcome = await run_in_threadpool(
        state.processor.handle,
        payload,
        signature,
        state.webhook_handler,
        webhook_secret=webhook_secret,
        domain=domain,
    )

    return WebhookResponse(
        received=True,
        event_type=outcome.event_type,
        result=outcome.result,
    )
