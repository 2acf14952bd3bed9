"""FastAPI application receiving Stripe webhooks for a host platform.

The host supplies the WebhookHandlerInterface implementation and,
optionally, a parameter source. Without one, configuration is read from
SSM Parameter Store.

Usage:
    app = create_app(webhook_handler=MyHandler())
"""

import logging
from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI

from .._version import __version__
from ..models.interfaces import ParametersInterface, WebhookHandlerInterface
from ..services.ssm_service import get_parameters
from ..services.webhook_handler import WebhookProcessor
from ..utils.logging import configure_logging
from .exceptions import register_exception_handlers
from .middleware.correlation import CorrelationIdMiddleware
from .routes.webhooks import router as webhooks_router

logger = logging.getLogger(__name__)


def create_app(
    webhook_handler: WebhookHandlerInterface,
    parameters: ParametersInterface | None = None,
    processor: WebhookProcessor | None = None,
    log_level: int = logging.INFO,
) -> FastAPI:
    """Build the webhook API.

    Args:
        webhook_handler: Host callbacks for reconciled events.
        parameters: Source of webhook_secret and domain. Defaults to SSM.
        processor: Webhook processor, mainly for tests.
        log_level: Level of the adapter loggers.

    Returns:
        Configured FastAPI application.
    """
    configure_logging(log_level)

    app = FastAPI(
        title="Stripe Adapter API",
        description="Stripe webhook ingestion",
        version=__version__,
    )

    app.state.webhook_handler = webhook_handler
    app.state.parameters = parameters if parameters is not None else get_parameters()
    app.state.processor = processor or WebhookProcessor()

    app.add_middleware(CorrelationIdMiddleware)
    register_exception_handlers(app)
    app.include_router(webhooks_router)

    @app.get("/ping")
    async def ping() -> dict[str, Any]:
        """Health check endpoint."""
        return {
            "status": "ok",
            "timestamp": datetime.now(UTC).isoformat(),
            "service": "stripe-adapter",
        }

    logger.info("Stripe adapter API created")
    return app
