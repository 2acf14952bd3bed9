"""FastAPI exception handlers converting adapter errors to HTTP responses.

The ErrorCode-to-HTTP status mapping:
- 400 Bad Request: incomplete caller request
- 403 Forbidden: webhook signature verification failed
- 500 Internal Server Error: misconfiguration or inconsistent Stripe response
- 502 Bad Gateway: Stripe API failure

Usage:
    from stripe_adapter.api.exceptions import register_exception_handlers
    register_exception_handlers(app)
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_403_FORBIDDEN,
    HTTP_500_INTERNAL_SERVER_ERROR,
    HTTP_502_BAD_GATEWAY,
)

from ..models.errors import ErrorCode, PaymentProviderError

logger = logging.getLogger(__name__)

ERROR_CODE_TO_HTTP_STATUS: dict[ErrorCode, int] = {
    # Configuration errors -> 500
    ErrorCode.WEBHOOK_SECRET_MISSING: HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorCode.INVALID_CONNECTION: HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorCode.PARAMETER_STORE_ERROR: HTTP_500_INTERNAL_SERVER_ERROR,
    # Signature failures -> 403
    ErrorCode.INVALID_WEBHOOK_SIGNATURE: HTTP_403_FORBIDDEN,
    # Integrity errors -> 500
    ErrorCode.MISSING_REDIRECT_URL: HTTP_500_INTERNAL_SERVER_ERROR,
    # Request errors -> 400
    ErrorCode.MISSING_SESSION_ID: HTTP_400_BAD_REQUEST,
    # Upstream failures -> 502
    ErrorCode.STRIPE_API_ERROR: HTTP_502_BAD_GATEWAY,
}


def get_http_status_for_error(code: ErrorCode) -> int:
    """Get HTTP status code for an ErrorCode, defaulting to 500."""
    return ERROR_CODE_TO_HTTP_STATUS.get(code, HTTP_500_INTERNAL_SERVER_ERROR)


async def payment_provider_error_handler(
    request: Request, exc: PaymentProviderError
) -> JSONResponse:
    """Handle PaymentProviderError exceptions and convert to JSON response."""
    status_code = get_http_status_for_error(exc.code)
    if status_code >= HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)

    return JSONResponse(
        status_code=status_code,
        content=exc.to_error_response().model_dump(mode="json"),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Fallback for uncaught exceptions; internal details are not exposed."""
    logger.exception("Unhandled exception: %s", exc)

    return JSONResponse(
        status_code=HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "success": False,
            "message": "An unexpected error occurred",
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PaymentProviderError, payment_provider_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, generic_exception_handler)
