"""Error codes and exceptions for the Stripe adapter.

Every failure surfaced to the host is a PaymentProviderError subclass
carrying an ErrorCode. The host (or the bundled webhook API) maps the
code to an HTTP status.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class ErrorCode(str, Enum):
    """Standard error codes for adapter failures."""

    # Configuration errors (ERR_CONFIG_001-ERR_CONFIG_003)
    WEBHOOK_SECRET_MISSING = "ERR_CONFIG_001"
    INVALID_CONNECTION = "ERR_CONFIG_002"
    PARAMETER_STORE_ERROR = "ERR_CONFIG_003"

    # Authentication errors
    INVALID_WEBHOOK_SIGNATURE = "ERR_AUTH_001"

    # Integrity errors
    MISSING_REDIRECT_URL = "ERR_INTEGRITY_001"

    # Request errors
    MISSING_SESSION_ID = "ERR_REQUEST_001"

    # Stripe API errors
    STRIPE_API_ERROR = "ERR_STRIPE_001"


ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.WEBHOOK_SECRET_MISSING: "No webhook secret was configured",
    ErrorCode.INVALID_CONNECTION: "Connection must return a Stripe client",
    ErrorCode.PARAMETER_STORE_ERROR: "Failed to read adapter configuration",
    ErrorCode.INVALID_WEBHOOK_SIGNATURE: "Invalid webhook signature",
    ErrorCode.MISSING_REDIRECT_URL: "Stripe response did not contain a redirect URL",
    ErrorCode.MISSING_SESSION_ID: "No checkout session id was provided",
    ErrorCode.STRIPE_API_ERROR: "Stripe API error occurred",
}


class ErrorResponse(BaseModel):
    """JSON error body returned by the webhook API."""

    model_config = ConfigDict(strict=True)

    success: bool = False
    error_code: ErrorCode
    message: str
    details: Optional[dict[str, str]] = None


class PaymentProviderError(Exception):
    """Base exception for adapter failures."""

    code: ErrorCode = ErrorCode.STRIPE_API_ERROR

    def __init__(
        self,
        code: Optional[ErrorCode] = None,
        details: Optional[dict[str, str]] = None,
    ):
        if code is not None:
            self.code = code
        self.message = ERROR_MESSAGES[self.code]
        self.details = details
        super().__init__(self.message)

    def to_error_response(self) -> ErrorResponse:
        """Convert this exception to an ErrorResponse body."""
        return ErrorResponse(
            error_code=self.code,
            message=self.message,
            details=self.details,
        )


class ConfigurationError(PaymentProviderError):
    """Missing or invalid adapter setup (secret, connection, parameters)."""

    code = ErrorCode.INVALID_CONNECTION


class AuthenticationError(PaymentProviderError):
    """Webhook signature or payload verification failed."""

    code = ErrorCode.INVALID_WEBHOOK_SIGNATURE


class IntegrityError(PaymentProviderError):
    """Stripe response is missing an expected field."""

    code = ErrorCode.MISSING_REDIRECT_URL


class PaymentRequestError(PaymentProviderError):
    """Caller supplied an incomplete request."""

    code = ErrorCode.MISSING_SESSION_ID


class ProviderAPIError(PaymentProviderError):
    """A Stripe API call failed."""

    code = ErrorCode.STRIPE_API_ERROR

    def __init__(
        self,
        details: Optional[dict[str, str]] = None,
        stripe_error_code: Optional[str] = None,
    ):
        super().__init__(ErrorCode.STRIPE_API_ERROR, details)
        self.stripe_error_code = stripe_error_code
