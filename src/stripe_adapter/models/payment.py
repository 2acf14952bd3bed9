"""Payment models for products, users, checkout contexts and transactions.

Amounts are integer minor currency units (cents) and are sent to Stripe
unchanged.
"""

from pydantic import BaseModel, ConfigDict, Field

from .enums import ProductInterval, TransactionStatus


class Product(BaseModel):
    """A purchasable product of the host platform."""

    model_config = ConfigDict(strict=True, frozen=True)

    id: int = Field(..., description="Host product ID")
    name: str = Field(..., description="Product name shown on the checkout page")
    price: int = Field(..., ge=0, description="Price in minor currency units")
    interval: ProductInterval | None = Field(
        default=None,
        description="Billing interval; set for subscription products",
    )
    external_id: str | None = Field(
        default=None,
        description="Stripe Price ID (price_xxx) to charge by reference",
        examples=["price_1ABC123DEF456"],
    )


class User(BaseModel):
    """A host platform user."""

    model_config = ConfigDict(strict=True, frozen=True)

    id: int = Field(..., description="Host user ID")
    email: str | None = Field(default=None, description="User email address")
    external_id: str | None = Field(
        default=None,
        description="Stripe Customer ID (cus_xxx)",
        examples=["cus_1ABC123DEF456"],
    )


class CheckoutContext(BaseModel):
    """Request-specific data for building a checkout session."""

    model_config = ConfigDict(strict=True, frozen=True)

    currency: str = Field(..., description="ISO currency code", examples=["eur"])
    return_url: str = Field(..., description="URL to redirect to after payment")
    cancel_url: str = Field(..., description="URL to redirect to on cancel")
    domain: str | None = Field(
        default=None,
        description="Tenant tag stored in session metadata",
    )


class Transaction(BaseModel):
    """A host transaction reconciled against a checkout session."""

    model_config = ConfigDict(strict=True)

    id: int = Field(..., description="Host transaction ID")
    status: TransactionStatus = Field(default=TransactionStatus.UNKNOWN)
    remote_id: str | None = Field(
        default=None,
        description="Stripe Checkout Session ID (cs_xxx)",
    )

    def set_status(self, status: TransactionStatus) -> None:
        self.status = status

    def set_remote_id(self, remote_id: str) -> None:
        self.remote_id = remote_id


class RemoteSession(BaseModel):
    """Normalized view of a Stripe checkout or billing portal session."""

    model_config = ConfigDict(strict=True, frozen=True)

    id: str
    url: str | None = None
    status: str | None = None
