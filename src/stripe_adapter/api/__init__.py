"""HTTP surface for Stripe webhooks."""

from .main import create_app

__all__ = ["create_app"]
