"""
Stripe client configuration.

Provides a configured Stripe module for billing operations.
"""

from types import ModuleType

import stripe

from config.settings.base import settings

STRIPE_API_VERSION = "2023-10-16"

# Signup is fail-fast: one attempt per call, the caller decides what a failure means
STRIPE_MAX_NETWORK_RETRIES = 0


def is_stripe_configured() -> bool:
    return bool(settings.STRIPE_SECRET_KEY)


def configure_stripe() -> None:
    """Configure Stripe API with settings."""
    stripe.api_key = settings.STRIPE_SECRET_KEY
    stripe.api_version = STRIPE_API_VERSION
    stripe.max_network_retries = STRIPE_MAX_NETWORK_RETRIES


def get_stripe() -> ModuleType:
    """
    Get configured Stripe module.

    Ensures Stripe is configured before use.
    """
    configure_stripe()
    return stripe
