"""
Billing services - Stripe customers and subscription status mapping.

All Stripe API calls are isolated here for testability.
External calls must NOT be inside database transactions.
"""

from typing import Any, Protocol

import stripe

from apps.billing.stripe_client import get_stripe, is_stripe_configured
from apps.core.logging import get_logger
from apps.events.services import record_audit_log
from apps.organizations.models import Organization
from config.settings.base import settings

logger = get_logger(__name__)

Status = Organization.SubscriptionStatus
Tier = Organization.SubscriptionTier

# Stripe subscription status -> organization subscription status
_STATUS_MAP: dict[str, str] = {
    "active": Status.ACTIVE,
    "trialing": Status.TRIALING,
    "past_due": Status.PAST_DUE,
    "canceled": Status.CANCELED,
    "unpaid": Status.CANCELED,
}


class BillingProviderError(Exception):
    """The billing provider is unconfigured or rejected a request."""


class BillingProvider(Protocol):
    def create_customer(self, email: str, name: str, metadata: dict[str, str]) -> str:
        """Create a billing customer and return its id."""
        ...


class StripeBillingProvider:
    """Creates Stripe customers for new organizations."""

    def create_customer(self, email: str, name: str, metadata: dict[str, str]) -> str:
        if not is_stripe_configured():
            raise BillingProviderError("Stripe is not configured")

        stripe_module = get_stripe()
        try:
            customer = stripe_module.Customer.create(email=email, name=name, metadata=metadata)
        except stripe.StripeError as e:
            logger.warning("stripe_create_customer_failed", email=email, error=str(e))
            raise BillingProviderError(str(e)) from e

        logger.info("stripe_customer_created", customer_id=customer.id, **metadata)
        return customer.id


def get_billing_provider() -> BillingProvider:
    """Default billing provider for request handlers."""
    return StripeBillingProvider()


def map_subscription_status(stripe_status: str) -> str:
    """Map a Stripe subscription status onto the organization's status."""
    return _STATUS_MAP.get(stripe_status, Status.INACTIVE)


def resolve_subscription_tier(price_id: str | None) -> str:
    """
    Map the subscription's price onto a tier.

    Any paid price other than the configured monthly/yearly ones is 'pro'.
    """
    if price_id and price_id == settings.STRIPE_MONTHLY_PRICE_ID:
        return Tier.MONTHLY
    if price_id and price_id == settings.STRIPE_YEARLY_PRICE_ID:
        return Tier.YEARLY
    return Tier.PRO


def _first_price_id(subscription: dict[str, Any]) -> str | None:
    items = (subscription.get("items") or {}).get("data") or []
    if not items:
        return None
    return (items[0].get("price") or {}).get("id")


def get_organization_for_customer(customer_id: str) -> Organization | None:
    org = Organization.objects.filter(stripe_customer_id=customer_id).first()
    if org is None:
        logger.warning("stripe_customer_organization_not_found", customer_id=customer_id)
    return org


def handle_subscription_changed(subscription: dict[str, Any]) -> Organization | None:
    """
    Apply a created/updated Stripe subscription to its organization.

    Returns the updated organization, or None if the customer is unknown.
    """
    org = get_organization_for_customer(subscription["customer"])
    if org is None:
        return None

    org.stripe_subscription_id = subscription["id"]
    org.subscription_status = map_subscription_status(subscription.get("status", ""))
    org.subscription_tier = resolve_subscription_tier(_first_price_id(subscription))
    org.save(
        update_fields=[
            "stripe_subscription_id",
            "subscription_status",
            "subscription_tier",
            "updated_at",
        ]
    )

    logger.info(
        "organization_subscription_updated",
        organization_id=org.id,
        status=org.subscription_status,
        tier=org.subscription_tier,
    )
    return org


def handle_subscription_deleted(subscription: dict[str, Any]) -> Organization | None:
    """Drop the organization back to the canceled free tier."""
    org = get_organization_for_customer(subscription["customer"])
    if org is None:
        return None

    org.stripe_subscription_id = ""
    org.subscription_status = Status.CANCELED
    org.subscription_tier = Tier.FREE
    org.save(
        update_fields=[
            "stripe_subscription_id",
            "subscription_status",
            "subscription_tier",
            "updated_at",
        ]
    )

    logger.info("organization_subscription_canceled", organization_id=org.id)
    return org


def handle_invoice_payment_failed(invoice: dict[str, Any]) -> None:
    org = get_organization_for_customer(invoice["customer"])
    if org is None:
        return

    record_audit_log(
        organization_id=org.id,
        actor=None,
        action="PAYMENT_FAILED",
        entity_type="ORGANIZATION",
        entity_id=org.id,
        details={
            "invoice_id": invoice["id"],
            "amount_due": invoice.get("amount_due"),
            "attempt_count": invoice.get("attempt_count"),
        },
    )
    logger.warning("stripe_invoice_payment_failed", organization_id=org.id, invoice_id=invoice["id"])


def handle_invoice_payment_succeeded(invoice: dict[str, Any]) -> None:
    org = get_organization_for_customer(invoice["customer"])
    if org is None:
        return

    record_audit_log(
        organization_id=org.id,
        actor=None,
        action="PAYMENT_SUCCEEDED",
        entity_type="ORGANIZATION",
        entity_id=org.id,
        details={
            "invoice_id": invoice["id"],
            "amount_paid": invoice.get("amount_paid"),
        },
    )
    logger.info("stripe_invoice_paid", organization_id=org.id, invoice_id=invoice["id"])
