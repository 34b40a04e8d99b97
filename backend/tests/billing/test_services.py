"""
Tests for billing services.

All Stripe API calls are mocked to isolate tests from external dependencies.
"""

from unittest.mock import MagicMock, patch

import pytest
import stripe

from apps.billing.services import (
    BillingProviderError,
    StripeBillingProvider,
    handle_invoice_payment_failed,
    handle_invoice_payment_succeeded,
    handle_subscription_changed,
    handle_subscription_deleted,
    map_subscription_status,
    resolve_subscription_tier,
)
from apps.events.models import AuditLog
from apps.organizations.models import Organization
from tests.accounts.factories import OrganizationFactory


def build_subscription(customer: str = "cus_123", status: str = "active", price_id: str | None = None) -> dict:
    items = [{"price": {"id": price_id}}] if price_id else []
    return {"id": "sub_123", "customer": customer, "status": status, "items": {"data": items}}


class TestStripeBillingProvider:
    """Tests for StripeBillingProvider.create_customer."""

    @patch("apps.billing.services.is_stripe_configured", return_value=True)
    @patch("apps.billing.services.get_stripe")
    def test_creates_customer(self, mock_get_stripe: MagicMock, _configured: MagicMock) -> None:
        mock_stripe = MagicMock()
        mock_get_stripe.return_value = mock_stripe
        mock_stripe.Customer.create.return_value = MagicMock(id="cus_new_123")

        customer_id = StripeBillingProvider().create_customer(
            email="jane@acme.com", name="Acme Corp", metadata={"organization_id": "1"}
        )

        assert customer_id == "cus_new_123"
        mock_stripe.Customer.create.assert_called_once_with(
            email="jane@acme.com", name="Acme Corp", metadata={"organization_id": "1"}
        )

    @patch("apps.billing.services.is_stripe_configured", return_value=False)
    @patch("apps.billing.services.get_stripe")
    def test_not_configured(self, mock_get_stripe: MagicMock, _configured: MagicMock) -> None:
        """Without a secret key there is no Stripe call at all."""
        with pytest.raises(BillingProviderError, match="not configured"):
            StripeBillingProvider().create_customer(email="jane@acme.com", name="Acme", metadata={})

        mock_get_stripe.assert_not_called()

    @patch("apps.billing.services.is_stripe_configured", return_value=True)
    @patch("apps.billing.services.get_stripe")
    def test_wraps_stripe_error(self, mock_get_stripe: MagicMock, _configured: MagicMock) -> None:
        mock_stripe = MagicMock()
        mock_get_stripe.return_value = mock_stripe
        mock_stripe.Customer.create.side_effect = stripe.StripeError("card network down")

        with pytest.raises(BillingProviderError) as exc_info:
            StripeBillingProvider().create_customer(email="jane@acme.com", name="Acme", metadata={})

        assert isinstance(exc_info.value.__cause__, stripe.StripeError)


class TestStatusMapping:
    """Tests for Stripe status and price mapping."""

    @pytest.mark.parametrize(
        "stripe_status,expected",
        [
            ("active", "active"),
            ("trialing", "trialing"),
            ("past_due", "past_due"),
            ("canceled", "canceled"),
            ("unpaid", "canceled"),
            ("incomplete", "inactive"),
            ("incomplete_expired", "inactive"),
            ("paused", "inactive"),
            ("", "inactive"),
        ],
    )
    def test_map_subscription_status(self, stripe_status: str, expected: str) -> None:
        assert map_subscription_status(stripe_status) == expected

    @pytest.mark.parametrize(
        "price_id,expected",
        [
            ("price_monthly_test", "monthly"),
            ("price_yearly_test", "yearly"),
            ("price_enterprise", "pro"),
            (None, "pro"),
        ],
    )
    def test_resolve_subscription_tier(self, price_id: str | None, expected: str) -> None:
        assert resolve_subscription_tier(price_id) == expected


@pytest.mark.django_db
class TestSubscriptionHandlers:
    """Tests for subscription webhook handlers."""

    def test_subscription_changed_updates_organization(self) -> None:
        org = OrganizationFactory.create(stripe_customer_id="cus_123")

        handle_subscription_changed(build_subscription(price_id="price_yearly_test"))

        org.refresh_from_db()
        assert org.stripe_subscription_id == "sub_123"
        assert org.subscription_status == Organization.SubscriptionStatus.ACTIVE
        assert org.subscription_tier == Organization.SubscriptionTier.YEARLY

    def test_subscription_changed_past_due(self) -> None:
        org = OrganizationFactory.create(stripe_customer_id="cus_123")

        handle_subscription_changed(build_subscription(status="past_due", price_id="price_monthly_test"))

        org.refresh_from_db()
        assert org.subscription_status == Organization.SubscriptionStatus.PAST_DUE
        assert org.subscription_tier == Organization.SubscriptionTier.MONTHLY
        assert org.has_active_subscription is False

    def test_unknown_customer_is_ignored(self) -> None:
        assert handle_subscription_changed(build_subscription(customer="cus_unknown")) is None

    def test_subscription_deleted_resets_to_free(self) -> None:
        org = OrganizationFactory.create(
            stripe_customer_id="cus_123",
            stripe_subscription_id="sub_123",
            subscription_status=Organization.SubscriptionStatus.ACTIVE,
            subscription_tier=Organization.SubscriptionTier.PRO,
        )

        handle_subscription_deleted(build_subscription(status="canceled"))

        org.refresh_from_db()
        assert org.stripe_subscription_id == ""
        assert org.subscription_status == Organization.SubscriptionStatus.CANCELED
        assert org.subscription_tier == Organization.SubscriptionTier.FREE


@pytest.mark.django_db
class TestInvoiceHandlers:
    """Tests for invoice webhook handlers."""

    def test_payment_failed_is_audited(self) -> None:
        org = OrganizationFactory.create(stripe_customer_id="cus_123")

        handle_invoice_payment_failed(
            {"id": "in_1", "customer": "cus_123", "amount_due": 4900, "attempt_count": 2}
        )

        entry = AuditLog.objects.get(action="PAYMENT_FAILED")
        assert entry.organization_id == str(org.id)
        assert entry.actor_id == ""
        assert entry.details == {"invoice_id": "in_1", "amount_due": 4900, "attempt_count": 2}

    def test_payment_succeeded_is_audited(self) -> None:
        OrganizationFactory.create(stripe_customer_id="cus_123")

        handle_invoice_payment_succeeded({"id": "in_2", "customer": "cus_123", "amount_paid": 4900})

        assert AuditLog.objects.filter(action="PAYMENT_SUCCEEDED").count() == 1

    def test_unknown_customer_not_audited(self) -> None:
        handle_invoice_payment_failed({"id": "in_3", "customer": "cus_unknown"})

        assert AuditLog.objects.count() == 0
