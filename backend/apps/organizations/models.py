"""
Organizations models - multi-tenancy foundation.
"""

from django.db import models

from apps.core.models import TenantScopedModel, TimestampedModel


class Organization(TimestampedModel):
    """
    Tenant root.

    Created once per signup by the organization provisioner. Subscription
    fields are kept in step with Stripe by the billing webhook.
    """

    class SubscriptionStatus(models.TextChoices):
        TRIALING = "trialing", "Trialing"
        ACTIVE = "active", "Active"
        PAST_DUE = "past_due", "Past Due"
        CANCELED = "canceled", "Canceled"
        INACTIVE = "inactive", "Inactive"

    class SubscriptionTier(models.TextChoices):
        FREE = "free", "Free"
        MONTHLY = "monthly", "Monthly"
        YEARLY = "yearly", "Yearly"
        PRO = "pro", "Pro"

    name = models.CharField(max_length=255)
    slug = models.SlugField(
        max_length=255,
        unique=True,
        help_text="URL-safe identifier derived from the name, e.g. 'acme-corp'",
    )

    # Stripe integration
    stripe_customer_id = models.CharField(
        max_length=255,
        blank=True,
        db_index=True,
        help_text="Stripe customer ID, e.g. 'cus_xxx'",
    )
    stripe_subscription_id = models.CharField(
        max_length=255,
        blank=True,
        help_text="Stripe subscription ID, e.g. 'sub_xxx'",
    )
    subscription_status = models.CharField(
        max_length=20,
        choices=SubscriptionStatus.choices,
        default=SubscriptionStatus.TRIALING,
    )
    subscription_tier = models.CharField(
        max_length=20,
        choices=SubscriptionTier.choices,
        default=SubscriptionTier.FREE,
    )

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return self.name

    @property
    def has_active_subscription(self) -> bool:
        return self.subscription_status in (
            self.SubscriptionStatus.ACTIVE,
            self.SubscriptionStatus.TRIALING,
        )


class Department(TenantScopedModel):
    """Organization-scoped department referenced by users and invitations."""

    name = models.CharField(max_length=255)

    class Meta:
        ordering = ["name"]
        constraints = [
            models.UniqueConstraint(fields=["organization", "name"], name="unique_department_name"),
        ]

    def __str__(self) -> str:
        return self.name


class SystemSettings(TenantScopedModel):
    """
    Per-organization configuration, one row per category.

    Seeded at signup; readers fall back to the built-in defaults when a
    category row is missing (see ``apps.organizations.services.get_settings``).
    """

    class Category(models.TextChoices):
        REVIEW = "review", "Review"
        NOTIFICATIONS = "notifications", "Notifications"
        FEATURES = "features", "Features"

    category = models.CharField(max_length=50, choices=Category.choices)
    settings = models.JSONField(default=dict, blank=True)

    class Meta:
        verbose_name_plural = "system settings"
        constraints = [
            models.UniqueConstraint(
                fields=["organization", "category"], name="unique_settings_category"
            ),
        ]

    def __str__(self) -> str:
        return f"{self.organization_id}:{self.category}"
