"""
Core models - shared base classes and utilities.
"""

from django.db import models


class TimestampedModel(models.Model):
    """
    Abstract base model with created_at/updated_at timestamps.

    All business entities should inherit from this or TenantScopedModel.
    """

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class TenantScopedModel(TimestampedModel):
    """
    Abstract base model for all organization-scoped entities.

    Usage:
        class Department(TenantScopedModel):
            name = models.CharField(max_length=255)
    """

    organization = models.ForeignKey(
        "organizations.Organization",
        on_delete=models.CASCADE,
        related_name="%(class)s_set",
    )

    class Meta:
        abstract = True


class ProcessedWebhook(models.Model):
    """Provider webhook events already handled, for idempotent processing."""

    source = models.CharField(max_length=50, help_text="Webhook provider, e.g. 'stripe'")
    event_id = models.CharField(max_length=255, help_text="Provider event identifier")
    processed_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["source", "event_id"], name="unique_processed_webhook"),
        ]

    def __str__(self) -> str:
        return f"{self.source}:{self.event_id}"
