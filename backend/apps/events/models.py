"""
Events models - append-only audit trail.
"""

import uuid

from django.db import models


class AuditLogQuerySet(models.QuerySet):
    def update(self, **kwargs):
        raise TypeError("Audit log entries are append-only")

    def delete(self):
        raise TypeError("Audit log entries are append-only")


class AuditLog(models.Model):
    """
    Permanent audit log for compliance and debugging.

    Rows are written once and never changed. ``organization_id`` is a plain
    value rather than a foreign key so entries outlive the rows they describe.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # What happened
    action = models.CharField(
        max_length=100,
        db_index=True,
        help_text="Action tag, e.g. 'USER_JOINED'",
    )
    entity_type = models.CharField(max_length=50, help_text="e.g. 'USER', 'INVITATION'")
    entity_id = models.CharField(max_length=100)
    organization_id = models.CharField(max_length=100, db_index=True)

    # Who did it (blank for system actions)
    actor_id = models.CharField(
        max_length=100,
        blank=True,
        db_index=True,
        help_text="User that performed the action, blank for system actions",
    )
    actor_email = models.EmailField(
        blank=True,
        help_text="Actor email (denormalized for display)",
    )

    # Context
    correlation_id = models.CharField(
        max_length=100,
        blank=True,
        db_index=True,
        help_text="Request trace ID for correlation",
    )
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    user_agent = models.TextField(blank=True)

    details = models.JSONField(default=dict, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    objects = AuditLogQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["organization_id", "created_at"], name="events_audi_organiz_6c1f2e_idx"),
            models.Index(fields=["entity_type", "entity_id"], name="events_audi_entity__b7d4a9_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.action} on {self.entity_type}:{self.entity_id}"

    def save(self, *args, **kwargs) -> None:
        if not self._state.adding:
            raise TypeError("Audit log entries are append-only")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise TypeError("Audit log entries are append-only")
