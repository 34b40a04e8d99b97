"""
Invitations models - single-use tokens for joining an organization.
"""

import uuid
from datetime import timedelta

from django.db import models
from django.utils import timezone

from apps.accounts.models import Role
from apps.core.models import TenantScopedModel
from config.settings.base import settings


def generate_invitation_token() -> str:
    return str(uuid.uuid4())


def default_expiry():
    return timezone.now() + timedelta(days=settings.INVITATION_EXPIRY_DAYS)


class Invitation(TenantScopedModel):
    """
    Pending offer for someone to join an organization.

    PENDING -> ACCEPTED when the invitee sets a password, or
    PENDING -> CANCELED by an admin. An expired PENDING invitation is
    invalid but stays PENDING until resent or canceled.
    """

    class Status(models.TextChoices):
        PENDING = "PENDING", "Pending"
        ACCEPTED = "ACCEPTED", "Accepted"
        CANCELED = "CANCELED", "Canceled"

    email = models.EmailField(db_index=True)
    name = models.CharField(max_length=255)
    title = models.CharField(max_length=255, blank=True)
    role = models.CharField(max_length=20, choices=Role.choices, default=Role.EMPLOYEE)

    department = models.ForeignKey(
        "organizations.Department",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="invitations",
    )
    manager = models.ForeignKey(
        "accounts.User",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    invited_by = models.ForeignKey(
        "accounts.User",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="sent_invitations",
    )

    token = models.CharField(
        max_length=64,
        unique=True,
        default=generate_invitation_token,
        help_text="Opaque single-use token carried in the accept-invite URL",
    )
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
        db_index=True,
    )
    expires_at = models.DateTimeField(default=default_expiry)
    accepted_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.email} -> {self.organization_id} ({self.status})"

    @property
    def is_expired(self) -> bool:
        return self.expires_at < timezone.now()
