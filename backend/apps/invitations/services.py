"""
Invitation services - inviting, resending and canceling.

Accepting an invitation is a saga and lives in apps.provisioning.invitations.
"""

from datetime import timedelta

from django.db import transaction
from django.utils import timezone

from apps.accounts.models import Role, User
from apps.accounts.services import email_in_use, normalize_email
from apps.core.logging import get_logger
from apps.events.services import record_audit_log
from apps.invitations.models import Invitation
from apps.invitations.notifications import InvitationNotifier, get_invitation_notifier
from apps.organizations.models import Department
from apps.provisioning.exceptions import (
    ConflictError,
    InvitationNotFoundError,
    NotificationError,
    PermissionDeniedError,
    ValidationError,
)
from config.settings.base import settings

logger = get_logger(__name__)


def _require_admin(actor: User) -> None:
    if not actor.is_admin:
        raise PermissionDeniedError()


def _get_pending_invitation(actor: User, invitation_id: int) -> Invitation:
    invitation = (
        Invitation.objects.select_related("organization")
        .filter(
            pk=invitation_id,
            organization_id=actor.organization_id,
            status=Invitation.Status.PENDING,
        )
        .first()
    )
    if invitation is None:
        raise InvitationNotFoundError()
    return invitation


def create_invitation(
    inviter: User,
    *,
    email: str,
    name: str,
    role: str,
    title: str = "",
    department_id: int | None = None,
    manager_id: int | None = None,
    notifier: InvitationNotifier | None = None,
) -> Invitation:
    """
    Invite someone into the inviter's organization.

    The invitation email is best-effort: a delivery failure is logged and
    the invitation still stands (it can be resent).

    Raises:
        PermissionDeniedError: Inviter is not SUPER_ADMIN or HR_ADMIN
        ValidationError: Missing fields, unknown role, or a department/manager
            outside the organization
        ConflictError: Email belongs to a user, or already has a pending invitation
    """
    _require_admin(inviter)

    email = normalize_email(email or "")
    name = (name or "").strip()
    if not email or not name or not role:
        raise ValidationError("Email, name, and role are required")
    if role not in Role.values:
        raise ValidationError(f"Invalid role: {role}")

    organization = inviter.organization

    department = None
    if department_id is not None:
        department = Department.objects.filter(pk=department_id, organization=organization).first()
        if department is None:
            raise ValidationError("Department not found")

    manager = None
    if manager_id is not None:
        manager = User.objects.filter(pk=manager_id, organization=organization).first()
        if manager is None:
            raise ValidationError("Manager not found")

    if email_in_use(email):
        raise ConflictError("user exists")

    if Invitation.objects.filter(
        organization=organization, email=email, status=Invitation.Status.PENDING
    ).exists():
        raise ConflictError("invitation exists")

    with transaction.atomic():
        invitation = Invitation.objects.create(
            organization=organization,
            email=email,
            name=name,
            title=(title or "").strip(),
            role=role,
            department=department,
            manager=manager,
            invited_by=inviter,
        )
        record_audit_log(
            organization_id=organization.id,
            actor=inviter,
            action="USER_INVITED",
            entity_type="INVITATION",
            entity_id=invitation.id,
            details={
                "invited_email": email,
                "invited_name": name,
                "invited_role": role,
            },
        )

    logger.info(
        "invitation_created",
        invitation_id=invitation.id,
        organization_id=organization.id,
        role=role,
    )

    notifier = notifier or get_invitation_notifier()
    try:
        notifier.send_invitation(invitation, inviter_name=inviter.name)
    except NotificationError:
        logger.warning("invitation_email_not_sent", invitation_id=invitation.id)

    return invitation


def resend_invitation(
    actor: User,
    invitation_id: int,
    notifier: InvitationNotifier | None = None,
) -> Invitation:
    """
    Push a pending invitation's expiry out again and re-send the email.

    Raises:
        PermissionDeniedError: Actor is not an admin
        InvitationNotFoundError: No pending invitation with that id in the organization
        NotificationError: Email is configured but delivery failed
    """
    _require_admin(actor)
    invitation = _get_pending_invitation(actor, invitation_id)

    with transaction.atomic():
        invitation.expires_at = timezone.now() + timedelta(days=settings.INVITATION_EXPIRY_DAYS)
        invitation.save(update_fields=["expires_at", "updated_at"])
        record_audit_log(
            organization_id=invitation.organization_id,
            actor=actor,
            action="INVITATION_RESENT",
            entity_type="INVITATION",
            entity_id=invitation.id,
            details={"invited_email": invitation.email},
        )

    notifier = notifier or get_invitation_notifier()
    notifier.send_invitation(invitation, inviter_name=actor.name, reminder=True)

    logger.info("invitation_resent", invitation_id=invitation.id)
    return invitation


def cancel_invitation(actor: User, invitation_id: int) -> Invitation:
    """
    Cancel a pending invitation; its token stops working immediately.

    Raises:
        PermissionDeniedError: Actor is not an admin
        InvitationNotFoundError: No pending invitation with that id in the organization
    """
    _require_admin(actor)

    with transaction.atomic():
        # Conditional update so a concurrent acceptance cannot be overwritten
        updated = Invitation.objects.filter(
            pk=invitation_id,
            organization_id=actor.organization_id,
            status=Invitation.Status.PENDING,
        ).update(status=Invitation.Status.CANCELED, updated_at=timezone.now())
        if not updated:
            raise InvitationNotFoundError()

        record_audit_log(
            organization_id=actor.organization_id,
            actor=actor,
            action="INVITATION_CANCELED",
            entity_type="INVITATION",
            entity_id=invitation_id,
        )

    logger.info("invitation_canceled", invitation_id=invitation_id)
    return Invitation.objects.get(pk=invitation_id)
