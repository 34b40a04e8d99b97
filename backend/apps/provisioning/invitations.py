"""
Invitation acceptance - turn a pending invitation into a user account.

    create_identity       CRITICAL   delete identity account
    activate_membership   CRITICAL

``activate_membership`` inserts the User, flips the invitation to ACCEPTED
and writes the USER_JOINED audit entry in one database transaction. The
invitation update is conditional on the row still being PENDING, so of two
requests racing on the same token only one can commit; the loser rolls back
its User insert and its identity account is compensated.
"""

from dataclasses import dataclass, field

from django.db import IntegrityError, transaction
from django.utils import timezone

from apps.accounts.identity import (
    IdentityAccountExistsError,
    IdentityInputRejectedError,
    IdentityProvider,
)
from apps.accounts.models import User
from apps.accounts.services import email_in_use
from apps.core.logging import get_logger
from apps.core.saga import Saga, SagaError, SagaStep, StepRecord
from apps.events.services import record_audit_log
from apps.invitations.models import Invitation
from apps.provisioning.exceptions import (
    BeaconError,
    ConflictError,
    ExpiredTokenError,
    InvalidTokenError,
    ProvisioningError,
    ValidationError,
)
from apps.provisioning.organizations import validate_password

logger = get_logger(__name__)

STEP_ERROR_MESSAGES = {
    "create_identity": "Failed to create account",
    "activate_membership": "Failed to create user profile",
}


@dataclass
class AcceptResult:
    user_id: int
    email: str
    organization_id: int
    log: list[StepRecord] = field(default_factory=list)


@dataclass
class _Acceptance:
    invitation: Invitation
    password: str
    account_id: str | None = None
    user: User | None = None


class InvitationAcceptor:
    """Accepts an invitation token exactly once."""

    def __init__(self, identity: IdentityProvider) -> None:
        self.identity = identity

    def accept(self, token: str, password: str) -> AcceptResult:
        """
        Create the invitee's account from a pending invitation.

        Raises:
            ValidationError: Token or password missing, or password refused
            InvalidTokenError: No pending invitation for this token
            ExpiredTokenError: Invitation expired (it is left PENDING)
            ConflictError: An account with the invitation email already exists
            ProvisioningError: Account or profile creation failed; undone
        """
        token = (token or "").strip()
        password = password or ""
        if not token or not password:
            raise ValidationError("Token and password are required")
        validate_password(password)

        invitation = (
            Invitation.objects.select_related("organization")
            .filter(token=token, status=Invitation.Status.PENDING)
            .first()
        )
        if invitation is None:
            raise InvalidTokenError()
        if invitation.is_expired:
            raise ExpiredTokenError()
        if email_in_use(invitation.email):
            raise ConflictError("account exists")

        acceptance = _Acceptance(invitation=invitation, password=password)
        saga = Saga(
            "accept_invitation",
            [
                SagaStep(
                    "create_identity",
                    lambda: self._create_identity(acceptance),
                    compensation=lambda: self.identity.delete_account(acceptance.account_id),
                ),
                SagaStep("activate_membership", lambda: self._activate_membership(acceptance)),
            ],
        )

        try:
            result = saga.run()
        except SagaError as e:
            if isinstance(e.cause, BeaconError):
                raise e.cause
            logger.error(
                "invitation_acceptance_failed",
                step=e.step,
                invitation_id=invitation.id,
                error=str(e.cause),
            )
            raise ProvisioningError(STEP_ERROR_MESSAGES.get(e.step), step=e.step) from e

        user = acceptance.user
        logger.info(
            "invitation_accepted",
            invitation_id=invitation.id,
            organization_id=invitation.organization_id,
            user_id=user.id,
        )
        return AcceptResult(
            user_id=user.id,
            email=user.email,
            organization_id=invitation.organization_id,
            log=result.log,
        )

    def _create_identity(self, acceptance: _Acceptance) -> str:
        invitation = acceptance.invitation
        try:
            acceptance.account_id = self.identity.create_account(
                invitation.email,
                acceptance.password,
                pre_verified=True,
                metadata={
                    "organization_id": str(invitation.organization_id),
                    "role": invitation.role,
                },
            )
        except IdentityAccountExistsError as e:
            raise ConflictError("account exists") from e
        except IdentityInputRejectedError as e:
            raise ValidationError(str(e)) from e
        return acceptance.account_id

    def _activate_membership(self, acceptance: _Acceptance) -> User:
        invitation = acceptance.invitation
        now = timezone.now()

        try:
            with transaction.atomic():
                user = User.objects.create_user(
                    email=invitation.email,
                    name=invitation.name,
                    title=invitation.title,
                    role=invitation.role,
                    stytch_user_id=acceptance.account_id,
                    organization_id=invitation.organization_id,
                    department_id=invitation.department_id,
                    manager_id=invitation.manager_id,
                    is_active=True,
                )

                claimed = Invitation.objects.filter(
                    pk=invitation.pk, status=Invitation.Status.PENDING
                ).update(status=Invitation.Status.ACCEPTED, accepted_at=now, updated_at=now)
                if not claimed:
                    # Another request accepted or an admin canceled in the meantime
                    raise InvalidTokenError()

                record_audit_log(
                    organization_id=invitation.organization_id,
                    actor=user,
                    action="USER_JOINED",
                    entity_type="USER",
                    entity_id=user.id,
                    details={
                        "email": invitation.email,
                        "name": invitation.name,
                        "role": invitation.role,
                        "invited_by": invitation.invited_by_id,
                        "invitation_id": invitation.id,
                    },
                )
        except IntegrityError as e:
            raise ConflictError("account exists") from e

        acceptance.user = user
        return user
