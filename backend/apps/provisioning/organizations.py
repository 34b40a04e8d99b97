"""
Organization provisioning - signup of a new tenant and its first admin.

Steps, in order (critical steps compensate newest-first on failure):

    create_identity          CRITICAL     delete identity account
    create_organization      CRITICAL     delete organization
    create_admin_user        CRITICAL
    attach_billing_customer  BEST_EFFORT
    seed_settings            BEST_EFFORT
    record_audit             BEST_EFFORT

The slug and email pre-checks only give early, side-effect-free conflict
errors. The unique constraints on Organization.slug and User.email are what
actually decide a race, and their violations surface as the same
ConflictError.
"""

from dataclasses import dataclass, field

from django.db import IntegrityError, transaction

from apps.accounts.identity import (
    IdentityAccountExistsError,
    IdentityInputRejectedError,
    IdentityProvider,
)
from apps.accounts.models import Role, User
from apps.accounts.services import email_in_use, normalize_email
from apps.billing.services import BillingProvider
from apps.core.logging import get_logger
from apps.core.saga import Criticality, Saga, SagaError, SagaStep, StepRecord
from apps.events.services import record_audit_log
from apps.organizations.models import Organization
from apps.organizations.services import seed_default_settings, slugify_organization_name
from apps.provisioning.exceptions import (
    BeaconError,
    ConflictError,
    ProvisioningError,
    ValidationError,
)

logger = get_logger(__name__)

MIN_PASSWORD_LENGTH = 8

STEP_ERROR_MESSAGES = {
    "create_identity": "Failed to create account",
    "create_organization": "Failed to create organization",
    "create_admin_user": "Failed to create user profile",
}


@dataclass
class ProvisionResult:
    organization: Organization
    user: User
    log: list[StepRecord] = field(default_factory=list)


@dataclass
class _Signup:
    """Inputs and intermediate ids of one provisioning run."""

    organization_name: str
    admin_name: str
    admin_email: str
    admin_password: str
    slug: str
    account_id: str | None = None
    organization: Organization | None = None
    user: User | None = None


def validate_password(password: str) -> None:
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")


class OrganizationProvisioner:
    """
    Creates a tenant: identity account, organization, SUPER_ADMIN user,
    then best-effort billing customer, default settings and audit entry.
    """

    def __init__(self, identity: IdentityProvider, billing: BillingProvider) -> None:
        self.identity = identity
        self.billing = billing

    def provision(
        self,
        organization_name: str,
        admin_name: str,
        admin_email: str,
        admin_password: str,
    ) -> ProvisionResult:
        """
        Provision a new organization with its founding administrator.

        Raises:
            ValidationError: Missing input, short password, a name with no
                letters or digits, or credentials the identity provider refused
            ConflictError: Slug or email already taken
            ProvisioningError: A critical step failed; earlier steps were undone
        """
        signup = self._validate(organization_name, admin_name, admin_email, admin_password)

        if Organization.objects.filter(slug=signup.slug).exists():
            raise ConflictError("organization exists")
        if email_in_use(signup.admin_email):
            raise ConflictError("user exists")

        saga = Saga(
            "provision_organization",
            [
                SagaStep(
                    "create_identity",
                    lambda: self._create_identity(signup),
                    compensation=lambda: self._delete_identity(signup),
                ),
                SagaStep(
                    "create_organization",
                    lambda: self._create_organization(signup),
                    compensation=lambda: self._delete_organization(signup),
                ),
                SagaStep("create_admin_user", lambda: self._create_admin_user(signup)),
                SagaStep(
                    "attach_billing_customer",
                    lambda: self._attach_billing_customer(signup),
                    criticality=Criticality.BEST_EFFORT,
                ),
                SagaStep(
                    "seed_settings",
                    lambda: seed_default_settings(signup.organization),
                    criticality=Criticality.BEST_EFFORT,
                ),
                SagaStep(
                    "record_audit",
                    lambda: self._record_audit(signup),
                    criticality=Criticality.BEST_EFFORT,
                ),
            ],
        )

        try:
            result = saga.run()
        except SagaError as e:
            if isinstance(e.cause, BeaconError):
                raise e.cause
            logger.error(
                "organization_provisioning_failed",
                step=e.step,
                slug=signup.slug,
                error=str(e.cause),
            )
            raise ProvisioningError(STEP_ERROR_MESSAGES.get(e.step), step=e.step) from e

        logger.info(
            "organization_provisioned",
            organization_id=signup.organization.id,
            slug=signup.slug,
            user_id=signup.user.id,
            skipped=result.failed_steps,
        )
        return ProvisionResult(organization=signup.organization, user=signup.user, log=result.log)

    def _validate(
        self,
        organization_name: str,
        admin_name: str,
        admin_email: str,
        admin_password: str,
    ) -> _Signup:
        organization_name = (organization_name or "").strip()
        admin_name = (admin_name or "").strip()
        admin_email = normalize_email(admin_email or "")
        admin_password = admin_password or ""

        if not all([organization_name, admin_name, admin_email, admin_password]):
            raise ValidationError("Missing required fields")
        validate_password(admin_password)

        slug = slugify_organization_name(organization_name)
        if not slug:
            raise ValidationError("Organization name must contain letters or numbers")

        return _Signup(
            organization_name=organization_name,
            admin_name=admin_name,
            admin_email=admin_email,
            admin_password=admin_password,
            slug=slug,
        )

    # --- Steps ---

    def _create_identity(self, signup: _Signup) -> str:
        try:
            signup.account_id = self.identity.create_account(
                signup.admin_email,
                signup.admin_password,
                pre_verified=True,
                metadata={"role": Role.SUPER_ADMIN.value},
            )
        except IdentityAccountExistsError as e:
            raise ConflictError("user exists") from e
        except IdentityInputRejectedError as e:
            raise ValidationError(str(e)) from e
        return signup.account_id

    def _delete_identity(self, signup: _Signup) -> None:
        self.identity.delete_account(signup.account_id)

    def _create_organization(self, signup: _Signup) -> Organization:
        try:
            with transaction.atomic():
                signup.organization = Organization.objects.create(
                    name=signup.organization_name,
                    slug=signup.slug,
                    subscription_status=Organization.SubscriptionStatus.TRIALING,
                    subscription_tier=Organization.SubscriptionTier.FREE,
                )
        except IntegrityError as e:
            raise ConflictError("organization exists") from e
        return signup.organization

    def _delete_organization(self, signup: _Signup) -> None:
        with transaction.atomic():
            signup.organization.delete()

    def _create_admin_user(self, signup: _Signup) -> User:
        try:
            with transaction.atomic():
                signup.user = User.objects.create_user(
                    email=signup.admin_email,
                    name=signup.admin_name,
                    stytch_user_id=signup.account_id,
                    role=Role.SUPER_ADMIN,
                    organization=signup.organization,
                    is_active=True,
                )
        except IntegrityError as e:
            raise ConflictError("user exists") from e
        return signup.user

    def _attach_billing_customer(self, signup: _Signup) -> str:
        org = signup.organization
        customer_id = self.billing.create_customer(
            email=signup.admin_email,
            name=signup.organization_name,
            metadata={"organization_id": str(org.id), "organization_slug": org.slug},
        )
        org.stripe_customer_id = customer_id
        org.save(update_fields=["stripe_customer_id", "updated_at"])
        return customer_id

    def _record_audit(self, signup: _Signup) -> None:
        record_audit_log(
            organization_id=signup.organization.id,
            actor=signup.user,
            action="ORGANIZATION_CREATED",
            entity_type="ORGANIZATION",
            entity_id=signup.organization.id,
            details={"name": signup.organization_name, "slug": signup.slug},
        )
