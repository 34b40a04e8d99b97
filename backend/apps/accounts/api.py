"""
Auth API endpoints.

- Organization signup (provisions tenant + first admin)
- Password login through Stytch
- Current user info
"""

from django.http import HttpRequest
from ninja import Router
from ninja.errors import HttpError

from apps.accounts.identity import InvalidCredentialsError, get_identity_provider
from apps.accounts.models import User
from apps.accounts.schemas import (
    LoginRequest,
    MeResponse,
    OrganizationInfo,
    SessionResponse,
    SignupRequest,
    SignupResponse,
    UserInfo,
)
from apps.accounts.services import get_active_user_for_identity
from apps.core.logging import get_logger
from apps.core.schemas import ErrorResponse
from apps.core.security import BearerAuth, get_auth_context
from apps.organizations.models import Organization
from apps.provisioning.services import get_organization_provisioner

logger = get_logger(__name__)

router = Router(tags=["auth"])
bearer_auth = BearerAuth()


def _organization_info(org: Organization) -> OrganizationInfo:
    return OrganizationInfo(
        id=org.id,
        name=org.name,
        slug=org.slug,
        subscription_status=org.subscription_status,
        subscription_tier=org.subscription_tier,
    )


def _user_info(user: User) -> UserInfo:
    return UserInfo(id=user.id, email=user.email, name=user.name, role=user.role)


@router.post(
    "/signup",
    response={200: SignupResponse, 400: ErrorResponse, 409: ErrorResponse, 500: ErrorResponse},
    operation_id="signup",
    summary="Create organization and administrator",
)
def signup(request: HttpRequest, payload: SignupRequest) -> SignupResponse:
    """
    Create a new organization with its SUPER_ADMIN.

    Billing customer and default settings are best-effort; their failure
    does not fail signup.
    """
    result = get_organization_provisioner().provision(
        organization_name=payload.organization_name,
        admin_name=payload.admin_name,
        admin_email=payload.admin_email,
        admin_password=payload.admin_password,
    )
    return SignupResponse(
        organization=_organization_info(result.organization),
        user=_user_info(result.user),
    )


@router.post(
    "/login",
    response={200: SessionResponse, 401: ErrorResponse},
    operation_id="login",
    summary="Log in with email and password",
)
def login(request: HttpRequest, payload: LoginRequest) -> SessionResponse:
    """Authenticate with Stytch and return session credentials."""
    try:
        session = get_identity_provider().authenticate(payload.email.lower(), payload.password)
    except InvalidCredentialsError as e:
        raise HttpError(401, "Invalid email or password") from e

    user = get_active_user_for_identity(session.account_id)
    if user is None:
        logger.warning("login_without_active_user", account_id=session.account_id)
        raise HttpError(401, "Invalid email or password")

    return SessionResponse(
        session_token=session.session_token,
        session_jwt=session.session_jwt,
        user_id=user.id,
    )


@router.get(
    "/me",
    response={200: MeResponse, 401: ErrorResponse},
    auth=bearer_auth,
    operation_id="getCurrentUser",
    summary="Get current user info",
)
def get_current_user(request: HttpRequest) -> MeResponse:
    """Get the authenticated user and their organization."""
    user, org = get_auth_context(request).require_auth()
    return MeResponse(user=_user_info(user), organization=_organization_info(org))
