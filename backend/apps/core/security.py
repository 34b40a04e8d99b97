"""
Core security - authentication classes for API.
"""

from django.http import HttpRequest
from ninja.security import HttpBearer

from apps.accounts.identity import InvalidCredentialsError, get_identity_provider
from apps.accounts.services import get_active_user_for_identity
from apps.core.auth import AuthContext
from apps.core.logging import bind_contextvars, get_logger

logger = get_logger(__name__)


class BearerAuth(HttpBearer):
    """
    Bearer token authentication for API endpoints.

    The token is a Stytch session JWT. It is authenticated with the identity
    provider and resolved to the active local user; anything else is a 401.
    """

    def authenticate(self, request: HttpRequest, token: str) -> AuthContext | None:
        if not token:
            return None

        try:
            account_id = get_identity_provider().resolve_session(token)
        except InvalidCredentialsError:
            logger.info("bearer_auth_invalid_session")
            return None

        user = get_active_user_for_identity(account_id)
        if user is None:
            logger.info("bearer_auth_unknown_account", account_id=account_id)
            return None

        bind_contextvars(**{"usr.id": str(user.id), "organization.id": str(user.organization_id)})
        return AuthContext(user=user, organization=user.organization)


def get_auth_context(request: HttpRequest) -> AuthContext:
    """Return the AuthContext set by BearerAuth, or an empty one."""
    auth = getattr(request, "auth", None)
    return auth if isinstance(auth, AuthContext) else AuthContext()
