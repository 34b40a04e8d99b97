"""
Authentication context for request lifecycle.

BearerAuth resolves the session token to an AuthContext that endpoints
read from ``request.auth``.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING

from ninja.errors import HttpError

if TYPE_CHECKING:
    from apps.accounts.models import User
    from apps.organizations.models import Organization


@dataclass
class AuthContext:
    """
    Authenticated user and the organization they belong to.

    Attributes:
        user: The authenticated User, or None if not authenticated
        organization: The user's Organization, or None
    """

    user: "User | None" = None
    organization: "Organization | None" = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None and self.organization is not None

    def require_auth(self) -> tuple["User", "Organization"]:
        """
        Get authenticated context or raise 401.

        Raises:
            HttpError 401: If not authenticated
        """
        if self.user is None or self.organization is None:
            raise HttpError(401, "Not authenticated")
        return self.user, self.organization

    def require_admin(self) -> tuple["User", "Organization"]:
        """
        Get authenticated context and verify an admin role, or raise.

        Raises:
            HttpError 401: If not authenticated
            HttpError 403: If not SUPER_ADMIN or HR_ADMIN
        """
        user, org = self.require_auth()
        if not user.is_admin:
            raise HttpError(403, "Admin access required")
        return user, org
