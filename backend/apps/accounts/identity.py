"""
Identity provider boundary.

The sagas only talk to ``IdentityProvider``; ``StytchIdentityProvider`` is
the production implementation. Tests substitute their own.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol

import stytch
from stytch.core.response_base import StytchError

from apps.accounts.stytch_client import get_stytch_client
from apps.core.logging import get_logger
from config.settings.base import settings

logger = get_logger(__name__)


class IdentityProviderError(Exception):
    """The identity provider rejected or failed a request."""


class InvalidCredentialsError(IdentityProviderError):
    """Email/password or session token did not authenticate."""


class IdentityAccountExistsError(IdentityProviderError):
    """The provider already holds an account for this email."""


class IdentityInputRejectedError(IdentityProviderError):
    """The provider refused the email or password the caller supplied."""


# Stytch error types that are the caller's fault, not an outage
INPUT_ERROR_TYPES = frozenset({"weak_password", "breached_password", "invalid_email"})


@dataclass(frozen=True)
class IdentitySession:
    """Credentials returned after a successful login."""

    account_id: str
    session_token: str
    session_jwt: str


class IdentityProvider(Protocol):
    def create_account(
        self,
        email: str,
        password: str,
        *,
        pre_verified: bool = True,
        metadata: dict[str, Any] | None = None,
    ) -> str:
        """Create a login for ``email`` and return the account id."""
        ...

    def delete_account(self, account_id: str) -> None: ...

    def authenticate(self, email: str, password: str) -> IdentitySession: ...

    def resolve_session(self, session_jwt: str) -> str:
        """Return the account id owning a session JWT."""
        ...


def _error_message(e: StytchError) -> str:
    return e.details.error_message or e.details.error_type


class StytchIdentityProvider:
    """
    Stytch password accounts.

    Password accounts can log in as soon as they are created, with no
    verification email, which is what the provisioning flows need. Account
    metadata is stored as Stytch trusted_metadata so only the backend can
    change it.
    """

    def __init__(self, client_factory: Callable[[], stytch.Client] = get_stytch_client) -> None:
        self._client_factory = client_factory

    @property
    def client(self) -> stytch.Client:
        return self._client_factory()

    def create_account(
        self,
        email: str,
        password: str,
        *,
        pre_verified: bool = True,
        metadata: dict[str, Any] | None = None,
    ) -> str:
        if not pre_verified:
            raise IdentityProviderError("Only pre-verified password accounts are supported")

        try:
            response = self.client.passwords.create(
                email=email,
                password=password,
                session_duration_minutes=settings.STYTCH_SESSION_DURATION_MINUTES,
                trusted_metadata=metadata or {},
            )
        except StytchError as e:
            logger.warning("stytch_create_account_failed", email=email, error=_error_message(e))
            if e.details.error_type == "duplicate_email":
                raise IdentityAccountExistsError(_error_message(e)) from e
            if e.details.error_type in INPUT_ERROR_TYPES:
                raise IdentityInputRejectedError(_error_message(e)) from e
            raise IdentityProviderError(_error_message(e)) from e

        logger.info("stytch_account_created", account_id=response.user_id)
        return response.user_id

    def delete_account(self, account_id: str) -> None:
        try:
            self.client.users.delete(user_id=account_id)
        except StytchError as e:
            logger.warning("stytch_delete_account_failed", account_id=account_id, error=_error_message(e))
            raise IdentityProviderError(_error_message(e)) from e

        logger.info("stytch_account_deleted", account_id=account_id)

    def authenticate(self, email: str, password: str) -> IdentitySession:
        try:
            response = self.client.passwords.authenticate(
                email=email,
                password=password,
                session_duration_minutes=settings.STYTCH_SESSION_DURATION_MINUTES,
            )
        except StytchError as e:
            logger.info("stytch_authenticate_failed", email=email, error=_error_message(e))
            raise InvalidCredentialsError(_error_message(e)) from e

        return IdentitySession(
            account_id=response.user_id,
            session_token=response.session_token,
            session_jwt=response.session_jwt,
        )

    def resolve_session(self, session_jwt: str) -> str:
        try:
            response = self.client.sessions.authenticate(session_jwt=session_jwt)
        except StytchError as e:
            raise InvalidCredentialsError(_error_message(e)) from e
        return response.session.user_id


def get_identity_provider() -> IdentityProvider:
    """Default identity provider for request handlers."""
    return StytchIdentityProvider()
