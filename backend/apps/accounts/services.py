"""
Account services - local user lookups.
"""

from apps.accounts.models import User


def normalize_email(email: str) -> str:
    """Emails are compared case-insensitively; store them lower-cased."""
    return email.strip().lower()


def email_in_use(email: str) -> bool:
    """True if any user in any organization already has this email."""
    return User.objects.filter(email=normalize_email(email)).exists()


def get_active_user_for_identity(stytch_user_id: str) -> User | None:
    """Resolve an identity-provider account to its active local user."""
    return (
        User.objects.select_related("organization")
        .filter(stytch_user_id=stytch_user_id, is_active=True)
        .first()
    )
