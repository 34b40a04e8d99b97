"""
Exceptions for provisioning and invitation flows.

Each error carries the message shown to the caller and the HTTP status the
API layer answers with.
"""


class BeaconError(Exception):
    """Base exception for typed, user-facing failures."""

    status_code = 500
    default_message = "An unexpected error occurred"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(BeaconError):
    """Input is missing or malformed."""

    status_code = 400
    default_message = "Invalid input"


class ConflictError(BeaconError):
    """
    A uniqueness rule would be violated.

    ``reason`` is a short machine tag ("organization exists", "user exists",
    "account exists", "invitation exists").
    """

    status_code = 409
    default_message = "Resource already exists"

    MESSAGES = {
        "organization exists": "An organization with a similar name already exists",
        "user exists": "A user with this email already exists",
        "account exists": "An account with this email already exists",
        "invitation exists": "An invitation has already been sent to this email",
    }

    def __init__(self, reason: str, message: str | None = None) -> None:
        self.reason = reason
        super().__init__(message or self.MESSAGES.get(reason, self.default_message))


class InvalidTokenError(BeaconError):
    """No pending invitation matches the token."""

    status_code = 400
    default_message = "Invalid or expired invitation"


class ExpiredTokenError(BeaconError):
    """The invitation exists but its expiry has passed."""

    status_code = 400
    default_message = "This invitation has expired"


class ProvisioningError(BeaconError):
    """An external collaborator or store write failed after validation passed."""

    status_code = 500
    default_message = "Failed to complete signup"

    def __init__(self, message: str | None = None, step: str = "") -> None:
        self.step = step
        super().__init__(message)


class PermissionDeniedError(BeaconError):
    """The caller's role does not allow the operation."""

    status_code = 403
    default_message = "Only administrators can manage invitations"


class InvitationNotFoundError(BeaconError):
    """No pending invitation with that id in the caller's organization."""

    status_code = 404
    default_message = "Invitation not found"


class NotificationError(BeaconError):
    """A configured email provider rejected or failed to deliver a message."""

    status_code = 500
    default_message = "Failed to send email"
