"""
Invitation emails via the Resend HTTP API.

Sending is optional: without RESEND_API_KEY the notifier logs the invite
URL and reports that nothing was sent.
"""

from html import escape

import httpx

from apps.core.logging import get_logger
from apps.invitations.models import Invitation
from apps.provisioning.exceptions import NotificationError
from config.settings.base import settings

logger = get_logger(__name__)

DEFAULT_TIMEOUT = 10.0


def build_invite_url(token: str) -> str:
    """Acceptance link the frontend serves at /accept-invite."""
    return f"{settings.FRONTEND_URL.rstrip('/')}/accept-invite?token={token}"


def _render_invitation(invitation: Invitation, inviter_name: str, reminder: bool) -> tuple[str, str]:
    organization_name = invitation.organization.name
    invite_url = build_invite_url(invitation.token)

    if reminder:
        subject = f"Reminder: You're invited to join {organization_name} on Beacon"
        intro = "This is a reminder that "
    else:
        subject = f"You're invited to join {organization_name} on Beacon"
        intro = ""

    html = (
        f"<p>Hi {escape(invitation.name)},</p>"
        f"<p>{intro}{escape(inviter_name)} has invited you to join "
        f"<strong>{escape(organization_name)}</strong> on Beacon.</p>"
        f'<p><a href="{escape(invite_url)}">Accept Invitation</a></p>'
        f"<p>This invitation will expire in {settings.INVITATION_EXPIRY_DAYS} days. "
        "If you weren't expecting this invitation, you can safely ignore this email.</p>"
    )
    return subject, html


class InvitationNotifier:
    """Sends invitation emails through Resend."""

    def __init__(self, api_key: str | None = None, timeout: float = DEFAULT_TIMEOUT) -> None:
        self.api_key = settings.RESEND_API_KEY if api_key is None else api_key
        self.timeout = timeout

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def send_invitation(
        self,
        invitation: Invitation,
        inviter_name: str = "",
        reminder: bool = False,
    ) -> bool:
        """
        Email the invitation link to the invitee.

        Returns:
            True if sent, False if email is not configured

        Raises:
            NotificationError: Resend rejected the request or was unreachable
        """
        if not self.is_configured:
            logger.info(
                "invitation_email_skipped",
                reason="resend_not_configured",
                invitation_id=invitation.id,
                invite_url=build_invite_url(invitation.token),
            )
            return False

        subject, html = _render_invitation(
            invitation, inviter_name or "Your administrator", reminder
        )

        try:
            with httpx.Client(timeout=self.timeout) as client:
                response = client.post(
                    settings.RESEND_API_URL,
                    headers={"Authorization": f"Bearer {self.api_key}"},
                    json={
                        "from": settings.EMAIL_FROM,
                        "to": [invitation.email],
                        "subject": subject,
                        "html": html,
                    },
                )
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(
                "invitation_email_failed",
                invitation_id=invitation.id,
                error=str(e),
            )
            raise NotificationError() from e

        logger.info("invitation_email_sent", invitation_id=invitation.id, reminder=reminder)
        return True


def get_invitation_notifier() -> InvitationNotifier:
    return InvitationNotifier()
