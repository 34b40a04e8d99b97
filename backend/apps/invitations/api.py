"""
Invitation API endpoints.

- Accept an invitation (public, token-authenticated)
- Invite, resend and cancel (admins only)
"""

from django.http import HttpRequest
from ninja import Router

from apps.core.schemas import ErrorResponse
from apps.core.security import BearerAuth, get_auth_context
from apps.invitations.models import Invitation
from apps.invitations.notifications import build_invite_url
from apps.invitations.schemas import (
    AcceptInvitationRequest,
    AcceptInvitationResponse,
    CreateInvitationRequest,
    InvitationResponse,
)
from apps.invitations.services import cancel_invitation, create_invitation, resend_invitation
from apps.provisioning.services import get_invitation_acceptor
from config.settings.base import settings

router = Router(tags=["invitations"])
bearer_auth = BearerAuth()


def _invitation_response(invitation: Invitation) -> InvitationResponse:
    return InvitationResponse(
        id=invitation.id,
        email=invitation.email,
        name=invitation.name,
        role=invitation.role,
        status=invitation.status,
        expires_at=invitation.expires_at,
        invite_url=(
            build_invite_url(invitation.token) if settings.ENVIRONMENT == "development" else None
        ),
    )


@router.post(
    "/accept",
    response={200: AcceptInvitationResponse, 400: ErrorResponse, 409: ErrorResponse, 500: ErrorResponse},
    operation_id="acceptInvitation",
    summary="Accept an invitation",
)
def accept_invitation(request: HttpRequest, payload: AcceptInvitationRequest) -> AcceptInvitationResponse:
    """Create the invitee's account. Each token works once."""
    result = get_invitation_acceptor().accept(payload.token, payload.password)
    return AcceptInvitationResponse(user_id=result.user_id, email=result.email)


@router.post(
    "",
    response={200: InvitationResponse, 400: ErrorResponse, 401: ErrorResponse, 403: ErrorResponse, 409: ErrorResponse},
    auth=bearer_auth,
    operation_id="createInvitation",
    summary="Invite a user",
)
def invite_user(request: HttpRequest, payload: CreateInvitationRequest) -> InvitationResponse:
    """Invite someone into the caller's organization. Admin only."""
    user, _org = get_auth_context(request).require_admin()
    invitation = create_invitation(
        user,
        email=payload.email,
        name=payload.name,
        role=payload.role,
        title=payload.title,
        department_id=payload.department_id,
        manager_id=payload.manager_id,
    )
    return _invitation_response(invitation)


@router.post(
    "/{invitation_id}/resend",
    response={200: InvitationResponse, 401: ErrorResponse, 403: ErrorResponse, 404: ErrorResponse, 500: ErrorResponse},
    auth=bearer_auth,
    operation_id="resendInvitation",
    summary="Resend an invitation",
)
def resend(request: HttpRequest, invitation_id: int) -> InvitationResponse:
    """Extend a pending invitation by another expiry window and email it again."""
    user, _org = get_auth_context(request).require_admin()
    return _invitation_response(resend_invitation(user, invitation_id))


@router.post(
    "/{invitation_id}/cancel",
    response={200: InvitationResponse, 401: ErrorResponse, 403: ErrorResponse, 404: ErrorResponse},
    auth=bearer_auth,
    operation_id="cancelInvitation",
    summary="Cancel an invitation",
)
def cancel(request: HttpRequest, invitation_id: int) -> InvitationResponse:
    """Cancel a pending invitation."""
    user, _org = get_auth_context(request).require_admin()
    return _invitation_response(cancel_invitation(user, invitation_id))
