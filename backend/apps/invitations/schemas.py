"""
Invitation API schemas - Pydantic models for request/response.
"""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field


class AcceptInvitationRequest(BaseModel):
    """Request to accept an invitation by setting a password."""

    token: str = Field(
        ...,
        description="Invitation token from the accept-invite URL",
        examples=["3f1c9a52-1f7e-4b55-9a53-2f1e0c6b7d11"],
    )
    password: str = Field(..., description="New account password (at least 8 characters)")


class AcceptInvitationResponse(BaseModel):
    """The account created from the invitation."""

    user_id: int = Field(..., description="Local database user ID")
    email: str = Field(..., description="Account email (the invited address)")


class CreateInvitationRequest(BaseModel):
    """Request to invite someone into the caller's organization."""

    email: EmailStr = Field(..., examples=["sam@acme.com"])
    name: str = Field(..., examples=["Sam Employee"])
    role: str = Field(..., description="SUPER_ADMIN, HR_ADMIN, MANAGER or EMPLOYEE", examples=["EMPLOYEE"])
    title: str = Field("", examples=["Software Engineer"])
    department_id: int | None = Field(None, description="Department in the same organization")
    manager_id: int | None = Field(None, description="Manager in the same organization")


class InvitationResponse(BaseModel):
    """Invitation summary."""

    id: int
    email: str
    name: str
    role: str
    status: str
    expires_at: datetime
    invite_url: str | None = Field(
        None,
        description="Acceptance link; only returned in development",
    )
