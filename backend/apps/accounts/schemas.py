"""
Auth API schemas - Pydantic models for request/response.
"""

from pydantic import BaseModel, EmailStr, Field

# --- Request Schemas ---


class SignupRequest(BaseModel):
    """Request to create a new organization and its first administrator."""

    organization_name: str = Field(
        ...,
        description="Display name for the new organization; its slug is derived from it",
        examples=["Acme Corp"],
    )
    admin_name: str = Field(..., description="Administrator's display name", examples=["Jane Admin"])
    admin_email: EmailStr = Field(
        ...,
        description="Administrator's email, unique across all organizations",
        examples=["jane@acme.com"],
    )
    admin_password: str = Field(
        ...,
        description="Administrator's password (at least 8 characters)",
        examples=["Str0ng!Pass"],
    )


class LoginRequest(BaseModel):
    """Request to log in with email and password."""

    email: EmailStr = Field(..., examples=["jane@acme.com"])
    password: str = Field(..., examples=["Str0ng!Pass"])


# --- Response Schemas ---


class OrganizationInfo(BaseModel):
    """Organization summary."""

    id: int = Field(..., description="Local database organization ID")
    name: str = Field(..., description="Organization display name")
    slug: str = Field(..., description="URL-safe organization identifier")
    subscription_status: str = Field(..., description="trialing, active, past_due, canceled or inactive")
    subscription_tier: str = Field(..., description="free, monthly, yearly or pro")


class UserInfo(BaseModel):
    """User summary."""

    id: int = Field(..., description="Local database user ID")
    email: str = Field(..., description="User's email address")
    name: str = Field(..., description="User's display name")
    role: str = Field(..., description="SUPER_ADMIN, HR_ADMIN, MANAGER or EMPLOYEE")


class SignupResponse(BaseModel):
    """Organization and administrator created by signup."""

    organization: OrganizationInfo
    user: UserInfo

    model_config = {
        "json_schema_extra": {
            "example": {
                "organization": {
                    "id": 1,
                    "name": "Acme Corp",
                    "slug": "acme-corp",
                    "subscription_status": "trialing",
                    "subscription_tier": "free",
                },
                "user": {"id": 1, "email": "jane@acme.com", "name": "Jane Admin", "role": "SUPER_ADMIN"},
            }
        }
    }


class SessionResponse(BaseModel):
    """Session credentials after login."""

    session_token: str = Field(..., description="Stytch session token for server-side use")
    session_jwt: str = Field(..., description="JWT for Authorization header (Bearer token)")
    user_id: int = Field(..., description="Local database user ID")


class MeResponse(BaseModel):
    """Current user and organization."""

    user: UserInfo
    organization: OrganizationInfo
