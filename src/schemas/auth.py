"""Authentication schemas for JWT tokens, user context and auth endpoints."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class UserContext(BaseModel):
    """Authenticated user context extracted from a verified JWT."""

    model_config = ConfigDict(from_attributes=True)

    user_id: UUID = Field(description="Unique identifier for the user (from JWT sub claim)")
    email: str | None = Field(default=None, description="User's email address if available")
    role: str | None = Field(default=None, description="User's role (e.g., 'authenticated')")


class TokenPayload(BaseModel):
    """Claims of a Supabase-issued access token."""

    model_config = ConfigDict(from_attributes=True)

    sub: str = Field(description="Subject - the user's UUID")
    email: str | None = Field(default=None, description="User's email address")
    role: str | None = Field(default=None, description="User's role")
    exp: int = Field(description="Expiration timestamp (Unix epoch)")
    iat: int = Field(description="Issued at timestamp (Unix epoch)")
    aud: str | None = Field(default=None, description="Audience - intended recipient")
    iss: str | None = Field(default=None, description="Issuer - token issuer URL")

    @property
    def expiration_datetime(self) -> datetime:
        """Get expiration as datetime object."""
        return datetime.fromtimestamp(self.exp)

    def to_user_context(self) -> UserContext:
        """Convert token payload to UserContext."""
        return UserContext(
            user_id=UUID(self.sub),
            email=self.email,
            role=self.role,
        )


class AuthenticatedResponse(BaseModel):
    """Response for GET /auth/me and the authenticated health check."""

    model_config = ConfigDict(from_attributes=True)

    authenticated: bool = Field(default=True, description="Authentication status")
    user_id: str = Field(description="Authenticated user ID")
    email: str | None = Field(default=None, description="User email if available")
    role: str | None = Field(default=None, description="User role if available")


class RegisterRequest(BaseModel):
    """Request schema for user registration."""

    email: str = Field(..., description="User's email address", min_length=3, max_length=255)
    username: str | None = Field(default=None, description="Public username", max_length=64)
    password: str = Field(..., description="User's password", min_length=8, max_length=100)


class RegisterResponse(BaseModel):
    """Response schema for user registration."""

    user_id: str = Field(description="Newly created user ID")
    email: str = Field(description="User's email address")
    message: str = Field(description="Success message")
    email_sent: bool = Field(description="Whether a verification email was sent")


class VerifyEmailRequest(BaseModel):
    """Request schema for email verification."""

    token: str = Field(..., description="Email verification token")
    email: str | None = Field(default=None, description="Email the token was sent to")


class VerifyEmailResponse(BaseModel):
    """Response schema for email verification."""

    verified: bool = Field(description="Whether email was successfully verified")
    message: str = Field(description="Verification status message")
    redirect_url: str | None = Field(default=None, description="URL to redirect to after verification")


class LoginRequest(BaseModel):
    """Request schema for user login."""

    email: str = Field(..., description="User's email address")
    password: str = Field(..., description="User's password")


class LoginResponse(BaseModel):
    """Response schema for user login."""

    access_token: str = Field(description="JWT access token")
    refresh_token: str | None = Field(default=None, description="Refresh token if available")
    user_id: str = Field(description="User ID")
    email: str = Field(description="User's email address")
    expires_in: int = Field(description="Token expiration time in seconds")


class ForgotPasswordRequest(BaseModel):
    """Request schema for password reset request."""

    email: str = Field(..., description="User's email address", min_length=3, max_length=255)


class MessageResponse(BaseModel):
    """Plain status message response."""

    message: str = Field(description="Status message")


class ResetPasswordRequest(BaseModel):
    """Request schema for password reset."""

    token: str = Field(..., description="Password reset token from email")
    email: str | None = Field(default=None, description="Email the token was sent to")
    new_password: str = Field(..., description="New password", min_length=8, max_length=100)


class RefreshTokenRequest(BaseModel):
    """Request schema for refreshing access token."""

    refresh_token: str = Field(..., description="Refresh token")


class RefreshTokenResponse(BaseModel):
    """Response schema for refreshing access token."""

    access_token: str = Field(description="New JWT access token")
    refresh_token: str | None = Field(default=None, description="New refresh token if rotated")
    expires_in: int = Field(description="Token expiration time in seconds")
