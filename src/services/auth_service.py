"""Authentication business logic service.

Registration, login and password recovery are delegated to Supabase Auth.
This service only translates its responses and errors into API shapes.
"""

import logging
from typing import Any

from src.api.middleware.error_handler import AuthenticationError, BadRequestError
from src.core.config import get_settings
from src.core.supabase import create_auth_client

logger = logging.getLogger(__name__)

PASSWORD_RESET_MESSAGE = "If an account exists with this email, a password reset link has been sent."


def _otp_params(token: str, email: str | None, otp_type: str) -> dict[str, Any]:
    # Links carry a token hash; codes typed by the user need the email too
    if email:
        return {"email": email, "token": token, "type": otp_type}
    return {"token_hash": token, "type": otp_type}


class AuthService:
    """Service for user accounts backed by Supabase Auth."""

    def __init__(self) -> None:
        """Initialize auth service with an isolated Supabase client.

        Uses create_auth_client() so that set_session() calls never touch
        the shared database client's Authorization header.
        """
        self.client = create_auth_client()
        self.settings = get_settings()

    async def signup(
        self,
        email: str,
        password: str,
        username: str | None = None,
    ) -> dict[str, Any]:
        """Register a new user with email and password.

        Supabase sends the verification email; the account cannot log in
        until it is verified.

        Args:
            email: User's email address.
            password: User's password.
            username: Optional public username stored in user metadata.

        Returns:
            dict: user_id, email, email_sent and message.

        Raises:
            BadRequestError: If the email is taken or the input is rejected.
        """
        options: dict[str, Any] = {"email_redirect_to": self.settings.auth_redirect_url}
        if username:
            options["data"] = {"username": username}

        try:
            response = self.client.auth.sign_up(
                {"email": email, "password": password, "options": options}
            )
        except Exception as e:
            error_msg = str(e).lower()
            logger.warning("Signup failed: %s", str(e))
            if "already registered" in error_msg or "already exists" in error_msg:
                raise BadRequestError("email already registered") from e
            if "password" in error_msg:
                raise BadRequestError("password does not meet requirements") from e
            raise BadRequestError(f"signup failed: {e}") from e

        if not response.user:
            raise BadRequestError("signup failed")

        user = response.user
        logger.info("User signed up: %s", user.id)

        return {
            "user_id": str(user.id),
            "email": user.email or email,
            # No session means Supabase is waiting for email confirmation
            "email_sent": response.session is None,
            "message": "Account created. Please check your email to verify your account.",
        }

    async def verify_email(self, token: str, email: str | None = None) -> dict[str, Any]:
        """Confirm a user's email address.

        Raises:
            BadRequestError: If the token is invalid or expired.
        """
        try:
            response = self.client.auth.verify_otp(_otp_params(token, email, "email"))
        except Exception as e:
            logger.warning("Email verification failed: %s", str(e))
            raise BadRequestError("invalid or expired verification token") from e

        if not response.user:
            raise BadRequestError("invalid or expired verification token")

        logger.info("Email verified for user: %s", response.user.id)
        return {
            "verified": True,
            "message": "Email verified successfully",
            "redirect_url": f"{self.settings.auth_redirect_url.rstrip('/')}/login?verified=true",
        }

    async def login(self, email: str, password: str) -> dict[str, Any]:
        """Log a user in with email and password.

        Returns:
            dict: access_token, refresh_token, user_id, email and expires_in.

        Raises:
            AuthenticationError: On wrong credentials or an unverified email.
        """
        try:
            response = self.client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except Exception as e:
            error_msg = str(e).lower()
            logger.warning("Login failed: %s", str(e))
            if "not confirmed" in error_msg or "not verified" in error_msg:
                raise AuthenticationError("email not verified") from e
            raise AuthenticationError("invalid credentials") from e

        if not response.user or not response.session:
            raise AuthenticationError("invalid credentials")

        session = response.session
        logger.info("User logged in: %s", response.user.id)

        return {
            "access_token": session.access_token,
            "refresh_token": session.refresh_token,
            "user_id": str(response.user.id),
            "email": response.user.email or email,
            "expires_in": session.expires_in or 3600,
        }

    async def logout(self, access_token: str) -> dict[str, Any]:
        """Revoke the user's refresh tokens.

        Logging out always succeeds for the caller; the access token simply
        runs out on its own if revocation fails.
        """
        try:
            self.client.auth.admin.sign_out(access_token)
            logger.info("User logged out")
        except Exception as e:
            logger.warning("Logout revocation failed: %s", str(e))

        return {"message": "Logged out successfully"}

    async def request_password_reset(self, email: str) -> dict[str, Any]:
        """Send a password reset email.

        The response is identical whether or not the account exists.
        """
        try:
            self.client.auth.reset_password_for_email(
                email,
                options={"redirect_to": f"{self.settings.auth_redirect_url.rstrip('/')}/reset-password"},
            )
        except Exception as e:
            logger.warning("Password reset request failed: %s", str(e))

        return {"message": PASSWORD_RESET_MESSAGE}

    async def reset_password(
        self,
        token: str,
        new_password: str,
        email: str | None = None,
    ) -> dict[str, Any]:
        """Set a new password using the recovery token from the reset email.

        Raises:
            BadRequestError: If the token is invalid or the password is rejected.
        """
        try:
            response = self.client.auth.verify_otp(_otp_params(token, email, "recovery"))
        except Exception as e:
            logger.warning("Password reset token rejected: %s", str(e))
            raise BadRequestError("invalid or expired reset token") from e

        if not response.user or not response.session:
            raise BadRequestError("invalid or expired reset token")

        try:
            self.client.auth.set_session(
                response.session.access_token,
                response.session.refresh_token,
            )
            update_response = self.client.auth.update_user({"password": new_password})
        except Exception as e:
            logger.warning("Password update failed: %s", str(e))
            raise BadRequestError("password does not meet requirements") from e

        if not update_response.user:
            raise BadRequestError("failed to update password")

        logger.info("Password reset for user: %s", response.user.id)
        return {"message": "Password has been reset successfully"}

    async def refresh_token(self, refresh_token: str) -> dict[str, Any]:
        """Exchange a refresh token for a new access token.

        Raises:
            AuthenticationError: If the refresh token is invalid or expired.
        """
        try:
            response = self.client.auth.refresh_session(refresh_token)
        except Exception as e:
            logger.warning("Token refresh failed: %s", str(e))
            raise AuthenticationError("invalid or expired refresh token") from e

        if not response.session:
            raise AuthenticationError("invalid or expired refresh token")

        session = response.session
        return {
            "access_token": session.access_token,
            "refresh_token": session.refresh_token,
            "expires_in": session.expires_in or 3600,
        }
