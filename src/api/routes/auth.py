"""Authentication API routes."""

from fastapi import APIRouter, HTTPException, status

from src.api.deps import AccessToken, CurrentUser
from src.api.middleware.error_handler import AuthenticationError, BadRequestError
from src.schemas.auth import (
    AuthenticatedResponse,
    ForgotPasswordRequest,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    RefreshTokenRequest,
    RefreshTokenResponse,
    RegisterRequest,
    RegisterResponse,
    ResetPasswordRequest,
    VerifyEmailRequest,
    VerifyEmailResponse,
)
from src.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/signup",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register new user",
    description="Create an account with email and password. A verification email is sent.",
)
async def signup(data: RegisterRequest) -> RegisterResponse:
    """Register a new user.

    Raises:
        HTTPException: 400 if the email is taken or the password is rejected.
    """
    service = AuthService()

    try:
        result = await service.signup(
            email=data.email,
            password=data.password,
            username=data.username,
        )
        return RegisterResponse(**result)
    except BadRequestError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from e


@router.post(
    "/verify-email",
    response_model=VerifyEmailResponse,
    summary="Verify email address",
)
async def verify_email(data: VerifyEmailRequest) -> VerifyEmailResponse:
    """Confirm an email address with the token from the verification email."""
    service = AuthService()

    try:
        result = await service.verify_email(token=data.token, email=data.email)
        return VerifyEmailResponse(**result)
    except BadRequestError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from e


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Log in",
    description="Exchange email and password for an access token and refresh token.",
)
async def login(data: LoginRequest) -> LoginResponse:
    """Log a user in.

    Raises:
        HTTPException: 401 on invalid credentials or an unverified email.
    """
    service = AuthService()

    try:
        result = await service.login(email=data.email, password=data.password)
        return LoginResponse(**result)
    except AuthenticationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        ) from e


@router.post(
    "/logout",
    response_model=MessageResponse,
    summary="Log out",
)
async def logout(user: CurrentUser, access_token: AccessToken) -> MessageResponse:
    """Revoke the caller's session. Requires a valid bearer token."""
    service = AuthService()
    result = await service.logout(access_token)
    return MessageResponse(**result)


@router.post(
    "/forgot-password",
    response_model=MessageResponse,
    summary="Request password reset",
    description="Always answers with the same message whether or not the account exists.",
)
async def forgot_password(data: ForgotPasswordRequest) -> MessageResponse:
    """Send a password reset email."""
    service = AuthService()
    result = await service.request_password_reset(data.email)
    return MessageResponse(**result)


@router.post(
    "/reset-password",
    response_model=MessageResponse,
    summary="Reset password",
)
async def reset_password(data: ResetPasswordRequest) -> MessageResponse:
    """Set a new password using the token from the reset email.

    Raises:
        HTTPException: 400 if the token is invalid or the password is rejected.
    """
    service = AuthService()

    try:
        result = await service.reset_password(
            token=data.token,
            new_password=data.new_password,
            email=data.email,
        )
        return MessageResponse(**result)
    except BadRequestError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from e


@router.post(
    "/refresh",
    response_model=RefreshTokenResponse,
    summary="Refresh access token",
)
async def refresh_token(data: RefreshTokenRequest) -> RefreshTokenResponse:
    """Exchange a refresh token for a new access token."""
    service = AuthService()

    try:
        result = await service.refresh_token(data.refresh_token)
        return RefreshTokenResponse(**result)
    except AuthenticationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
        ) from e


@router.get(
    "/me",
    response_model=AuthenticatedResponse,
    summary="Current user",
    responses={401: {"description": "Authentication required or invalid token"}},
)
async def get_current_user_info(user: CurrentUser) -> AuthenticatedResponse:
    """Return the identity carried by the caller's access token."""
    return AuthenticatedResponse(
        user_id=str(user.user_id),
        email=user.email,
        role=user.role,
    )
