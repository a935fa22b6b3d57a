"""FastAPI dependency injection functions."""

import secrets
from typing import Annotated

from fastapi import Depends, Header, HTTPException, Request, Response, status

from src.api.middleware.auth import AuthError, AuthErrorCode, decode_jwt, extract_bearer_token
from src.core.config import get_settings
from src.schemas.auth import UserContext

SESSION_ID_BYTES = 32
MAX_SESSION_ID_LENGTH = 128


def get_session_cookie_config() -> dict:
    """Get cart session cookie configuration from settings."""
    settings = get_settings()
    # SameSite=None requires Secure=True, so local HTTP development uses Lax
    samesite = "none" if settings.session_cookie_secure else "lax"
    return {
        "key": settings.session_cookie_name,
        "max_age": settings.session_cookie_max_age,
        "httponly": True,
        "secure": settings.session_cookie_secure,
        "samesite": samesite,
        "path": "/",
    }


async def get_current_user(
    authorization: Annotated[str, Header(description="Bearer token")] = "",
) -> UserContext:
    """Resolve the authenticated user from the Authorization header.

    Args:
        authorization: The Authorization header value (Bearer token).

    Returns:
        UserContext: The authenticated user's context.

    Raises:
        HTTPException: 401 if the token is missing, invalid, or expired.
    """
    try:
        token = extract_bearer_token(authorization)
        return decode_jwt(token).to_user_context()
    except AuthError as e:
        detail = "Token has expired" if e.code == AuthErrorCode.TOKEN_EXPIRED else e.message
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        ) from e


async def get_optional_user(
    authorization: Annotated[str | None, Header()] = None,
) -> UserContext | None:
    """Resolve the user if an Authorization header is present.

    A present but invalid token still fails with 401.
    """
    if not authorization:
        return None
    return await get_current_user(authorization)


async def get_access_token(
    authorization: Annotated[str, Header(description="Bearer token")] = "",
) -> str:
    """Return the raw bearer token of an authenticated request."""
    try:
        return extract_bearer_token(authorization)
    except AuthError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"},
        ) from e


CurrentUser = Annotated[UserContext, Depends(get_current_user)]
OptionalUser = Annotated[UserContext | None, Depends(get_optional_user)]
AccessToken = Annotated[str, Depends(get_access_token)]


# Cart session


def read_cart_session_id(request: Request) -> str | None:
    """Extract the cart session id from the X-Session-ID header or cookie.

    The header wins so clients that cannot keep cookies still work.
    Blank or oversized values are treated as absent.
    """
    settings = get_settings()
    session_id = request.headers.get(settings.session_header_name) or request.cookies.get(
        settings.session_cookie_name
    )
    if not session_id:
        return None

    session_id = session_id.strip()
    if not session_id or len(session_id) > MAX_SESSION_ID_LENGTH:
        return None
    return session_id


def set_session_cookie(response: Response, session_id: str) -> None:
    """Set the cart session cookie on response."""
    config = get_session_cookie_config()
    response.set_cookie(
        key=config["key"],
        value=session_id,
        max_age=config["max_age"],
        httponly=config["httponly"],
        secure=config["secure"],
        samesite=config["samesite"],
        path=config["path"],
    )


async def get_cart_session_id(request: Request, response: Response) -> str:
    """Get the caller's cart session id, issuing a new one if absent.

    A newly issued id is returned both as a cookie and in the
    X-Session-ID response header.
    """
    session_id = read_cart_session_id(request)
    if session_id:
        return session_id

    session_id = secrets.token_hex(SESSION_ID_BYTES)
    set_session_cookie(response, session_id)
    response.headers[get_settings().session_header_name] = session_id
    return session_id


CartSession = Annotated[str, Depends(get_cart_session_id)]
