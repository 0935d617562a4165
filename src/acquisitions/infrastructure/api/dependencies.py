"""FastAPI dependencies for auth services and the current session.

The JWT service, cookie manager and database manager are built once by the
application factory and stored on ``app.state``; these dependencies hand them
to the route handlers.
"""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from acquisitions.core.logging import get_logger
from acquisitions.domain.services import AuthService
from acquisitions.infrastructure.auth import (
    SESSION_COOKIE_NAME,
    InvalidTokenError,
    JWTService,
    SessionCookieManager,
    TokenClaims,
)
from acquisitions.infrastructure.persistence.database import get_db_session

logger = get_logger(__name__)


def get_jwt_service(request: Request) -> JWTService:
    return request.app.state.jwt_service


def get_cookie_manager(request: Request) -> SessionCookieManager:
    return request.app.state.cookie_manager


async def get_auth_service(
    session: Annotated[AsyncSession, Depends(get_db_session)],
    cookie_manager: Annotated[SessionCookieManager, Depends(get_cookie_manager)],
) -> AuthService:
    """Build an AuthService bound to the request's database session."""
    return AuthService(session, cookie_manager)


async def get_current_user(
    request: Request,
    jwt_service: Annotated[JWTService, Depends(get_jwt_service)],
    cookie_manager: Annotated[SessionCookieManager, Depends(get_cookie_manager)],
) -> TokenClaims:
    """Extract and validate the current user from the session cookie.

    Returns:
        TokenClaims: The claims of the session token.

    Raises:
        HTTPException: 401 if the cookie is missing or the token is invalid.
    """
    token = cookie_manager.get(request, SESSION_COOKIE_NAME)
    if not token:
        logger.info("Authentication failed: missing session cookie")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )

    try:
        return jwt_service.verify(token)
    except InvalidTokenError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
        )


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
JWTServiceDep = Annotated[JWTService, Depends(get_jwt_service)]
CookieManagerDep = Annotated[SessionCookieManager, Depends(get_cookie_manager)]
CurrentUser = Annotated[TokenClaims, Depends(get_current_user)]
