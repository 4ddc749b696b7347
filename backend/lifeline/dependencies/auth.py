"""
Authentication dependencies for route protection.

The access token is read from the `Authorization: Bearer <token>` header,
or from the `token` query parameter for clients that cannot set headers.
"""
import logging
from typing import Annotated, Optional

from fastapi import Depends, HTTPException, Query, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError

from lifeline.core.security import decode_token
from lifeline.database.connections import get_database
from lifeline.models.user import User, UserStatus
from lifeline.services.auth_service import AuthService

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_access_token(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(bearer_scheme)],
    token: Annotated[Optional[str], Query(description="JWT access token")] = None,
) -> str:
    """Raw access token from the Authorization header or `?token=`."""
    if credentials is not None:
        return credentials.credentials
    if token:
        return token
    raise _unauthorized("Access token required")


async def get_current_user(
    token: Annotated[str, Depends(get_access_token)],
) -> User:
    """
    Resolve the user a token was issued to.

    Raises:
        HTTPException 401: If the token is invalid or expired, or the user
            no longer exists
    """
    try:
        claims = decode_token(token)
    except JWTError as e:
        logger.debug("Rejected access token: %s", e)
        raise _unauthorized("Could not validate credentials")

    db = await get_database()
    user = await AuthService(db).get_user_by_id(claims.sub)
    if user is None:
        raise _unauthorized("Could not validate credentials")

    return user


async def get_current_active_user(
    current_user: Annotated[User, Depends(get_current_user)]
) -> User:
    """
    Dependency to ensure the current user is active (not disabled).

    Raises:
        HTTPException 403: If user account is disabled
    """
    if current_user.status == UserStatus.DISABLED:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is disabled",
        )
    return current_user


CurrentUser = Annotated[User, Depends(get_current_active_user)]
