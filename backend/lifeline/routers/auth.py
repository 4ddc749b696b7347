"""
Authentication router for login, registration, and token refresh.
"""

from fastapi import APIRouter, Depends, HTTPException, Request, status

from lifeline.core.rate_limit import check_rate_limit
from lifeline.database.connections import get_database
from lifeline.database.databases import core_db
from lifeline.dependencies.auth import CurrentUser
from lifeline.dependencies.provisioning import require_collection
from lifeline.schemas.auth import (
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
    TokenRefreshResponse,
    UserInfoResponse,
)
from lifeline.services.auth_service import AuthService

router = APIRouter(prefix="/api/auth", tags=["Authentication"])


async def get_auth_service() -> AuthService:
    """Dependency to get AuthService instance."""
    db = await get_database()
    return AuthService(db)


def get_client_ip(request: Request) -> str:
    """Extract client IP from request."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
    dependencies=[Depends(require_collection(core_db.Collections.USERS))],
)
async def register(
    request: Request,
    body: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Register a new donor or recipient account.

    - **email**: Valid email address (must be unique)
    - **password**: Password (minimum 8 characters)
    - **password_confirm**: Must match password
    - **blood_group**, **location**: Donor/recipient profile
    - **role**: `donor` (default) or `recipient`
    """
    client_ip = get_client_ip(request)
    if not await check_rate_limit(client_ip, "/api/auth/register", limit=10, window_seconds=60):
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Too many registration attempts. Please try again later.",
        )

    try:
        return await auth_service.register_user(body)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Login and get access token",
)
async def login(
    request: Request,
    body: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Authenticate with email and password to receive a JWT token.

    Send the token as `Authorization: Bearer <token>` (or `?token=`) on protected endpoints.

    **Rate limited**: 5 attempts per minute per IP, account lockout after 10 failures.
    """
    settings = auth_service.settings
    client_ip = get_client_ip(request)
    if not await check_rate_limit(
        client_ip,
        "/api/auth/login",
        limit=settings.login_rate_limit_attempts,
        window_seconds=settings.login_rate_limit_window_seconds,
    ):
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Too many login attempts. Please try again later.",
        )

    try:
        return await auth_service.login(body)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )


@router.post(
    "/refresh",
    response_model=TokenRefreshResponse,
    summary="Refresh access token",
)
async def refresh_token(
    current_user: CurrentUser,
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Refresh the JWT token for an authenticated user.

    Requires a valid access token.
    """
    try:
        result = await auth_service.refresh_token(current_user.id)
        return TokenRefreshResponse(
            access_token=result.access_token,
            token_type=result.token_type,
            expires_in=result.expires_in,
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
        )


@router.get(
    "/me",
    response_model=UserInfoResponse,
    summary="Get current user info",
)
async def get_current_user_info(
    current_user: CurrentUser,
):
    """
    Get information about the currently authenticated user.

    Requires a valid access token.
    """
    return {
        "id": current_user.id,
        "name": current_user.name,
        "email": current_user.email,
        "role": current_user.role,
        "status": current_user.status,
        "blood_group": current_user.blood_group,
        "location": current_user.location,
        "phone": current_user.phone,
        "created_at": current_user.created_at,
        "last_login": current_user.last_login,
    }
