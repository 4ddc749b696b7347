"""
Password hashing and signed access tokens.

Passwords are stored as bcrypt hashes. Access tokens are JWTs whose
subject is the user id and which carry the account role.
"""
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from passlib.context import CryptContext
from pydantic import BaseModel, ValidationError

from lifeline.config import get_settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class TokenClaims(BaseModel):
    """Claims of a decoded access token."""
    sub: str
    role: str
    exp: datetime
    iat: datetime


def hash_password(plain_password: str) -> str:
    """Hash a plain password with bcrypt."""
    return pwd_context.hash(plain_password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """True when `plain_password` matches the stored bcrypt hash."""
    return pwd_context.verify(plain_password, hashed_password)


def token_lifetime(remember_me: bool = False) -> timedelta:
    """Configured validity of a freshly issued access token."""
    settings = get_settings()
    if remember_me:
        return timedelta(days=settings.jwt_remember_me_expire_days)
    return timedelta(minutes=settings.jwt_access_token_expire_minutes)


def create_access_token(
    user_id: str,
    role: str,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Issue a signed access token.

    Args:
        user_id: Subject of the token (user ObjectId as string)
        role: Account role, e.g. "donor" or "admin"
        expires_delta: Validity, defaults to `token_lifetime()`

    Returns:
        Encoded JWT
    """
    settings = get_settings()
    issued_at = datetime.now(timezone.utc)
    claims = {
        "sub": user_id,
        "role": role,
        "iat": issued_at,
        "exp": issued_at + (expires_delta or token_lifetime()),
    }
    return jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> TokenClaims:
    """
    Verify a token's signature and expiry and return its claims.

    Raises:
        JWTError: If the token is invalid, expired or lacks required claims
    """
    settings = get_settings()
    payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    try:
        return TokenClaims(**payload)
    except ValidationError as exc:
        raise JWTError("Token is missing required claims") from exc
