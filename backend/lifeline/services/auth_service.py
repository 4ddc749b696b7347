"""
Authentication service for user management and login.
"""
import logging
from datetime import datetime, timezone
from typing import Optional

from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorDatabase

from lifeline.core.security import (
    create_access_token,
    hash_password,
    token_lifetime,
    verify_password,
)
from lifeline.core.rate_limit import (
    check_user_lockout,
    increment_failed_login,
    reset_failed_attempts,
    set_user_lockout,
)
from lifeline.config import get_settings
from lifeline.database.databases import core_db
from lifeline.models.user import User, UserRole, UserStatus
from lifeline.schemas.auth import (
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
)

logger = logging.getLogger(__name__)


class AuthService:
    """Service for authentication operations."""

    def __init__(self, db: AsyncIOMotorDatabase):
        """Initialize with the application database."""
        self.db = db
        self.users_collection = db[core_db.Collections.USERS]
        self.settings = get_settings()

    async def register_user(self, request: RegisterRequest) -> RegisterResponse:
        """
        Register a new donor or recipient.

        Args:
            request: Registration request with profile and password

        Returns:
            RegisterResponse with created user ID

        Raises:
            ValueError: If passwords don't match, email exists or role is admin
        """
        if not request.passwords_match():
            raise ValueError("Passwords do not match")

        if request.role == UserRole.ADMIN:
            raise ValueError("Administrator accounts cannot be self-registered")

        existing = await self.users_collection.find_one({"email": request.email})
        if existing:
            raise ValueError("User already exists with this email")

        user_doc = {
            "name": request.name,
            "email": request.email,
            "hashed_password": hash_password(request.password),
            "blood_group": request.blood_group.value,
            "location": request.location,
            "phone": request.phone,
            "role": request.role.value,
            "status": UserStatus.ACTIVE.value,
            "is_available": True,
            "created_at": datetime.now(timezone.utc),
        }

        result = await self.users_collection.insert_one(user_doc)

        return RegisterResponse(
            user_id=str(result.inserted_id),
            email=request.email,
            message="Registration successful"
        )

    async def login(self, request: LoginRequest) -> LoginResponse:
        """
        Authenticate user and return JWT token.

        Raises:
            ValueError: If credentials are invalid or account is locked
        """
        user_doc = await self.users_collection.find_one({"email": request.email})

        if not user_doc:
            raise ValueError("Invalid email or password")

        user_id = str(user_doc["_id"])

        if await check_user_lockout(user_id):
            raise ValueError("Account temporarily locked due to too many failed attempts")

        if user_doc.get("status") == UserStatus.DISABLED.value:
            raise ValueError("Account is disabled")

        if not verify_password(request.password, user_doc["hashed_password"]):
            failed_count = await increment_failed_login(user_id)

            if failed_count >= self.settings.user_lockout_threshold:
                await set_user_lockout(
                    user_id,
                    self.settings.user_lockout_duration_minutes
                )

            raise ValueError("Invalid email or password")

        await reset_failed_attempts(user_id)
        await self.users_collection.update_one(
            {"_id": user_doc["_id"]},
            {"$set": {"last_login": datetime.now(timezone.utc)}},
        )

        return self._issue_token(
            user_id,
            user_doc.get("role", UserRole.DONOR.value),
            remember_me=request.remember_me,
        )

    async def refresh_token(self, user_id: str) -> LoginResponse:
        """
        Refresh JWT token for an authenticated user.

        Raises:
            ValueError: If user not found or disabled
        """
        user = await self.get_user_by_id(user_id)

        if user is None:
            raise ValueError("User not found")

        if user.status == UserStatus.DISABLED.value:
            raise ValueError("Account is disabled")

        return self._issue_token(user_id, user.role)

    def _issue_token(self, user_id: str, role: str, remember_me: bool = False) -> LoginResponse:
        lifetime = token_lifetime(remember_me)
        access_token = create_access_token(user_id=user_id, role=role, expires_delta=lifetime)
        return LoginResponse(
            access_token=access_token,
            token_type="bearer",
            expires_in=int(lifetime.total_seconds()),
            user_id=user_id,
            role=role,
        )

    async def get_user_by_id(self, user_id: str) -> Optional[User]:
        """
        Get user by ID.

        Returns:
            User model or None if not found or the id is malformed
        """
        try:
            oid = ObjectId(user_id)
        except (InvalidId, TypeError):
            return None

        user_doc = await self.users_collection.find_one({"_id": oid})
        if not user_doc:
            return None

        user_doc["_id"] = str(user_doc["_id"])
        return User(**user_doc)

    async def get_user_by_email(self, email: str) -> Optional[User]:
        """Get user by email."""
        user_doc = await self.users_collection.find_one({"email": email})

        if not user_doc:
            return None

        user_doc["_id"] = str(user_doc["_id"])
        return User(**user_doc)

    async def ensure_admin(self, email: str, password: str) -> bool:
        """
        Create the bootstrap administrator if no account uses `email`.

        Returns:
            True if an account was created
        """
        if await self.users_collection.find_one({"email": email}):
            return False

        await self.users_collection.insert_one({
            "name": "Administrator",
            "email": email,
            "hashed_password": hash_password(password),
            "role": UserRole.ADMIN.value,
            "status": UserStatus.ACTIVE.value,
            "is_available": False,
            "created_at": datetime.now(timezone.utc),
        })
        logger.info("Created bootstrap administrator %s", email)
        return True
