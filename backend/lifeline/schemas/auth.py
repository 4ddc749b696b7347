"""
Authentication request/response schemas.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from lifeline.models.user import BloodGroup, UserRole, UserStatus


class LoginRequest(BaseModel):
    """Login request body."""
    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., min_length=8, description="User password")
    remember_me: bool = Field(
        default=False,
        description="Issue a long-lived token (days instead of hours)"
    )


class LoginResponse(BaseModel):
    """Login response with JWT token."""
    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
    expires_in: int = Field(..., description="Token expiration time in seconds")
    user_id: str = Field(..., description="Authenticated user ID")
    role: str = Field(..., description="User role")


class RegisterRequest(BaseModel):
    """Registration request body."""
    name: str = Field(..., min_length=1, description="Display name")
    email: EmailStr = Field(..., description="User email address")
    password: str = Field(
        ...,
        min_length=8,
        description="User password (min 8 characters)"
    )
    password_confirm: str = Field(..., description="Password confirmation")
    blood_group: BloodGroup = Field(..., description="Blood group")
    location: str = Field(..., min_length=1, description="City or area")
    phone: Optional[str] = Field(None, description="Contact phone number")
    role: UserRole = Field(default=UserRole.DONOR, description="donor or recipient")

    def passwords_match(self) -> bool:
        """Check if password and confirmation match."""
        return self.password == self.password_confirm


class RegisterResponse(BaseModel):
    """Registration response."""
    user_id: str = Field(..., description="Created user ID")
    email: str = Field(..., description="Registered email")
    message: str = Field(
        default="Registration successful",
        description="Success message"
    )


class TokenRefreshResponse(BaseModel):
    """Token refresh response."""
    access_token: str = Field(..., description="New JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
    expires_in: int = Field(..., description="Token expiration time in seconds")


class UserInfoResponse(BaseModel):
    """Current user information response."""
    id: str = Field(..., description="User ID")
    name: str = Field(..., description="Display name")
    email: str = Field(..., description="User email")
    role: UserRole = Field(..., description="User role")
    status: UserStatus = Field(..., description="Account status")
    blood_group: Optional[BloodGroup] = Field(None, description="Blood group")
    location: Optional[str] = Field(None, description="City or area")
    phone: Optional[str] = Field(None, description="Contact phone number")
    created_at: datetime = Field(..., description="Account creation timestamp")
    last_login: Optional[datetime] = Field(None, description="Last successful login")
