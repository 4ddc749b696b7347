"""
User model for the application database.
"""
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class UserRole(str, Enum):
    """User role levels."""
    DONOR = "donor"
    RECIPIENT = "recipient"
    ADMIN = "admin"


class UserStatus(str, Enum):
    """User account status."""
    ACTIVE = "active"
    DISABLED = "disabled"


class BloodGroup(str, Enum):
    """ABO/Rh blood groups."""
    A_POS = "A+"
    A_NEG = "A-"
    B_POS = "B+"
    B_NEG = "B-"
    AB_POS = "AB+"
    AB_NEG = "AB-"
    O_POS = "O+"
    O_NEG = "O-"


class User(BaseModel):
    """
    User document model for the users collection.
    """
    id: Optional[str] = Field(None, alias="_id", description="MongoDB ObjectId as string")
    name: str = Field(..., description="Display name")
    email: EmailStr = Field(..., description="Unique email address")
    hashed_password: str = Field(..., description="Bcrypt hashed password")
    blood_group: Optional[BloodGroup] = Field(None, description="Blood group")
    location: Optional[str] = Field(None, description="City or area")
    phone: Optional[str] = Field(None, description="Contact phone number")
    role: UserRole = Field(default=UserRole.DONOR, description="Account role")
    status: UserStatus = Field(
        default=UserStatus.ACTIVE,
        description="Account status"
    )
    is_available: bool = Field(
        default=True,
        description="Whether a donor currently accepts requests"
    )
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Account creation timestamp"
    )
    last_login: Optional[datetime] = Field(None, description="Last successful login")

    class Config:
        populate_by_name = True
        use_enum_values = True
