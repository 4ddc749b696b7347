"""
Collection administration request/response schemas.
"""
from typing import Optional

from pydantic import BaseModel, Field

from lifeline.database.naming import NameRule
from lifeline.database.provisioner import ProvisionOptions, ProvisionResult


class CollectionCreate(BaseModel):
    """Create or ensure a single collection."""
    name: str = Field(..., description="Collection name")
    options: ProvisionOptions = Field(
        default_factory=ProvisionOptions,
        description="Validator and validation settings",
    )


class CollectionBatchCreate(BaseModel):
    """Create several collections at once."""
    names: list[str] = Field(..., min_length=1, description="Collection names")
    options: ProvisionOptions = Field(
        default_factory=ProvisionOptions,
        description="Options applied to every collection",
    )


class CollectionBatchResponse(BaseModel):
    """Per-collection outcome of a batch creation."""
    success: bool = Field(..., description="True when every collection succeeded")
    message: str = Field(..., description="Summary, e.g. 'Created 2/3 collections'")
    results: dict[str, ProvisionResult] = Field(..., description="Result per name")


class CollectionListResponse(BaseModel):
    """All collections known to the database."""
    success: bool = True
    collections: list[str] = Field(..., description="Collection names")
    count: int = Field(..., description="Number of collections")


class NameValidationRequest(BaseModel):
    """Validate a candidate collection name."""
    name: str = Field(..., description="Candidate collection name")


class NameValidationResponse(BaseModel):
    """Outcome of a name validation."""
    success: bool = True
    is_valid: bool = Field(..., description="Whether the name is usable")
    rule: Optional[NameRule] = Field(None, description="First violated rule")
    error: Optional[str] = Field(None, description="Human readable reason")
