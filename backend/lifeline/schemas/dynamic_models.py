"""
Dynamic model request/response schemas.
"""
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from lifeline.services.model_factory import ModelDefinition, ModelOptions, ModelResult


class DynamicModelCreate(BaseModel):
    """Create a model from a full field definition."""
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1, description="Model name, e.g. 'Widget'")
    definition: dict[str, Any] = Field(
        ...,
        alias="schema",
        description="Field name -> descriptor map",
    )
    collection_name: Optional[str] = Field(
        None, description="Backing collection (defaults to the lower-cased name)"
    )
    options: ModelOptions = Field(default_factory=ModelOptions)


class TemplateModelCreate(BaseModel):
    """Create a model from a named template."""
    name: str = Field(..., min_length=1, description="Model name")
    fields: dict[str, Any] = Field(
        default_factory=dict,
        description="Extra fields; these win over template fields",
    )
    collection_name: Optional[str] = Field(None, description="Backing collection")


class DynamicModelBatchCreate(BaseModel):
    """Create several models at once."""
    models: list[ModelDefinition] = Field(..., min_length=1)


class DynamicModelResponse(BaseModel):
    """Successful model creation."""
    model_config = ConfigDict(protected_namespaces=())

    success: bool = True
    message: str
    model_name: str
    collection_name: str


class DynamicModelBatchResponse(BaseModel):
    """Per-model outcome of a batch creation."""
    success: bool
    message: str
    results: dict[str, ModelResult]


class RegisteredModel(BaseModel):
    """A model currently held in the registry."""
    model_config = ConfigDict(protected_namespaces=())

    model_name: str
    collection_name: str
    fields: list[str]
    timestamps: bool


class TemplateInfo(BaseModel):
    """Description of a model template."""
    description: str
    fields: dict[str, Any]
