"""
Request and response schemas for API endpoints.
"""
from lifeline.schemas.auth import (
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
    TokenRefreshResponse,
    UserInfoResponse,
)
from lifeline.schemas.collections import (
    CollectionBatchCreate,
    CollectionBatchResponse,
    CollectionCreate,
    CollectionListResponse,
    NameValidationRequest,
    NameValidationResponse,
)
from lifeline.schemas.dynamic_models import (
    DynamicModelBatchCreate,
    DynamicModelBatchResponse,
    DynamicModelCreate,
    DynamicModelResponse,
    RegisteredModel,
    TemplateInfo,
    TemplateModelCreate,
)

__all__ = [
    # Auth
    "LoginRequest",
    "LoginResponse",
    "RegisterRequest",
    "RegisterResponse",
    "TokenRefreshResponse",
    "UserInfoResponse",
    # Collections
    "CollectionBatchCreate",
    "CollectionBatchResponse",
    "CollectionCreate",
    "CollectionListResponse",
    "NameValidationRequest",
    "NameValidationResponse",
    # Dynamic models
    "DynamicModelBatchCreate",
    "DynamicModelBatchResponse",
    "DynamicModelCreate",
    "DynamicModelResponse",
    "RegisteredModel",
    "TemplateInfo",
    "TemplateModelCreate",
]
