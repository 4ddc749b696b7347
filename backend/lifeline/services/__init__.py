"""
Service layer for business logic.
"""
from lifeline.services.auth_service import AuthService
from lifeline.services.model_factory import ModelFactory, ModelOptions, ModelResult
from lifeline.services.model_registry import ModelRegistry

__all__ = [
    "AuthService",
    "ModelFactory",
    "ModelOptions",
    "ModelResult",
    "ModelRegistry",
]
