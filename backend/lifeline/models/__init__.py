"""
Pydantic models for database documents and runtime-defined models.
"""
from lifeline.models.user import User, UserRole, UserStatus, BloodGroup
from lifeline.models.fields import (
    FieldDescriptor,
    FieldType,
    SchemaDefinitionError,
    parse_field,
    parse_fields,
)
from lifeline.models.dynamic import DocumentValidationError, DynamicModel, ModelSchema

__all__ = [
    "User",
    "UserRole",
    "UserStatus",
    "BloodGroup",
    "FieldDescriptor",
    "FieldType",
    "SchemaDefinitionError",
    "parse_field",
    "parse_fields",
    "DocumentValidationError",
    "DynamicModel",
    "ModelSchema",
]
