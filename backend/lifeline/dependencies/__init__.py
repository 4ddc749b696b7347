"""
Dependencies for dependency injection in routes.
"""
from lifeline.dependencies.auth import get_current_user, get_current_active_user
from lifeline.dependencies.roles import require_roles, require_admin
from lifeline.dependencies.provisioning import (
    get_provisioner,
    get_model_registry,
    get_model_factory,
    require_collection,
)

__all__ = [
    "get_current_user",
    "get_current_active_user",
    "require_roles",
    "require_admin",
    "get_provisioner",
    "get_model_registry",
    "get_model_factory",
    "require_collection",
]
