"""
Role-based access control dependencies.
"""
from typing import Callable

from fastapi import Depends, HTTPException, status

from lifeline.dependencies.auth import get_current_active_user
from lifeline.models.user import User, UserRole


def require_roles(*allowed_roles: UserRole) -> Callable:
    """
    Dependency factory for role-based access control.

    Usage:
        @router.get("/admin-only")
        async def admin_route(user: User = Depends(require_roles(UserRole.ADMIN))):
            ...

    Args:
        *allowed_roles: Roles that are allowed to access the route

    Returns:
        Dependency function that validates the user's role
    """
    allowed = {role.value for role in allowed_roles}

    async def role_checker(
        current_user: User = Depends(get_current_active_user)
    ) -> User:
        role = current_user.role
        if isinstance(role, UserRole):
            role = role.value

        if role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=(
                    "Access denied. One of these roles required: "
                    + ", ".join(sorted(allowed))
                ),
            )

        return current_user

    return role_checker


def require_admin() -> Callable:
    """
    Shortcut dependency for admin-only routes.

    Usage:
        @router.get("/admin-only")
        async def admin_route(user: User = Depends(require_admin())):
            ...
    """
    return require_roles(UserRole.ADMIN)
