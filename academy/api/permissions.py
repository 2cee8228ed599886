# academy/api/permissions.py
from typing import Callable, Iterable

from fastapi import Depends

from academy.api.deps import get_current_user
from academy.core.errors import Forbidden
from academy.core.permissions import Action, has_permission
from academy.core.roles import ADMIN_ROLES, Role
from academy.models.user import User


def require_roles(allowed: Iterable[Role]) -> Callable[[User], User]:
    """
    Use: Depends(require_roles([Role.PARENT]))
    Rejects users without one of the allowed roles.
    """
    allowed_set = frozenset(allowed)

    def _checker(user: User = Depends(get_current_user)) -> User:
        if user.role not in allowed_set:
            raise Forbidden(f"Access denied for role '{user.role.value}'.")
        return user

    return _checker


def require_permission(resource: str, action: Action) -> Callable[[User], User]:
    """
    Use: Depends(require_permission("curriculum", "create"))
    Checks the resource matrix in academy.core.permissions.
    """
    def _checker(user: User = Depends(get_current_user)) -> User:
        if not has_permission(user.role, resource, action):
            raise Forbidden(f"Role '{user.role.value}' may not {action} {resource}.")
        return user

    return _checker


require_admin = require_roles(ADMIN_ROLES)
