# academy/core/permissions.py
from typing import Literal

from academy.core.roles import Role, RoleLike, parse_role

Action = Literal["create", "read", "update", "delete"]

_OFFICERS = (
    Role.GAVELIER_PRESIDENT, Role.GAVELIER_TREASURER, Role.GAVELIER_SECRETARY,
    Role.GAVELIER_VP_EDUCATION, Role.GAVELIER_VP_MEMBERSHIP, Role.GAVELIER_VP_PR,
)

PERMISSIONS: dict[str, dict[str, frozenset[Role]]] = {
    "events": {
        "create": frozenset({Role.GAVELIER_PRESIDENT, Role.GAVELIER_SECRETARY, Role.T1_ADMIN, Role.T2_ADMIN}),
        "read": frozenset({Role.STUDENT, Role.PARENT, Role.MENTOR, *_OFFICERS, Role.T1_ADMIN, Role.T2_ADMIN, Role.T3_MANAGER}),
        "update": frozenset({Role.GAVELIER_PRESIDENT, Role.GAVELIER_SECRETARY, Role.T1_ADMIN, Role.T2_ADMIN}),
        "delete": frozenset({Role.GAVELIER_PRESIDENT, Role.T1_ADMIN}),
    },
    "announcements": {
        "create": frozenset({Role.GAVELIER_PRESIDENT, Role.GAVELIER_VP_PR, Role.T1_ADMIN, Role.T2_ADMIN, Role.MENTOR}),
        "read": frozenset({Role.STUDENT, Role.PARENT, Role.MENTOR, *_OFFICERS, Role.T1_ADMIN, Role.T2_ADMIN, Role.T3_MANAGER}),
        "update": frozenset({Role.GAVELIER_PRESIDENT, Role.GAVELIER_VP_PR, Role.T1_ADMIN, Role.T2_ADMIN, Role.MENTOR}),
        "delete": frozenset({Role.GAVELIER_PRESIDENT, Role.T1_ADMIN}),
    },
    "payments": {
        "create": frozenset({Role.PARENT, Role.GAVELIER_TREASURER, Role.T1_ADMIN}),
        "read": frozenset({Role.PARENT, Role.GAVELIER_TREASURER, Role.T1_ADMIN, Role.MENTOR}),
        "update": frozenset({Role.GAVELIER_TREASURER, Role.T1_ADMIN}),
        "delete": frozenset({Role.T1_ADMIN}),
    },
    "students": {
        "create": frozenset({Role.GAVELIER_VP_MEMBERSHIP, Role.T1_ADMIN, Role.T2_ADMIN, Role.MENTOR}),
        "read": frozenset({Role.STUDENT, Role.PARENT, Role.MENTOR, Role.GAVELIER_PRESIDENT, Role.GAVELIER_VP_EDUCATION,
                           Role.GAVELIER_VP_MEMBERSHIP, Role.T1_ADMIN, Role.T2_ADMIN}),
        "update": frozenset({Role.GAVELIER_VP_EDUCATION, Role.GAVELIER_VP_MEMBERSHIP, Role.T1_ADMIN, Role.T2_ADMIN, Role.MENTOR}),
        "delete": frozenset({Role.T1_ADMIN}),
    },
    "projects": {
        "create": frozenset({Role.STUDENT, Role.MENTOR, Role.GAVELIER_VP_EDUCATION, Role.T1_ADMIN, Role.T2_ADMIN}),
        "read": frozenset({Role.STUDENT, Role.PARENT, Role.MENTOR, Role.GAVELIER_PRESIDENT, Role.GAVELIER_VP_EDUCATION,
                           Role.T1_ADMIN, Role.T2_ADMIN}),
        "update": frozenset({Role.STUDENT, Role.MENTOR, Role.GAVELIER_VP_EDUCATION, Role.T1_ADMIN, Role.T2_ADMIN}),
        "delete": frozenset({Role.GAVELIER_VP_EDUCATION, Role.T1_ADMIN}),
    },
    "curriculum": {
        "create": frozenset({Role.MENTOR, Role.T1_ADMIN, Role.T2_ADMIN, Role.GAVELIER_VP_EDUCATION}),
        "read": frozenset({Role.STUDENT, Role.PARENT, Role.MENTOR, Role.GAVELIER_PRESIDENT, Role.GAVELIER_VP_EDUCATION,
                           Role.T1_ADMIN, Role.T2_ADMIN}),
        "update": frozenset({Role.MENTOR, Role.GAVELIER_VP_EDUCATION, Role.T1_ADMIN, Role.T2_ADMIN}),
        "delete": frozenset({Role.GAVELIER_VP_EDUCATION, Role.T1_ADMIN}),
    },
}

ADMIN_PANEL_ROLES = frozenset({*_OFFICERS, Role.ADMIN, Role.T1_ADMIN, Role.T2_ADMIN, Role.T3_MANAGER, Role.MENTOR})


def has_permission(role: RoleLike, resource: str, action: Action) -> bool:
    parsed = parse_role(role)
    rules = PERMISSIONS.get(resource)
    if parsed is None or rules is None:
        return False
    if parsed is Role.ADMIN:
        # the legacy single-tier admin keeps full rights
        return True
    return parsed in rules.get(action, frozenset())


def can_access_dashboard(role: RoleLike) -> bool:
    parsed = parse_role(role)
    return parsed is not None and parsed is not Role.GUEST


def can_access_admin_panel(role: RoleLike) -> bool:
    return parse_role(role) in ADMIN_PANEL_ROLES
