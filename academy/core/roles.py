# academy/core/roles.py
"""Role resolution: role -> landing route, and path gating per role."""
from enum import Enum
from typing import Optional, Union


class Role(str, Enum):
    STUDENT = "STUDENT"
    PARENT = "PARENT"
    MENTOR = "MENTOR"
    INSTRUCTOR = "INSTRUCTOR"
    ADMIN = "ADMIN"
    T1_ADMIN = "T1_ADMIN"
    T2_ADMIN = "T2_ADMIN"
    T3_MANAGER = "T3_MANAGER"
    GAVELIER_PRESIDENT = "GAVELIER_PRESIDENT"
    GAVELIER_TREASURER = "GAVELIER_TREASURER"
    GAVELIER_SECRETARY = "GAVELIER_SECRETARY"
    GAVELIER_VP_EDUCATION = "GAVELIER_VP_EDUCATION"
    GAVELIER_VP_MEMBERSHIP = "GAVELIER_VP_MEMBERSHIP"
    GAVELIER_VP_PR = "GAVELIER_VP_PR"
    GUEST = "GUEST"


ADMIN_ROLES = frozenset({Role.ADMIN, Role.T1_ADMIN, Role.T2_ADMIN})

FALLBACK_ROUTE = "/dashboard"
LOGIN_ROUTE = "/login"
HOME_ROUTE = "/"

# Every role has an entry; roles without a dedicated area land on the generic
# dashboard, which resolves further by role.
LANDING_ROUTES: dict[Role, str] = {
    Role.STUDENT: "/student/dashboard",
    Role.PARENT: "/parent/dashboard",
    Role.INSTRUCTOR: "/instructor/dashboard",
    Role.MENTOR: "/mentor/dashboard",
    Role.ADMIN: "/admin",
    Role.T1_ADMIN: "/admin",
    Role.T2_ADMIN: "/admin",
    Role.T3_MANAGER: FALLBACK_ROUTE,
    Role.GAVELIER_PRESIDENT: FALLBACK_ROUTE,
    Role.GAVELIER_TREASURER: FALLBACK_ROUTE,
    Role.GAVELIER_SECRETARY: FALLBACK_ROUTE,
    Role.GAVELIER_VP_EDUCATION: FALLBACK_ROUTE,
    Role.GAVELIER_VP_MEMBERSHIP: FALLBACK_ROUTE,
    Role.GAVELIER_VP_PR: FALLBACK_ROUTE,
    Role.GUEST: FALLBACK_ROUTE,
}

_missing = set(Role) - set(LANDING_ROUTES)
if _missing:
    raise RuntimeError(f"Landing route missing for roles: {sorted(r.value for r in _missing)}")

PUBLIC_PATHS = frozenset({"/", "/about", "/events", "/contact", "/schedule", "/login", "/signup", "/register"})
PUBLIC_PREFIXES = ("/classes", "/events/", "/gallery")

RoleLike = Union[Role, str, None]


def parse_role(value: RoleLike) -> Optional[Role]:
    if isinstance(value, Role):
        return value
    if not value:
        return None
    try:
        return Role(str(value).strip().upper())
    except ValueError:
        return None


def landing_route(role: RoleLike) -> str:
    parsed = parse_role(role)
    if parsed is None:
        return FALLBACK_ROUTE
    return LANDING_ROUTES[parsed]


def is_admin(role: RoleLike) -> bool:
    return parse_role(role) in ADMIN_ROLES


def _is_public(path: str) -> bool:
    return path in PUBLIC_PATHS or path.startswith(PUBLIC_PREFIXES)


def guard_path(path: str, role: RoleLike) -> Optional[str]:
    """Redirect target for a navigation to `path`, or None when it may proceed.

    A missing role means no session.
    """
    path = "/" + path.strip().lstrip("/") if path else HOME_ROUTE
    if len(path) > 1:
        path = path.rstrip("/")
    if _is_public(path):
        return None

    if not role:
        return LOGIN_ROUTE

    if path == "/admin" or path.startswith("/admin/"):
        return None if is_admin(role) else HOME_ROUTE

    if path == FALLBACK_ROUTE:
        target = landing_route(role)
        return None if target == FALLBACK_ROUTE else target

    return None
