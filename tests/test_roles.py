"""Role resolution, route gating and the resource permission matrix."""
import pytest

from academy.core.permissions import can_access_admin_panel, can_access_dashboard, has_permission
from academy.core.roles import LANDING_ROUTES, Role, guard_path, is_admin, landing_route, parse_role


class TestLandingRoute:
    @pytest.mark.parametrize("role,expected", [
        (Role.STUDENT, "/student/dashboard"),
        (Role.PARENT, "/parent/dashboard"),
        (Role.INSTRUCTOR, "/instructor/dashboard"),
        (Role.MENTOR, "/mentor/dashboard"),
        (Role.ADMIN, "/admin"),
        (Role.T1_ADMIN, "/admin"),
        (Role.T2_ADMIN, "/admin"),
        (Role.T3_MANAGER, "/dashboard"),
        (Role.GAVELIER_TREASURER, "/dashboard"),
        (Role.GUEST, "/dashboard"),
    ])
    def test_known_roles(self, role, expected):
        assert landing_route(role) == expected

    def test_every_role_has_exactly_one_route(self):
        assert set(LANDING_ROUTES) == set(Role)
        for role in Role:
            assert landing_route(role).startswith("/")

    @pytest.mark.parametrize("value", [None, "", "SUPERUSER", "coach"])
    def test_unknown_roles_fall_back_to_dashboard(self, value):
        assert landing_route(value) == "/dashboard"

    def test_role_strings_are_case_insensitive(self):
        assert parse_role("parent") is Role.PARENT
        assert landing_route(" student ") == "/student/dashboard"


class TestGuardPath:
    def test_public_pages_never_redirect(self):
        for path in ["/", "/about", "/events", "/events/3", "/classes/7", "/login", "/signup"]:
            assert guard_path(path, None) is None

    def test_anonymous_users_go_to_login(self):
        assert guard_path("/dashboard", None) == "/login"
        assert guard_path("/admin/users", None) == "/login"
        assert guard_path("/parent/dashboard", "") == "/login"

    @pytest.mark.parametrize("role", [Role.STUDENT, Role.PARENT, Role.MENTOR, Role.T3_MANAGER, Role.GUEST])
    def test_non_admins_are_sent_home_from_admin(self, role):
        assert guard_path("/admin", role) == "/"
        assert guard_path("/admin/enrollments/", role) == "/"

    @pytest.mark.parametrize("role", [Role.ADMIN, Role.T1_ADMIN, Role.T2_ADMIN])
    def test_admins_reach_admin(self, role):
        assert guard_path("/admin/classes", role) is None

    def test_generic_dashboard_resolves_by_role(self):
        assert guard_path("/dashboard", Role.PARENT) == "/parent/dashboard"
        assert guard_path("/dashboard", Role.T1_ADMIN) == "/admin"
        # roles without a dedicated area stay put, so resolution settles
        assert guard_path("/dashboard", Role.GUEST) is None

    def test_resolution_is_idempotent(self):
        for role in Role:
            target = guard_path("/dashboard", role) or "/dashboard"
            assert guard_path(target, role) is None

    def test_is_admin(self):
        assert is_admin("T2_ADMIN")
        assert not is_admin(Role.T3_MANAGER)
        assert not is_admin(None)


class TestPermissions:
    def test_matrix(self):
        assert has_permission(Role.GAVELIER_TREASURER, "payments", "update")
        assert not has_permission(Role.STUDENT, "payments", "read")
        assert has_permission(Role.MENTOR, "curriculum", "create")
        assert not has_permission(Role.PARENT, "curriculum", "create")

    def test_legacy_admin_has_everything(self):
        assert has_permission(Role.ADMIN, "students", "delete")

    def test_unknown_resource_or_role(self):
        assert not has_permission(Role.T1_ADMIN, "gallery", "read")
        assert not has_permission("NOBODY", "events", "read")

    def test_panels(self):
        assert can_access_dashboard(Role.STUDENT)
        assert not can_access_dashboard(Role.GUEST)
        assert can_access_admin_panel(Role.GAVELIER_VP_PR)
        assert not can_access_admin_panel(Role.PARENT)


def test_client_dashboard_link_follows_landing_routes():
    from academy.client import dashboard_link
    assert dashboard_link("parent") == "/parent/dashboard"
    assert dashboard_link(None) == "/dashboard"
