"""
Tests for RBACEngine and the role -> permissions table
"""

import pytest

from warehouse_access.core.rbac_engine import ROLE_PERMISSIONS, RBACEngine
from warehouse_access.models.entities import Permission, Role, User


@pytest.fixture
def rbac():
    return RBACEngine()


class TestHasPermission:
    """Test permission checks"""

    def test_administrator_views_logs(self, rbac):
        assert rbac.has_permission(User("Admin", Role.Administrator), Permission.ViewLogs) is True

    def test_administrator_cannot_assign_tasks(self, rbac):
        assert rbac.has_permission(User("Admin", Role.Administrator), Permission.AssignTask) is False

    @pytest.mark.parametrize("role, granted", [
        (Role.Administrator, {Permission.ManageUsers, Permission.ViewLogs}),
        (Role.WarehouseManager, {Permission.BrowseWarehouse, Permission.AssignTask,
                                 Permission.BrowseShipments}),
        (Role.Logistician, {Permission.ManageShipments}),
        (Role.Warehouseman, {Permission.BrowseWarehouse, Permission.DoTasks,
                             Permission.BrowseShipments}),
    ])
    def test_full_table(self, rbac, role, granted):
        user = User("someone", role)
        for permission in Permission:
            assert rbac.has_permission(user, permission) is (permission in granted)

    def test_role_missing_from_table(self):
        rbac = RBACEngine({Role.Administrator: {Permission.ManageUsers}})

        assert rbac.has_permission(User("worker", Role.Warehouseman), Permission.DoTasks) is False


class TestTable:
    """Test the permission table itself"""

    def test_every_role_is_configured(self):
        assert set(ROLE_PERMISSIONS) == set(Role)

    def test_table_is_read_only(self):
        with pytest.raises(TypeError):
            ROLE_PERMISSIONS[Role.Logistician] = frozenset(Permission)

    def test_engine_copies_custom_table(self):
        table = {Role.Logistician: {Permission.ManageShipments}}
        rbac = RBACEngine(table)

        table[Role.Logistician].add(Permission.ManageUsers)

        assert rbac.get_permissions(Role.Logistician) == frozenset({Permission.ManageShipments})

    def test_get_permissions(self, rbac):
        assert rbac.get_permissions(Role.Logistician) == frozenset({Permission.ManageShipments})


class TestAllowedOptions:
    """Test menu filtering"""

    def test_keeps_permitted_options_in_order(self, rbac):
        options = {
            Permission.BrowseWarehouse: "Warehouse",
            Permission.AssignTask: "Assign task",
            Permission.DoTasks: "Do tasks",
            Permission.ManageShipments: "Shipments",
            Permission.BrowseShipments: "Browse shipments",
            Permission.ManageUsers: "Manage users",
            Permission.ViewLogs: "View logs",
        }

        assert rbac.allowed_options(User("worker", Role.Warehouseman), options) == [
            "Warehouse", "Do tasks", "Browse shipments"
        ]
        assert rbac.allowed_options(User("Admin", Role.Administrator), options) == [
            "Manage users", "View logs"
        ]
