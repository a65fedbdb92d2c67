"""
Role-Based Access Control (RBAC) Engine
========================================

Decides which parts of the warehouse system a user may reach. Every role
maps to a fixed set of permissions:

- Administrator: manages users and reads the activity log
- WarehouseManager: browses the warehouse and shipments, assigns tasks
- Logistician: manages shipments
- Warehouseman: browses the warehouse and shipments, does assigned tasks

The table is built once and never changes, so one engine can be shared
by every caller. No I/O is performed.
"""

from types import MappingProxyType
from typing import Dict, FrozenSet, List, Mapping, Optional, TypeVar

from ..models.entities import Permission, Role, User

T = TypeVar('T')

ROLE_PERMISSIONS: Mapping[Role, FrozenSet[Permission]] = MappingProxyType({
    Role.Administrator: frozenset({
        Permission.ManageUsers,
        Permission.ViewLogs
    }),
    Role.WarehouseManager: frozenset({
        Permission.BrowseWarehouse,
        Permission.AssignTask,
        Permission.BrowseShipments
    }),
    Role.Logistician: frozenset({
        Permission.ManageShipments
    }),
    Role.Warehouseman: frozenset({
        Permission.BrowseWarehouse,
        Permission.DoTasks,
        Permission.BrowseShipments
    }),
})


class RBACEngine:
    """
    RBAC decision engine over a static role -> permissions table.

    Supports:
    - Permission checks for a user
    - Listing a role's permissions
    - Filtering menu options down to the ones a user may see
    """

    def __init__(self, role_permissions: Optional[Mapping[Role, FrozenSet[Permission]]] = None):
        """
        Initialize RBAC engine.

        Args:
            role_permissions: Role -> permissions table, ROLE_PERMISSIONS by default
        """
        if role_permissions is None:
            role_permissions = ROLE_PERMISSIONS
        self._role_permissions = MappingProxyType({
            role: frozenset(permissions) for role, permissions in role_permissions.items()
        })

    @property
    def role_permissions(self) -> Mapping[Role, FrozenSet[Permission]]:
        """Read-only view of the permission table."""
        return self._role_permissions

    def has_permission(self, user: User, permission: Permission) -> bool:
        """
        Check if a user has the specified permission.

        Args:
            user: The user whose role is checked
            permission: The permission being checked

        Returns:
            True if the user's role grants the permission
        """
        return permission in self._role_permissions.get(user.role, frozenset())

    def get_permissions(self, role: Role) -> FrozenSet[Permission]:
        """All permissions granted to a role (empty for unknown roles)."""
        return self._role_permissions.get(role, frozenset())

    def allowed_options(self, user: User, options: Dict[Permission, T]) -> List[T]:
        """
        Keep the options the user is permitted to see.

        Args:
            user: The logged in user
            options: Menu options keyed by the permission that unlocks them

        Returns:
            Permitted options, in the order they were given
        """
        return [
            option for permission, option in options.items()
            if self.has_permission(user, permission)
        ]
