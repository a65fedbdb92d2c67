"""
Warehouse Access Control
========================

Wires the credential store, the RBAC engine and the activity log together
behind one interface for the screens of the warehouse system:

- login: verify a password and build the session's User
- check_access: RBAC decision with a human readable reason
- every login attempt and every change to users' data is logged
"""

from typing import Optional, Tuple

from sqlalchemy.orm import sessionmaker

from ..models.database import USERS_FILE_PATH
from ..models.entities import Permission, User
from .audit import AuditListener
from .credential_store import CredentialStore
from .rbac_engine import RBACEngine


class WarehouseAccessControl:
    """
    Unified access control for the warehouse system.

    Owns a CredentialStore whose notifications go to the activity log and
    an RBACEngine for permission checks.
    """

    def __init__(
        self,
        session_factory: sessionmaker,
        users_file: str = USERS_FILE_PATH,
        rbac: Optional[RBACEngine] = None,
        create: bool = True
    ):
        """
        Initialize warehouse access control.

        Args:
            session_factory: Sessions for the activity log database
            users_file: Location of the users file
            rbac: Permission engine (default table if omitted)
            create: Create the users file if it does not exist yet
        """
        self.session_factory = session_factory
        self.store = CredentialStore(
            users_file,
            listeners=[AuditListener(session_factory)],
            create=create
        )
        self.rbac = rbac or RBACEngine()

    def needs_first_administrator(self) -> bool:
        """True while no user has been registered."""
        return not self.store.has_any_user()

    def login(self, username: str, password: str) -> Optional[User]:
        """
        Authenticate a user.

        Returns:
            The logged in User, or None for a wrong username or password
        """
        role = self.store.verify_password_and_get_role(username, password)
        if role is None:
            return None
        return User(username, role)

    def check_access(self, user: User, permission: Permission) -> Tuple[bool, str]:
        """
        Check if a user may use a part of the system.

        Returns:
            Tuple of (granted, reason_string)
        """
        if self.rbac.has_permission(user, permission):
            return True, f"Permission '{permission}' granted to role '{user.role.name}'"
        return False, f"Permission '{permission}' not granted to role '{user.role.name}'"
