"""
Entity Models for Warehouse Access
==================================

Value types shared by the credential store and the RBAC engine:

- Role: the job a warehouse user holds (Administrator, Logistician, ...)
- Permission: a capability gate checked against a role
- User: runtime identity built from a verified credential record

Plus the one persisted entity of this package:

- ActivityLog: audit trail of logins and changes to users' data
"""

import enum
import re
from datetime import datetime
from typing import Union

from sqlalchemy import Column, Integer, String, DateTime, Text, Enum as SQLEnum

from .database import Base
from ..exceptions import InvalidUsernameError

# Latin letters, digits, '_', '.' and the Polish accented letters
USERNAME_PATTERN = re.compile(r'^[a-zA-Z0-9_.ąćęłńóśźżĄĆĘŁŃÓŚŹŻ]+$')


class Role(enum.Enum):
    """Roles a user can hold. Stored in the users file by member name."""
    Administrator = 1
    Warehouseman = 2
    Logistician = 3
    WarehouseManager = 4

    @classmethod
    def parse(cls, name: str) -> "Role":
        """
        Look up a role by name, ignoring case.

        Raises:
            KeyError: if no role has that name
        """
        wanted = name.strip().lower()
        for role in cls:
            if role.name.lower() == wanted:
                return role
        raise KeyError(name)

    def __str__(self):
        return self.name


class Permission(enum.Enum):
    """Capabilities that unlock parts of the warehouse system."""
    BrowseWarehouse = "BrowseWarehouse"
    AssignTask = "AssignTask"
    DoTasks = "DoTasks"
    ManageShipments = "ManageShipments"
    BrowseShipments = "BrowseShipments"
    ManageUsers = "ManageUsers"
    ViewLogs = "ViewLogs"

    def __str__(self):
        return self.value


def validate_username(username: str) -> str:
    """
    Check a username against the allowed alphabet.

    Raises:
        InvalidUsernameError: if the name is empty or has forbidden characters
    """
    if not username:
        raise InvalidUsernameError("The username must not be empty!")
    if not USERNAME_PATTERN.fullmatch(username):
        raise InvalidUsernameError(
            "The username can only contain letters, numbers, characters '_' and '.'!"
        )
    return username


class User:
    """
    A warehouse user for the duration of a session.

    Built from a verified credential record, or transiently while a user
    is registered or edited. Not persisted directly; the users file is the
    source of truth.
    """

    def __init__(self, username: str, role: Union[Role, str]):
        self.username = username
        self.role = role if isinstance(role, Role) else Role.parse(role)

    @property
    def username(self) -> str:
        return self._username

    @username.setter
    def username(self, value: str):
        self._username = validate_username(value)

    def __eq__(self, other):
        if not isinstance(other, User):
            return NotImplemented
        return self.username == other.username and self.role == other.role

    def __hash__(self):
        return hash((self.username, self.role))

    def __repr__(self):
        return f"<User(username='{self.username}', role={self.role.name})>"

    def __str__(self):
        return f"Username: {self.username}, Role: {self.role.name}"


# ============================================================================
# Activity Logging
# ============================================================================

class LogLevel(enum.Enum):
    """Severity of an activity log entry."""
    INFO = "Info"
    WARNING = "Warning"
    ERROR = "Error"

    def __str__(self):
        return self.value


class ActivityLog(Base):
    """
    One entry of the activity log.

    Records logins (successful or not), every change made to users' data
    and problems found in the users file. Read by holders of the
    ViewLogs permission.
    """
    __tablename__ = 'activity_logs'

    id = Column(Integer, primary_key=True, autoincrement=True)
    timestamp = Column(DateTime, default=datetime.now, index=True)
    level = Column(SQLEnum(LogLevel), nullable=False, default=LogLevel.INFO)
    message = Column(Text, nullable=False)
    username = Column(String(100))  # Subject of the entry, if any

    def render(self) -> str:
        """Format as ``[yyyy-MM-dd HH:mm:ss] Level: message``."""
        stamp = self.timestamp.strftime("%Y-%m-%d %H:%M:%S") if self.timestamp else "-"
        return f"[{stamp}] {self.level.value}: {self.message}"

    def __repr__(self):
        return f"<ActivityLog(id={self.id}, level={self.level}, username='{self.username}')>"
