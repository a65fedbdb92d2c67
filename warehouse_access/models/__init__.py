# Warehouse Access - Models
# Value types shared by the credential store and RBAC, plus the activity log schema

from .database import (
    Base,
    DATA_DIR,
    USERS_FILE_PATH,
    DATABASE_URL,
    create_db_engine,
    create_session_factory,
    get_session,
    init_db,
    reset_db
)
from .entities import (
    Role,
    Permission,
    User,
    ActivityLog,
    LogLevel,
    validate_username
)

__all__ = [
    'Base',
    'DATA_DIR',
    'USERS_FILE_PATH',
    'DATABASE_URL',
    'create_db_engine',
    'create_session_factory',
    'get_session',
    'init_db',
    'reset_db',
    'Role',
    'Permission',
    'User',
    'ActivityLog',
    'LogLevel',
    'validate_username'
]
