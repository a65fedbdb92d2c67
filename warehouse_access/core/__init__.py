# Warehouse Access - Core Modules
# Credential store, RBAC engine and activity log

from .hashing import hash_password, verify_password
from .credential_store import CredentialStore, CredentialStoreListener
from .rbac_engine import RBACEngine, ROLE_PERMISSIONS
from .audit import ActivityLogger, AuditListener
from .access_control import WarehouseAccessControl

__all__ = [
    'hash_password',
    'verify_password',
    'CredentialStore',
    'CredentialStoreListener',
    'RBACEngine',
    'ROLE_PERMISSIONS',
    'ActivityLogger',
    'AuditListener',
    'WarehouseAccessControl'
]
