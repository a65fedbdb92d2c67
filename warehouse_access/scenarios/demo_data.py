"""
Demo Data Loader
================

Registers one demo account per warehouse role so the permission gates
of every part of the system can be tried out:

- admin (Administrator)
- manager (WarehouseManager)
- logistician (Logistician)
- worker (Warehouseman)

All demo accounts share the password DEMO_PASSWORD.
"""

from typing import List, Tuple

from ..core.credential_store import CredentialStore
from ..exceptions import UserAlreadyExistsError
from ..models.entities import Role, User

DEMO_PASSWORD = "demo123"

DEMO_USERS: List[Tuple[str, Role]] = [
    ("admin", Role.Administrator),
    ("manager", Role.WarehouseManager),
    ("logistician", Role.Logistician),
    ("worker", Role.Warehouseman),
]


def load_demo_data(store: CredentialStore) -> List[User]:
    """
    Register the demo accounts.

    Accounts that already exist are left untouched, so loading twice is
    harmless.

    Args:
        store: Credential store to register the accounts in

    Returns:
        The demo users that were newly created
    """
    if not store.exists():
        store.create()

    created = []
    for username, role in DEMO_USERS:
        user = User(username, role)
        try:
            store.save_new_user(user.username, DEMO_PASSWORD, user.role)
        except UserAlreadyExistsError:
            continue
        created.append(user)

    return created
