"""Shared fixtures: isolated users files and activity log databases."""

import pytest

from warehouse_access.core.credential_store import CredentialStore, CredentialStoreListener
from warehouse_access.models.database import create_db_engine, create_session_factory, init_db

ADMIN_LINE = "Admin,Ngi8oeROpsTSaOttsCJgJpiSwLQrhrvx53pvoWw8koI=,Administrator"
XYZ_HASH = "Ngi8oeROpsTSaOttsCJgJpiSwLQrhrvx53pvoWw8koI="
XYZ2_HASH = "y9MASH6J3z3QKtgfY4r969N5KZfmkwdsoelYcftQCp8="


class RecordingListener(CredentialStoreListener):
    """Collects every notification the store sends."""

    def __init__(self):
        self.events = []

    def password_verified(self, username, success):
        self.events.append(('password_verified', username, success))

    def user_data_changed(self, action, username):
        self.events.append(('user_data_changed', action, username))

    def file_error_found(self, problem):
        self.events.append(('file_error_found', problem))


@pytest.fixture
def users_file(tmp_path):
    """Empty users file in a temporary directory"""
    path = tmp_path / "users.txt"
    path.write_text("", encoding="utf-8")
    return path


@pytest.fixture
def missing_users_file(tmp_path):
    """Path of a users file that does not exist"""
    return tmp_path / "missing" / "users.txt"


@pytest.fixture
def listener():
    return RecordingListener()


@pytest.fixture
def store(users_file, listener):
    return CredentialStore(str(users_file), listeners=[listener])


@pytest.fixture
def missing_store(missing_users_file, listener):
    return CredentialStore(str(missing_users_file), listeners=[listener])


@pytest.fixture
def session_factory(tmp_path):
    """Session factory for an activity log database in a temporary directory"""
    engine = init_db(create_db_engine(f"sqlite:///{tmp_path / 'activity.db'}"))
    yield create_session_factory(engine)
    engine.dispose()
