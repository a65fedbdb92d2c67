"""
Credential Store
================

Flat-file store of warehouse users. Each line of the users file is one
credential record::

    username,base64(sha256(password)),RoleName

The store is the only component that reads or writes this file. Every
mutation reads the whole file, transforms the records in memory and
writes the whole file back. A file holding a malformed line is never
rewritten: every operation fails with a format error instead. There is
no locking: the file is owned by a single running process.

Listeners receive fire-and-forget notifications about logins, changes to
users' data and problems found in the file. The activity log subscribes
through this interface (see ``core.audit.AuditListener``).
"""

import logging
import os
from typing import Iterable, List, Optional

from ..exceptions import (
    StoreNotFoundError,
    CredentialFormatError,
    InvalidUsernameError,
    UserAlreadyExistsError,
    UserNotFoundError
)
from ..models.database import USERS_FILE_PATH
from ..models.entities import Role, User, validate_username
from .hashing import PasswordHasher, PasswordVerifier, hash_password, verify_password

logger = logging.getLogger(__name__)

FIELD_SEPARATOR = ','
RECORD_FIELDS = 3


class CredentialStoreListener:
    """
    Receiver of credential store notifications.

    Subclasses override the callbacks they care about. The defaults do
    nothing.
    """

    def password_verified(self, username: str, success: bool) -> None:
        """Called after every completed login attempt."""

    def user_data_changed(self, action: str, username: str) -> None:
        """Called after every successful change to the users file."""

    def file_error_found(self, problem: str) -> None:
        """Called when the users file is missing or corrupted."""


class CredentialStore:
    """
    Manages the username / password hash / role triples of the users file.

    Supports:
    - Registration, removal and editing of users
    - Listing users in file order
    - Password verification returning the user's role
    - Detection of a missing or corrupted users file
    """

    USERNAME_COLUMN = 0
    PASSWORD_COLUMN = 1
    ROLE_COLUMN = 2

    MISSING_FILE_PROBLEM = "the file was removed while the application was running"

    def __init__(
        self,
        path: str = USERS_FILE_PATH,
        listeners: Optional[Iterable[CredentialStoreListener]] = None,
        hasher: PasswordHasher = hash_password,
        verifier: Optional[PasswordVerifier] = None,
        create: bool = False
    ):
        """
        Initialize the store.

        Args:
            path: Location of the users file
            listeners: Receivers of login, change and file-error notifications
            hasher: Function turning a plaintext password into its stored form
            verifier: Function checking a plaintext password against a stored
                value; defaults to comparing the ``hasher`` digest
            create: Create an empty users file if none exists yet
        """
        self.path = path
        self.listeners: List[CredentialStoreListener] = list(listeners or [])
        self.hasher = hasher
        self.verifier = verifier or self._verify_with_hasher

        if create and not self.exists():
            self.create()

    def _verify_with_hasher(self, password: str, stored_hash: str) -> bool:
        return verify_password(password, stored_hash, hasher=self.hasher)

    def add_listener(self, listener: CredentialStoreListener):
        """Subscribe a listener to the store's notifications."""
        self.listeners.append(listener)

    # ------------------------------------------------------------------
    # File handling
    # ------------------------------------------------------------------

    def exists(self) -> bool:
        """True if the users file is present (it may still be empty)."""
        return os.path.isfile(self.path)

    def create(self):
        """Create an empty users file, including missing directories."""
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)
        if not self.exists():
            logger.info("Users file %s does not exist, creating a new one", self.path)
            open(self.path, 'a', encoding='utf-8').close()

    def _read_records(self) -> List[List[str]]:
        """
        Read every line of the users file, split into fields.

        A blank line is a record with a single empty field, so it is
        rejected like any other malformed record.

        Raises:
            StoreNotFoundError: if the file is missing
            CredentialFormatError: if any record does not have exactly 3 fields
        """
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                lines = f.read().splitlines()
        except FileNotFoundError:
            self._emit('file_error_found', self.MISSING_FILE_PROBLEM)
            raise StoreNotFoundError(self.path) from None

        records = [line.split(FIELD_SEPARATOR) for line in lines]
        for fields in records:
            if len(fields) != RECORD_FIELDS:
                self._emit('file_error_found', "an anomaly was detected in number of users' data")
                raise CredentialFormatError("Error: An anomaly was detected in the system data!")
        return records

    def _write_records(self, records: List[List[str]]):
        """Rewrite the users file with the given records, one per line."""
        content = ''.join(FIELD_SEPARATOR.join(fields) + '\n' for fields in records)
        with open(self.path, 'w', encoding='utf-8', newline='\n') as f:
            f.write(content)
        logger.debug("Rewrote %s with %d record(s)", self.path, len(records))

    @staticmethod
    def _find_index(records: List[List[str]], username: str) -> Optional[int]:
        """Position of the first record with the given username."""
        for index, fields in enumerate(records):
            if fields[0] == username:
                return index
        return None

    def _parse_role(self, fields: List[str]) -> Role:
        """
        Parse the role field of a record.

        Raises:
            CredentialFormatError: if the role is unknown
        """
        try:
            return Role.parse(fields[self.ROLE_COLUMN])
        except KeyError:
            self._emit(
                'file_error_found',
                f"incorrect user's role was found in users file for user {fields[0]}"
            )
            raise CredentialFormatError(
                f"Error: Incorrect user's role was found in users file for user {fields[0]}"
            ) from None

    def _emit(self, event: str, *args):
        """Deliver a notification to every listener. Failures are logged only."""
        for listener in self.listeners:
            handler = getattr(listener, event, None)
            if handler is None:
                continue
            try:
                handler(*args)
            except Exception:
                logger.exception("Listener %r failed while handling %s", listener, event)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def has_any_user(self) -> bool:
        """
        Check whether any user has been registered.

        Used at startup to decide between the login screen and the
        registration of the first administrator.

        Returns:
            True if the file holds at least one record

        Raises:
            StoreNotFoundError: if the file is missing
            CredentialFormatError: if any record does not have exactly 3 fields
        """
        return len(self._read_records()) > 0

    def get_all_users(self) -> List[User]:
        """
        Get every user in the system, in file order.

        Raises:
            StoreNotFoundError: if the file is missing
            CredentialFormatError: if any record is malformed, has an unknown
                role or a username that is not allowed
        """
        users = []
        for fields in self._read_records():
            role = self._parse_role(fields)
            try:
                users.append(User(fields[self.USERNAME_COLUMN], role))
            except InvalidUsernameError:
                self._emit(
                    'file_error_found',
                    f"incorrect username was found in users file: {fields[self.USERNAME_COLUMN]!r}"
                )
                raise CredentialFormatError(
                    f"Error: Incorrect username was found in users file: "
                    f"{fields[self.USERNAME_COLUMN]!r}"
                ) from None
        return users

    def verify_password_and_get_role(self, username: str, password: str) -> Optional[Role]:
        """
        Check a login attempt.

        Args:
            username: Name typed by the user
            password: Plaintext password typed by the user

        Returns:
            The user's role if the password matches, None for an unknown
            user or a wrong password

        Raises:
            StoreNotFoundError: if the file is missing
            CredentialFormatError: if the file is malformed or the matching
                record has an unknown role
        """
        for fields in self._read_records():
            if fields[self.USERNAME_COLUMN] != username:
                continue
            if self.verifier(password, fields[self.PASSWORD_COLUMN]):
                role = self._parse_role(fields)
                self._emit('password_verified', username, True)
                return role

        self._emit('password_verified', username, False)
        return None

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def save_new_user(self, username: str, password: str, role: Role):
        """
        Register a new user.

        The username is expected to be validated already, by building a
        ``User`` for it.

        Raises:
            StoreNotFoundError: if the file is missing
            UserAlreadyExistsError: if the username is taken
        """
        records = self._read_records()
        if self._find_index(records, username) is not None:
            raise UserAlreadyExistsError(username)

        records.append([username, self.hasher(password), role.name])
        self._write_records(records)
        logger.info("User %s has been saved", username)
        self._emit('user_data_changed', "added a new user", username)

    def create_first_administrator(self, username: str, password: str) -> User:
        """
        Register the first administrator of an empty system.

        Raises:
            InvalidUsernameError: if the username is not allowed
            StoreNotFoundError: if the file is missing
            UserAlreadyExistsError: if any user is registered already
        """
        user = User(username, Role.Administrator)
        if self.has_any_user():
            raise UserAlreadyExistsError(username)
        self.save_new_user(user.username, password, user.role)
        return user

    def delete_user(self, username: str):
        """
        Remove the first record with the given username.

        Raises:
            StoreNotFoundError: if the file is missing
            UserNotFoundError: if no such user exists
        """
        records = self._read_records()
        index = self._find_index(records, username)
        if index is None:
            raise UserNotFoundError(username)

        del records[index]
        self._write_records(records)
        logger.info("User %s has been deleted", username)
        self._emit('user_data_changed', "deleted a user", username)

    def overwrite_user_data(self, username: str, new_data: str, column: int):
        """
        Replace one field of a user's record.

        Args:
            username: User whose record is changed
            new_data: Value written into the field
            column: USERNAME_COLUMN, PASSWORD_COLUMN or ROLE_COLUMN

        Raises:
            StoreNotFoundError: if the file is missing
            UserNotFoundError: if no such user exists
            CredentialFormatError: if the file holds a malformed record
        """
        records = self._read_records()
        index = self._find_index(records, username)
        if index is None:
            raise UserNotFoundError(username)

        fields = records[index]
        if len(fields) != RECORD_FIELDS:
            self._emit('file_error_found', "an anomaly was detected in number of users' data")
            raise CredentialFormatError("Error: An anomaly was detected in the system data!")

        fields[column] = new_data
        self._write_records(records)

    def change_username(self, username: str, new_username: str):
        """
        Rename a user, keeping their password hash and role.

        Raises:
            InvalidUsernameError: if the new name is not allowed (checked first)
            StoreNotFoundError: if the file is missing
            UserNotFoundError: if no such user exists
            UserAlreadyExistsError: if another user already has the new name
        """
        validate_username(new_username)

        if new_username != username:
            records = self._read_records()
            if self._find_index(records, username) is not None \
                    and self._find_index(records, new_username) is not None:
                raise UserAlreadyExistsError(new_username)

        self.overwrite_user_data(username, new_username, self.USERNAME_COLUMN)
        self._emit('user_data_changed', f"changed user's name to {new_username}", username)

    def change_user_password(self, username: str, password: str):
        """Replace a user's password hash."""
        self.overwrite_user_data(username, self.hasher(password), self.PASSWORD_COLUMN)
        self._emit('user_data_changed', "changed user's password", username)

    def change_user_role(self, username: str, role: Role):
        """Replace a user's role."""
        self.overwrite_user_data(username, role.name, self.ROLE_COLUMN)
        self._emit('user_data_changed', "changed user's role", username)
