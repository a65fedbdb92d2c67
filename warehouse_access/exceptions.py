"""
Credential Store Errors
=======================

Every failure of the credential store derives from CredentialStoreError.
The concrete classes also inherit the matching builtin exception, so a
caller may catch either ``StoreNotFoundError`` or ``FileNotFoundError``.

A failed password verification is not an error: it returns ``None``.
"""


class CredentialStoreError(Exception):
    """Base class for credential store failures."""


class StoreNotFoundError(CredentialStoreError, FileNotFoundError):
    """The users file is missing at call time."""

    def __init__(self, path):
        self.path = path
        super().__init__(f"The users file {path} was removed while the application was running!")


class CredentialFormatError(CredentialStoreError, ValueError):
    """A record does not hold exactly three fields, or its role is unknown."""


class UserAlreadyExistsError(CredentialStoreError):
    """The username is already taken."""

    def __init__(self, username: str):
        self.username = username
        super().__init__(f"User {username} already exists in the system")


class UserNotFoundError(CredentialStoreError, LookupError):
    """No record holds the given username."""

    def __init__(self, username: str):
        self.username = username
        super().__init__(f"User {username} does not exist in the system")


class InvalidUsernameError(CredentialStoreError, ValueError):
    """The username is empty or contains characters outside the allowed set."""
