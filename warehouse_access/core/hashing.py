"""
Password Hashing
================

The users file stores base64(SHA-256(password)). The digest is unsalted,
so existing files stay readable; hashing is kept behind these two
functions so the credential store can be given a salted scheme instead.
"""

import base64
import hashlib
import hmac
from typing import Callable

PasswordHasher = Callable[[str], str]
PasswordVerifier = Callable[[str, str], bool]


def hash_password(password: str) -> str:
    """
    Hash a password for storage.

    Args:
        password: Plaintext password

    Returns:
        Base64-encoded SHA-256 digest of the UTF-8 encoded password
    """
    digest = hashlib.sha256(password.encode('utf-8')).digest()
    return base64.b64encode(digest).decode('ascii')


def verify_password(password: str, stored_hash: str, hasher: PasswordHasher = hash_password) -> bool:
    """Check a plaintext password against a stored digest in constant time."""
    return hmac.compare_digest(hasher(password).encode('utf-8'), stored_hash.encode('utf-8'))
