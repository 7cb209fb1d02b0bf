"""Credential hashing using Argon2 and SHA-256.

Passwords are hashed with Argon2id (salted, slow, non-deterministic).
Refresh-token secrets are stored as a SHA-256 digest instead: the store has
to look records up by digest, so the hash must be deterministic, and the
input is already a high-entropy signed token.
"""

import hashlib

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError

_hasher = PasswordHasher()

# Verified against when the email is unknown, so that a login for a missing
# user costs the same Argon2 verification as a login with a wrong password.
DUMMY_PASSWORD_HASH = _hasher.hash("notekeep-dummy-password")


def hash_password(password: str) -> str:
    """Hash a password using Argon2id.

    Args:
        password: The plaintext password to hash.

    Returns:
        The encoded Argon2 hash string.

    Example:
        >>> hash_password("pw1").startswith("$argon2id$")
        True
    """
    return _hasher.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    """Verify a password against a hash.

    A malformed or foreign hash yields ``False`` rather than an exception.

    Args:
        password: The plaintext password to verify.
        hashed: The stored hash to verify against.

    Returns:
        True if the password matches, False otherwise.
    """
    try:
        return _hasher.verify(hashed, password)
    except (VerifyMismatchError, VerificationError, InvalidHashError):
        return False


def needs_rehash(hashed: str) -> bool:
    """Check if a password hash was produced with outdated parameters."""
    try:
        return _hasher.check_needs_rehash(hashed)
    except InvalidHashError:
        return True


def hash_token(token: str) -> str:
    """Digest a raw refresh token for storage and lookup.

    Args:
        token: The raw token string handed to the client.

    Returns:
        SHA-256 hex digest of the token.
    """
    return hashlib.sha256(token.encode("utf-8")).hexdigest()
