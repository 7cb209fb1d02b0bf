"""Authentication infrastructure components.

Password and token hashing, the JWT codec, and the per-request
authenticator.
"""

from notekeep.infrastructure.auth.authenticator import Authenticator
from notekeep.infrastructure.auth.jwt_service import (
    ACCESS_TOKEN_TTL,
    REFRESH_TOKEN_TTL,
    JWTService,
)
from notekeep.infrastructure.auth.password_hasher import (
    DUMMY_PASSWORD_HASH,
    hash_password,
    hash_token,
    needs_rehash,
    verify_password,
)
from notekeep.infrastructure.auth.token_types import (
    AuthenticatedUser,
    TokenClaims,
    TokenKind,
    TokenPair,
)

__all__ = [
    "ACCESS_TOKEN_TTL",
    "AuthenticatedUser",
    "Authenticator",
    "DUMMY_PASSWORD_HASH",
    "JWTService",
    "REFRESH_TOKEN_TTL",
    "TokenClaims",
    "TokenKind",
    "TokenPair",
    "hash_password",
    "hash_token",
    "needs_rehash",
    "verify_password",
]
