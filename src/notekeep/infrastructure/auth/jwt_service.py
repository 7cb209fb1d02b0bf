"""JWT token codec.

Creates and parses HS256-signed access and refresh tokens. Every token
carries the subject (user ID), a ``type`` discriminator, ``iat``/``exp``
timestamps and a random ``jti``.

Parsing never raises for bad input: a token that is malformed, badly
signed, missing claims or expired yields ``None``, and callers treat all of
those outcomes the same way.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Callable

import jwt
from pydantic import ValidationError

from notekeep.core.logging import get_logger
from notekeep.infrastructure.auth.token_types import TokenClaims, TokenKind

logger = get_logger(__name__)

ACCESS_TOKEN_TTL = timedelta(minutes=15)
REFRESH_TOKEN_TTL = timedelta(days=30)

DEFAULT_TTLS = {
    TokenKind.ACCESS: ACCESS_TOKEN_TTL,
    TokenKind.REFRESH: REFRESH_TOKEN_TTL,
}


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class JWTService:
    """Issue and verify NoteKeep JWTs with a process-wide symmetric key.

    The key is handed in once at construction and never changes; the
    service holds no other state, so one instance is shared by all requests.
    """

    ALGORITHM = "HS256"
    REQUIRED_CLAIMS = ["sub", "type", "iat", "exp", "jti"]

    def __init__(
        self,
        signing_key: bytes,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        """Initialize the JWT service.

        Args:
            signing_key: Raw HMAC key bytes (decoded from configuration).
            clock: Source of the current UTC time. Overridden in tests.
        """
        if not signing_key:
            raise ValueError("A non-empty signing key is required")
        self._signing_key = signing_key
        self._clock = clock

    def now(self) -> datetime:
        """Current time according to the service clock."""
        return self._clock()

    def issue(
        self,
        subject: str,
        kind: TokenKind | str,
        ttl: timedelta | None = None,
    ) -> str:
        """Create a signed token.

        Args:
            subject: The user ID the token is issued to.
            kind: ``access`` or ``refresh``.
            ttl: Lifetime of the token. Defaults to the policy TTL for ``kind``.

        Returns:
            Encoded JWT.
        """
        kind = TokenKind(kind)
        if ttl is None:
            ttl = DEFAULT_TTLS[kind]

        issued_at = self._clock()
        payload = {
            "sub": subject,
            "type": kind.value,
            "iat": issued_at,
            "exp": issued_at + ttl,
            "jti": uuid.uuid4().hex,
        }
        return jwt.encode(payload, self._signing_key, algorithm=self.ALGORITHM)

    def create_access_token(self, subject: str) -> str:
        """Create a 15-minute access token."""
        return self.issue(subject, TokenKind.ACCESS)

    def create_refresh_token(self, subject: str) -> str:
        """Create a 30-day refresh token."""
        return self.issue(subject, TokenKind.REFRESH)

    def refresh_expiry(self) -> datetime:
        """Expiry to record for a refresh token issued now."""
        return self._clock() + REFRESH_TOKEN_TTL

    def parse(self, token: str) -> TokenClaims | None:
        """Verify a token and return its claims.

        Args:
            token: The encoded JWT.

        Returns:
            The verified claims, or None if the token is malformed, has a bad
            signature, lacks a required claim, or has expired.
        """
        try:
            payload: dict[str, Any] = jwt.decode(
                token,
                self._signing_key,
                algorithms=[self.ALGORITHM],
                # Expiry is checked below against the service clock
                options={
                    "require": self.REQUIRED_CLAIMS,
                    "verify_exp": False,
                    "verify_iat": False,
                },
            )
        except jwt.PyJWTError as e:
            logger.debug("Token rejected", reason=type(e).__name__)
            return None

        try:
            claims = TokenClaims(
                subject=payload["sub"],
                kind=payload["type"],
                issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
                expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
                token_id=payload["jti"],
            )
        except (ValidationError, TypeError, ValueError, OverflowError, OSError) as e:
            logger.debug("Token rejected", reason=type(e).__name__)
            return None

        if claims.expires_at <= self._clock():
            logger.debug("Token rejected", reason="expired", kind=claims.kind.value)
            return None

        return claims

    def parse_access_token(self, token: str) -> TokenClaims | None:
        """Parse a token and require it to be an access token."""
        claims = self.parse(token)
        if claims is None or claims.kind is not TokenKind.ACCESS:
            return None
        return claims

    def parse_refresh_token(self, token: str) -> TokenClaims | None:
        """Parse a token and require it to be a refresh token."""
        claims = self.parse(token)
        if claims is None or claims.kind is not TokenKind.REFRESH:
            return None
        return claims

    @staticmethod
    def kind_of(claims: TokenClaims) -> TokenKind:
        return claims.kind

    @staticmethod
    def subject_of(claims: TokenClaims) -> str:
        return claims.subject
