"""Per-request bearer token authentication.

The authenticator only looks at the ``Authorization`` header and the token
signature; it never touches the database, so validating an access token is
constant-time and keeps working while the database is unavailable.
"""

from collections.abc import Mapping

from notekeep.core.logging import get_logger
from notekeep.infrastructure.auth.jwt_service import JWTService
from notekeep.infrastructure.auth.token_types import AuthenticatedUser

logger = get_logger(__name__)

BEARER_PREFIX = "bearer "


class Authenticator:
    """Resolve the subject of a request from its bearer access token."""

    def __init__(self, jwt_service: JWTService) -> None:
        """Initialize the authenticator.

        Args:
            jwt_service: Codec holding the process-wide signing key.
        """
        self.jwt_service = jwt_service

    @staticmethod
    def extract_bearer_token(headers: Mapping[str, str]) -> str | None:
        """Return the token from an ``Authorization: Bearer`` header, if any."""
        auth_header = headers.get("Authorization") or headers.get("authorization")
        if not auth_header or not auth_header.lower().startswith(BEARER_PREFIX):
            return None
        token = auth_header[len(BEARER_PREFIX):].strip()
        return token or None

    def authenticate(self, headers: Mapping[str, str]) -> AuthenticatedUser | None:
        """Authenticate from request headers.

        Args:
            headers: The request headers.

        Returns:
            The authenticated user, or None when the request carries no
            bearer token or the token is not a valid access token. Rejection
            is left to the routes that require authentication.
        """
        token = self.extract_bearer_token(headers)
        if token is None:
            return None

        claims = self.jwt_service.parse_access_token(token)
        if claims is None:
            logger.debug("Bearer token rejected")
            return None

        return AuthenticatedUser(user_id=claims.subject, token_id=claims.token_id)
