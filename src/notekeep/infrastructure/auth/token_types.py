"""Token kinds, decoded claims and authenticated-request context."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class TokenKind(str, Enum):
    """Discriminator stored in the ``type`` claim of every NoteKeep JWT."""

    ACCESS = "access"
    REFRESH = "refresh"


class TokenClaims(BaseModel):
    """Verified contents of a NoteKeep JWT."""

    model_config = ConfigDict(frozen=True)

    subject: str = Field(..., min_length=1, description="User ID the token was issued to")
    kind: TokenKind = Field(..., description="Access or refresh token")
    issued_at: datetime = Field(..., description="When the token was issued (UTC)")
    expires_at: datetime = Field(..., description="When the token stops being valid (UTC)")
    token_id: str = Field(..., description="Random per-token identifier (jti)")


@dataclass(frozen=True)
class TokenPair:
    """Plaintext access/refresh tokens returned to the client."""

    access_token: str
    refresh_token: str


@dataclass(frozen=True)
class AuthenticatedUser:
    """Subject bound to a single request by the authentication middleware."""

    user_id: str
    token_id: str

    @property
    def id(self) -> str:
        """Alias for user_id."""
        return self.user_id
