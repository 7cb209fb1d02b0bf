"""Persistence repositories for database operations."""

from notekeep.infrastructure.persistence.repositories.note_repository import (
    NoteRepository,
)
from notekeep.infrastructure.persistence.repositories.refresh_token_repository import (
    RefreshTokenRepository,
)
from notekeep.infrastructure.persistence.repositories.user_repository import (
    UserRepository,
)

__all__ = [
    "NoteRepository",
    "RefreshTokenRepository",
    "UserRepository",
]
