"""SQLAlchemy models for NoteKeep tables.

Importing this package registers every model with ``Base.metadata``.
"""

from notekeep.infrastructure.persistence.models.note import NoteModel
from notekeep.infrastructure.persistence.models.refresh_token import RefreshTokenModel
from notekeep.infrastructure.persistence.models.user import UserModel

__all__ = [
    "NoteModel",
    "RefreshTokenModel",
    "UserModel",
]
