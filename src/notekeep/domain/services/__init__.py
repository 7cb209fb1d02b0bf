"""Domain services for NoteKeep.

Services hold the business rules of authentication and note ownership and
coordinate the repositories and the token codec.
"""

from notekeep.domain.services.auth_service import AuthService
from notekeep.domain.services.note_service import NoteService, parse_note_id

__all__ = [
    "AuthService",
    "NoteService",
    "parse_note_id",
]
