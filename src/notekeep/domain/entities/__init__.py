"""Domain entities for NoteKeep.

Plain dataclasses with no dependency on infrastructure or frameworks.
"""

from notekeep.domain.entities.note import Note
from notekeep.domain.entities.user import User

__all__ = [
    "Note",
    "User",
]
