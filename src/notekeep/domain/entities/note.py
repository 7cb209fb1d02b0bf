"""Note entity."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Note:
    """A note as returned to its owner.

    Attributes:
        id: Unique identifier (UUID string).
        owner_id: ID of the user who owns the note.
        title: Note title.
        content: Note body.
        color: Opaque color string chosen by the client.
        created_at: When the note was first saved (UTC).
    """

    id: str
    owner_id: str
    title: str
    content: str
    color: str
    created_at: datetime
