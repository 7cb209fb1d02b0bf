"""Service for ownership-scoped note storage.

The owner of every note operation is the authenticated subject passed in by
the caller; a client can never name a different owner.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from notekeep.core.exceptions import NoteNotFoundError
from notekeep.core.logging import get_logger
from notekeep.domain.entities import Note
from notekeep.infrastructure.persistence.models import NoteModel
from notekeep.infrastructure.persistence.repositories import NoteRepository

logger = get_logger(__name__)


def parse_note_id(raw: str | None) -> str | None:
    """Normalize a client-supplied note ID.

    Returns:
        The canonical UUID string, or None if ``raw`` is missing or is not
        a UUID.
    """
    if not raw:
        return None
    try:
        return str(uuid.UUID(raw))
    except (ValueError, TypeError, AttributeError):
        return None


def _to_entity(model: NoteModel) -> Note:
    created_at = model.created_at
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    return Note(
        id=model.id,
        owner_id=model.owner_id,
        title=model.title,
        content=model.content,
        color=model.color,
        created_at=created_at,
    )


class NoteService:
    """Create, update, list and delete a user's notes."""

    def __init__(self, session: AsyncSession, note_repo: NoteRepository | None = None) -> None:
        self.session = session
        self.note_repo = note_repo or NoteRepository(session)

    async def save(
        self,
        owner_id: str,
        note_id: str | None,
        title: str,
        content: str,
        color: str,
    ) -> Note:
        """Upsert a note.

        An existing note owned by ``owner_id`` is updated in place (its
        creation time is kept). A missing or non-UUID ID creates a note with
        a freshly minted ID; an unused UUID creates a note with that ID.

        Raises:
            NoteNotFoundError: If the ID belongs to another user's note.
        """
        parsed_id = parse_note_id(note_id)

        if parsed_id is not None and await self.note_repo.update_owned(
            parsed_id, owner_id, title, content, color
        ):
            model = await self.note_repo.get_owned(parsed_id, owner_id)
            await self.session.commit()
            logger.info("Note updated", note_id=parsed_id, owner_id=owner_id)
            return _to_entity(model)

        note = Note(
            id=parsed_id or str(uuid.uuid4()),
            owner_id=owner_id,
            title=title,
            content=content,
            color=color,
            created_at=datetime.now(timezone.utc),
        )
        try:
            await self.note_repo.create(
                note.id, owner_id, title, content, color, note.created_at
            )
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            logger.warning("Note save rejected: id not owned", note_id=parsed_id, owner_id=owner_id)
            raise NoteNotFoundError() from None

        logger.info("Note created", note_id=note.id, owner_id=owner_id)
        return note

    async def list_for_owner(self, owner_id: str) -> list[Note]:
        """Return all notes of ``owner_id``."""
        return [_to_entity(model) for model in await self.note_repo.list_by_owner(owner_id)]

    async def delete(self, owner_id: str, note_id: str) -> None:
        """Delete one of ``owner_id``'s notes.

        Raises:
            NoteNotFoundError: If the note does not exist or is not owned by
                ``owner_id``. Nothing is deleted in that case.
        """
        parsed_id = parse_note_id(note_id)
        if parsed_id is None or not await self.note_repo.delete_owned(parsed_id, owner_id):
            logger.info("Note delete rejected", note_id=note_id, owner_id=owner_id)
            raise NoteNotFoundError()

        await self.session.commit()
        logger.info("Note deleted", note_id=parsed_id, owner_id=owner_id)
