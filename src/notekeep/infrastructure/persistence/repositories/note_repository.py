"""Note repository for database operations.

Every query is scoped by ``owner_id``; there is no method that
reads or modifies a note by ID alone.
"""

from datetime import datetime

from sqlalchemy import delete, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from notekeep.infrastructure.persistence.models import NoteModel


class NoteRepository:
    """Repository for note database operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def create(
        self,
        note_id: str,
        owner_id: str,
        title: str,
        content: str,
        color: str,
        created_at: datetime,
    ) -> None:
        """Insert a new note.

        Issued as a plain INSERT so an ID clash is always reported by the
        database, whoever owns the existing row.

        Raises:
            sqlalchemy.exc.IntegrityError: If a note with this ID already exists.
        """
        await self.session.execute(
            insert(NoteModel).values(
                id=note_id,
                owner_id=owner_id,
                title=title,
                content=content,
                color=color,
                created_at=created_at,
            )
        )

    async def update_owned(
        self,
        note_id: str,
        owner_id: str,
        title: str,
        content: str,
        color: str,
    ) -> bool:
        """Update a note in place if it belongs to ``owner_id``.

        Returns:
            True if a note was updated, False if no such note is owned by
            this user.
        """
        result = await self.session.execute(
            update(NoteModel)
            .where(NoteModel.id == note_id, NoteModel.owner_id == owner_id)
            .values(title=title, content=content, color=color)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def get_owned(self, note_id: str, owner_id: str) -> NoteModel | None:
        """Get a note by ID if it belongs to ``owner_id``."""
        result = await self.session.execute(
            select(NoteModel)
            .where(NoteModel.id == note_id, NoteModel.owner_id == owner_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def list_by_owner(self, owner_id: str) -> list[NoteModel]:
        """List a user's notes, oldest first."""
        result = await self.session.execute(
            select(NoteModel)
            .where(NoteModel.owner_id == owner_id)
            .order_by(NoteModel.created_at, NoteModel.id)
        )
        return list(result.scalars().all())

    async def delete_owned(self, note_id: str, owner_id: str) -> bool:
        """Delete a note if it belongs to ``owner_id``.

        Returns:
            True if the note was deleted.
        """
        result = await self.session.execute(
            delete(NoteModel)
            .where(NoteModel.id == note_id, NoteModel.owner_id == owner_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1
