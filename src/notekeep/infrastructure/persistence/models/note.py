"""SQLAlchemy model for the notes table."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from notekeep.infrastructure.persistence.database import Base


class NoteModel(Base):
    """A note owned by exactly one user.

    Attributes:
        id: Primary key (UUID string). Supplied by the client on update.
        owner_id: The user the note belongs to.
        title: Note title.
        content: Note body.
        color: Free-form color string, stored as given.
        created_at: Timestamp of first creation; kept across updates.
    """

    __tablename__ = "notes"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    owner_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    color: Mapped[str] = mapped_column(String(64), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    owner = relationship("UserModel", back_populates="notes")

    def __repr__(self) -> str:
        return f"NoteModel(id={self.id!r}, owner_id={self.owner_id!r})"
