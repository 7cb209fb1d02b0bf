"""Pydantic schemas for note endpoints."""

from datetime import datetime
from typing import Any

from pydantic import ConfigDict, Field, field_validator

from notekeep.infrastructure.api.schemas.auth_schemas import CamelModel


class NoteSaveRequest(CamelModel):
    """Request body for creating or updating a note.

    A missing or non-UUID ``id`` creates a new note.
    """

    id: str | None = Field(None, description="Note ID to update")
    title: str = Field(..., max_length=255, description="Note title")
    content: str = Field(..., description="Note body")
    color: str = Field(..., max_length=64, description="Display color, stored verbatim")

    @field_validator("id", mode="before")
    @classmethod
    def drop_non_string_id(cls, v: Any) -> str | None:
        """Treat a non-string ID (number, object, ...) like a missing one."""
        if isinstance(v, str):
            return v
        return None


class NoteResponse(CamelModel):
    """A note as returned to its owner."""

    id: str = Field(..., description="Note ID")
    title: str
    content: str
    color: str
    created_at: datetime = Field(..., description="When the note was created")

    model_config = ConfigDict(from_attributes=True)
