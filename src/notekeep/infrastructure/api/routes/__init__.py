"""API Routes for NoteKeep."""

from notekeep.infrastructure.api.routes.auth_router import router as auth_router
from notekeep.infrastructure.api.routes.notes_router import router as notes_router

__all__ = [
    "auth_router",
    "notes_router",
]
