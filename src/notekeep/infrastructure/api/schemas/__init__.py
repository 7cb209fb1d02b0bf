"""API Schemas for request/response validation."""

from notekeep.infrastructure.api.schemas.auth_schemas import (
    CamelModel,
    LoginRequest,
    LogoutResponse,
    RefreshRequest,
    RegisterRequest,
    TokenPairResponse,
)
from notekeep.infrastructure.api.schemas.note_schemas import NoteResponse, NoteSaveRequest

__all__ = [
    "CamelModel",
    "LoginRequest",
    "LogoutResponse",
    "NoteResponse",
    "NoteSaveRequest",
    "RefreshRequest",
    "RegisterRequest",
    "TokenPairResponse",
]
