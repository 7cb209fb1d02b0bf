"""Note API routes.

All endpoints require a bearer access token and act only on notes owned by
the authenticated user.
"""

from fastapi import APIRouter, Response, status

from notekeep.infrastructure.api.dependencies import CurrentUser, NoteServiceDep
from notekeep.infrastructure.api.schemas import NoteResponse, NoteSaveRequest

router = APIRouter()


@router.post(
    "",
    response_model=NoteResponse,
    responses={
        400: {"description": "Validation error or note owned by another user"},
        401: {"description": "Not authenticated"},
    },
)
async def save_note(
    request: NoteSaveRequest,
    current_user: CurrentUser,
    note_service: NoteServiceDep,
) -> NoteResponse:
    """Create a note, or update one of the caller's notes in place."""
    note = await note_service.save(
        owner_id=current_user.user_id,
        note_id=request.id,
        title=request.title,
        content=request.content,
        color=request.color,
    )
    return NoteResponse.model_validate(note)


@router.get(
    "",
    response_model=list[NoteResponse],
    responses={401: {"description": "Not authenticated"}},
)
async def list_notes(current_user: CurrentUser, note_service: NoteServiceDep) -> list[NoteResponse]:
    """List the caller's notes, oldest first."""
    notes = await note_service.list_for_owner(current_user.user_id)
    return [NoteResponse.model_validate(note) for note in notes]


@router.delete(
    "/{note_id}",
    status_code=status.HTTP_200_OK,
    response_class=Response,
    responses={
        400: {"description": "Note not found or owned by another user"},
        401: {"description": "Not authenticated"},
    },
)
async def delete_note(
    note_id: str,
    current_user: CurrentUser,
    note_service: NoteServiceDep,
) -> Response:
    """Delete one of the caller's notes. The response body is empty."""
    await note_service.delete(current_user.user_id, note_id)
    return Response(status_code=status.HTTP_200_OK)
