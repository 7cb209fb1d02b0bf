"""FastAPI dependencies for authentication and services.

The authenticated subject is read from ``request.state``, where
``AuthenticationMiddleware`` put it for this request only.
"""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from notekeep.core.logging import get_logger
from notekeep.domain.services import AuthService, NoteService
from notekeep.infrastructure.auth import AuthenticatedUser, JWTService
from notekeep.infrastructure.persistence.database import get_db_session

logger = get_logger(__name__)


def get_jwt_service(request: Request) -> JWTService:
    """Get the process-wide JWT service from app state."""
    return request.app.state.jwt_service


def get_current_user(request: Request) -> AuthenticatedUser:
    """Return the subject authenticated for this request.

    Raises:
        HTTPException: 401 if the request carried no valid access token.
    """
    user = getattr(request.state, "authenticated_user", None)
    if user is None:
        logger.info("Authentication required", path=request.url.path)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


async def get_auth_service(
    session: Annotated[AsyncSession, Depends(get_db_session)],
    jwt_service: Annotated[JWTService, Depends(get_jwt_service)],
) -> AuthService:
    return AuthService(session, jwt_service)


async def get_note_service(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> NoteService:
    return NoteService(session)


# Type aliases for dependency injection
CurrentUser = Annotated[AuthenticatedUser, Depends(get_current_user)]
AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
NoteServiceDep = Annotated[NoteService, Depends(get_note_service)]
