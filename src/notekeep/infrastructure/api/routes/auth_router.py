"""Authentication API routes.

Provides endpoints for registration, login, refresh-token rotation and
logout. Failures are raised as ``NoteKeepError`` subclasses and rendered by
the application's exception handler.
"""

from fastapi import APIRouter, Response, status

from notekeep.core.logging import get_logger
from notekeep.infrastructure.api.dependencies import AuthServiceDep
from notekeep.infrastructure.api.schemas import (
    LoginRequest,
    LogoutResponse,
    RefreshRequest,
    RegisterRequest,
    TokenPairResponse,
)

logger = get_logger(__name__)

router = APIRouter()


@router.post(
    "/register",
    status_code=status.HTTP_200_OK,
    response_class=Response,
    responses={400: {"description": "Validation error or email already registered"}},
)
async def register(request: RegisterRequest, auth_service: AuthServiceDep) -> Response:
    """Register a new user. The response body is empty."""
    await auth_service.register(request.email, request.password)
    return Response(status_code=status.HTTP_200_OK)


@router.post(
    "/login",
    response_model=TokenPairResponse,
    responses={401: {"description": "Invalid credentials"}},
)
async def login(request: LoginRequest, auth_service: AuthServiceDep) -> TokenPairResponse:
    """Authenticate with email and password.

    Every refresh token previously issued to the user is revoked.
    """
    pair = await auth_service.login(request.email, request.password)
    return TokenPairResponse(access_token=pair.access_token, refresh_token=pair.refresh_token)


@router.post(
    "/refresh",
    response_model=TokenPairResponse,
    responses={401: {"description": "Invalid, expired, used or revoked refresh token"}},
)
async def refresh(request: RefreshRequest, auth_service: AuthServiceDep) -> TokenPairResponse:
    """Exchange a refresh token for a new token pair.

    The presented refresh token is consumed and cannot be used again.
    """
    pair = await auth_service.refresh(request.refresh_token)
    return TokenPairResponse(access_token=pair.access_token, refresh_token=pair.refresh_token)


@router.post("/logout", response_model=LogoutResponse)
async def logout(request: RefreshRequest, auth_service: AuthServiceDep) -> LogoutResponse:
    """Revoke a refresh token. Always succeeds."""
    await auth_service.logout(request.refresh_token)
    return LogoutResponse(success=True)
