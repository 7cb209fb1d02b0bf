"""Authentication middleware for NoteKeep.

Runs the authenticator on every request and stores the result on
``request.state.authenticated_user``. The value lives and dies with the
request object; nothing is cached across requests.
"""

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp

from notekeep.infrastructure.auth.authenticator import Authenticator


class AuthenticationMiddleware(BaseHTTPMiddleware):
    """Middleware to authenticate ALL requests."""

    def __init__(self, app: ASGIApp, authenticator: Authenticator) -> None:
        super().__init__(app)
        self.authenticator = authenticator

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """Authenticate the request and enrich request state.

        Unauthenticated requests proceed; protected routes reject them
        through the ``get_current_user`` dependency.
        """
        request.state.authenticated_user = self.authenticator.authenticate(request.headers)
        return await call_next(request)
