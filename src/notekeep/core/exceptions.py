"""Domain exceptions for NoteKeep.

Each exception carries the machine-readable error code and HTTP status it
is rendered with. Messages are generic: they are returned to
clients verbatim and must not reveal whether an account exists or why a
token was rejected.
"""


class NoteKeepError(Exception):
    """Base class for errors surfaced to API clients as 4xx responses."""

    status_code: int = 400
    error_code: str = "bad_request"
    default_message: str = "Bad request"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidCredentialsError(NoteKeepError):
    """Unknown email or wrong password; the two cases are indistinguishable."""

    status_code = 401
    error_code = "invalid_credentials"
    default_message = "Invalid credentials"


class DuplicateIdentityError(NoteKeepError):
    """Registration with an email that is already taken."""

    status_code = 400
    error_code = "duplicate_identity"
    default_message = "Email is already registered"


class InvalidTokenError(NoteKeepError):
    """Token is malformed, expired, of the wrong kind, or its user is gone."""

    status_code = 401
    error_code = "invalid_token"
    default_message = "Invalid token"


class TokenNotRecognizedError(NoteKeepError):
    """Well-formed refresh token with no active stored record.

    Covers tokens that were never issued, were already used, or were
    revoked by logout or a newer login.
    """

    status_code = 401
    error_code = "token_not_recognized"
    default_message = "Refresh token not recognized"


class NoteNotFoundError(NoteKeepError):
    """Note does not exist or belongs to another user."""

    status_code = 400
    error_code = "note_not_found"
    default_message = "Note not found"
