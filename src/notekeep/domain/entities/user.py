"""User entity."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class User:
    """A registered user.

    Users are immutable once created; there is no update or delete path.

    Attributes:
        id: Unique identifier (UUID string).
        email: Email address, unique and case-sensitive.
        created_at: Registration time (UTC).
    """

    id: str
    email: str
    created_at: datetime

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("User ID is required")
        if not self.email:
            raise ValueError("Email is required")
