"""Repository for refresh token operations.

Records are keyed by (user_id, token_hash). Consuming a token is a single
conditional DELETE, so when two requests race with the same refresh token
the database lets exactly one of them remove the row.
"""

from datetime import datetime

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from notekeep.infrastructure.persistence.models import RefreshTokenModel


class RefreshTokenRepository:
    """Repository for refresh token database operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session.
        """
        self._session = session

    async def create(
        self, user_id: str, token_hash: str, expires_at: datetime
    ) -> RefreshTokenModel:
        """Store a new refresh token digest.

        Args:
            user_id: Owner of the token.
            token_hash: SHA-256 digest of the raw token.
            expires_at: When the token stops being valid.

        Returns:
            The stored model.
        """
        model = RefreshTokenModel(
            user_id=user_id,
            token_hash=token_hash,
            expires_at=expires_at,
        )
        self._session.add(model)
        await self._session.flush()
        return model

    async def find(self, user_id: str, token_hash: str) -> RefreshTokenModel | None:
        """Look up a token record for a user.

        An expired record that has not been swept yet is still returned.
        """
        result = await self._session.execute(
            select(RefreshTokenModel).where(
                RefreshTokenModel.user_id == user_id,
                RefreshTokenModel.token_hash == token_hash,
            )
        )
        return result.scalar_one_or_none()

    async def consume(self, user_id: str, token_hash: str, now: datetime) -> bool:
        """Atomically delete an unexpired token record.

        Args:
            user_id: Owner of the token.
            token_hash: SHA-256 digest of the raw token.
            now: Current time; records expiring at or before it are ignored.

        Returns:
            True if this call removed the record, False if there was no
            matching live record (never issued, already used, or expired).
        """
        result = await self._session.execute(
            delete(RefreshTokenModel)
            .where(
                RefreshTokenModel.user_id == user_id,
                RefreshTokenModel.token_hash == token_hash,
                RefreshTokenModel.expires_at > now,
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def delete(self, user_id: str, token_hash: str) -> bool:
        """Delete a token record regardless of expiry.

        Returns:
            True if a record was deleted.
        """
        result = await self._session.execute(
            delete(RefreshTokenModel)
            .where(
                RefreshTokenModel.user_id == user_id,
                RefreshTokenModel.token_hash == token_hash,
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0

    async def delete_all_for_user(self, user_id: str) -> int:
        """Delete every refresh token of a user.

        Returns:
            Number of records deleted.
        """
        result = await self._session.execute(
            delete(RefreshTokenModel)
            .where(RefreshTokenModel.user_id == user_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def purge_expired(self, now: datetime) -> int:
        """Delete all records whose expiry has passed.

        Returns:
            Number of records deleted.
        """
        result = await self._session.execute(
            delete(RefreshTokenModel)
            .where(RefreshTokenModel.expires_at <= now)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount
