"""Background removal of expired refresh tokens.

Plays the role of a storage-level TTL index: rows whose ``expires_at`` has
passed are deleted periodically. Nothing relies on the sweep for
correctness; refresh already refuses expired tokens, this only keeps the
table from growing.
"""

import asyncio
import contextlib
from datetime import datetime, timezone
from typing import Callable

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from notekeep.core.logging import get_logger
from notekeep.infrastructure.persistence.repositories import RefreshTokenRepository

logger = get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RefreshTokenSweeper:
    """Periodically purge expired refresh token records."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        interval_seconds: int,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        """Initialize the sweeper.

        Args:
            session_factory: Factory for database sessions.
            interval_seconds: Seconds between sweeps; 0 disables the loop.
            clock: Source of the current UTC time.
        """
        self._session_factory = session_factory
        self._interval = interval_seconds
        self._clock = clock
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def sweep_once(self) -> int:
        """Delete expired records now.

        Returns:
            Number of records deleted.
        """
        async with self._session_factory() as session:
            purged = await RefreshTokenRepository(session).purge_expired(self._clock())
            await session.commit()
        if purged:
            logger.info("Expired refresh tokens purged", count=purged)
        return purged

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            try:
                await self.sweep_once()
            except Exception as e:
                # The next tick retries; a failed sweep only delays cleanup
                logger.error("Refresh token sweep failed", error=str(e))

    def start(self) -> None:
        """Start the sweep loop on the running event loop."""
        if self._interval <= 0 or self.running:
            return
        self._task = asyncio.create_task(self._run())
        logger.info("Refresh token sweeper started", interval_seconds=self._interval)

    async def stop(self) -> None:
        """Cancel the sweep loop and wait for it to finish."""
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        logger.info("Refresh token sweeper stopped")
