"""
Expiry sweeper - background task that closes auctions past their end date.
Challenge: Runs beside request handling against the same store; must never
crash the process when the store is unavailable.
Design: One UPDATE per tick (O(1) round trips); failures back off
exponentially up to a cap and the loop keeps going; stop() is the only
cancellation signal and is tied to the application lifespan.
"""

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from auction_house.core.metrics import AUCTIONS_EXPIRED, SWEEP_FAILURES
from auction_house.db.repositories.auction_repository import AuctionRepository
from auction_house.db.types import utcnow

logger = logging.getLogger(__name__)


async def sweep_expired(
    session_factory: async_sessionmaker[AsyncSession],
    now: datetime | None = None,
) -> int:
    """Expire every active auction whose end date is before `now`. Returns the number expired."""
    async with session_factory() as session:
        try:
            expired = await AuctionRepository(session).mark_expired_batch(now or utcnow())
            await session.commit()
        except Exception:
            await session.rollback()
            raise
    if expired:
        AUCTIONS_EXPIRED.inc(expired)
        logger.info("Expired %d auctions", expired, extra={"expired": expired})
    return expired


class ExpirySweeper:
    """Periodic `sweep_expired` with capped exponential backoff on failure."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        interval: float = 30.0,
        max_backoff: float = 300.0,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.session_factory = session_factory
        self.interval = interval
        self.max_backoff = max(max_backoff, interval)
        self.clock = clock
        self.failures = 0
        self._stop = asyncio.Event()
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def next_delay(self) -> float:
        """Seconds until the next tick: the interval, doubled per consecutive failure, capped."""
        if self.failures == 0:
            return self.interval
        return min(self.interval * 2 ** self.failures, self.max_backoff)

    async def sweep_once(self) -> int | None:
        """One tick. Returns rows expired, or None when the tick failed."""
        try:
            expired = await sweep_expired(self.session_factory, self.clock())
        except Exception:
            self.failures += 1
            SWEEP_FAILURES.inc()
            logger.error(
                "Expiry sweep failed",
                extra={"failures": self.failures, "backoff_seconds": self.next_delay()},
                exc_info=True,
            )
            return None
        self.failures = 0
        return expired

    async def _run(self) -> None:
        logger.debug("Expiry sweeper loop started")
        while not self._stop.is_set():
            await self.sweep_once()
            try:
                await asyncio.wait_for(self._stop.wait(), timeout=self.next_delay())
            except asyncio.TimeoutError:
                pass
        logger.debug("Expiry sweeper loop stopped")

    def start(self) -> None:
        if self.running:
            logger.warning("Expiry sweeper already running")
            return
        self._stop.clear()
        self._task = asyncio.create_task(self._run(), name="expiry-sweeper")
        logger.info("Expiry sweeper started (every %.1fs)", self.interval)

    async def stop(self, timeout: float = 5.0) -> None:
        """Signal the loop and wait for the current tick; cancel it if it overruns."""
        if self._task is None:
            return
        self._stop.set()
        try:
            await asyncio.wait_for(self._task, timeout=timeout)
        except asyncio.TimeoutError:
            logger.warning("Expiry sweeper did not stop in %.1fs; cancelling", timeout)
        finally:
            self._task = None
        logger.info("Expiry sweeper stopped")
