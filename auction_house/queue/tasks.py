"""
Celery tasks - the expiry sweep as a scheduled task.
Challenge: Run async store code from a sync worker process.
"""

import asyncio

from auction_house.config import get_settings
from auction_house.db.session import build_engine, build_session_factory
from auction_house.queue.celery_app import celery_app
from auction_house.services.expiry_sweeper import sweep_expired


def _run_async(coro):
    """Run async function from sync Celery task."""
    loop = asyncio.new_event_loop()
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


async def _sweep_with_fresh_engine() -> int:
    # Engine per run: pooled connections cannot cross event loops
    settings = get_settings()
    engine = build_engine(settings.database_url)
    try:
        return await sweep_expired(build_session_factory(engine))
    finally:
        await engine.dispose()


@celery_app.task(bind=True, max_retries=3)
def expire_auctions_task(self):
    """
    Expire stale active auctions. Scheduled by beat every sweeper interval.
    A failed run is retried; the next scheduled run corrects anything missed.
    """
    try:
        return _run_async(_sweep_with_fresh_engine())
    except Exception as exc:
        raise self.retry(exc=exc, countdown=5)
