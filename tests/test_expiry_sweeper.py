"""
Expiry sweeper tests - tick behaviour, failure backoff, start/stop lifecycle.
"""

import asyncio
from datetime import timedelta

import pytest
from sqlalchemy.exc import OperationalError

from auction_house.core.errors import MarketError
from auction_house.db.models import AuctionStatus
from auction_house.db.types import utcnow
from auction_house.services.expiry_sweeper import ExpirySweeper, sweep_expired
from auction_house.services.purchase_service import PurchaseService


class BrokenSessionFactory:
    """Session factory whose store is unreachable."""

    def __init__(self):
        self.calls = 0

    def __call__(self):
        self.calls += 1
        raise OperationalError("SELECT 1", {}, Exception("connection refused"))


@pytest.mark.asyncio
async def test_sweep_expires_only_stale_active(market, session_factory):
    stale = await market.listing("a", gold=0, price=1, ends_in=timedelta(seconds=-1))
    fresh = await market.listing("b", gold=0, price=1)

    assert await sweep_expired(session_factory) == 1
    assert await sweep_expired(session_factory) == 0

    assert (await market.get_auction(stale.id)).status == AuctionStatus.EXPIRED
    assert (await market.get_auction(fresh.id)).status == AuctionStatus.ACTIVE


@pytest.mark.asyncio
async def test_sweep_never_touches_sold(market, session_factory):
    auction = await market.listing("a", gold=0, price=10, ends_in=timedelta(seconds=2))
    await market.character("b", gold=10)
    await PurchaseService(session_factory).purchase(auction.id, "b")

    assert await sweep_expired(session_factory, utcnow() + timedelta(hours=1)) == 0
    assert (await market.get_auction(auction.id)).status == AuctionStatus.SOLD


@pytest.mark.asyncio
async def test_expired_auction_cannot_be_bought(market, session_factory):
    auction = await market.listing("a", gold=0, price=10, ends_in=timedelta(seconds=-1))
    await market.character("b", gold=10)
    await sweep_expired(session_factory)

    result = await PurchaseService(session_factory).purchase(auction.id, "b")

    assert result is MarketError.AUCTION_NOT_ACTIVE
    assert await market.gold("b") == 10


@pytest.mark.asyncio
async def test_sweep_once_reports_failure_and_backs_off():
    sweeper = ExpirySweeper(BrokenSessionFactory(), interval=1.0, max_backoff=5.0)

    assert await sweeper.sweep_once() is None
    assert sweeper.failures == 1
    assert sweeper.next_delay() == 2.0
    await sweeper.sweep_once()
    assert sweeper.next_delay() == 4.0
    await sweeper.sweep_once()
    assert sweeper.next_delay() == 5.0  # capped
    await sweeper.sweep_once()
    assert sweeper.next_delay() == 5.0


@pytest.mark.asyncio
async def test_success_resets_backoff(market, session_factory):
    sweeper = ExpirySweeper(session_factory, interval=1.0, max_backoff=8.0)
    sweeper.failures = 3

    assert await sweeper.sweep_once() == 0
    assert sweeper.failures == 0
    assert sweeper.next_delay() == 1.0


@pytest.mark.asyncio
async def test_loop_survives_failures_and_stops():
    factory = BrokenSessionFactory()
    sweeper = ExpirySweeper(factory, interval=0.01, max_backoff=0.02)

    sweeper.start()
    await asyncio.sleep(0.2)
    assert sweeper.running
    await sweeper.stop()

    assert not sweeper.running
    assert factory.calls >= 2


@pytest.mark.asyncio
async def test_loop_expires_in_background(market, session_factory):
    auction = await market.listing("a", gold=0, price=1, ends_in=timedelta(seconds=-1))
    sweeper = ExpirySweeper(session_factory, interval=0.05)

    sweeper.start()
    for _ in range(50):
        if (await market.get_auction(auction.id)).status == AuctionStatus.EXPIRED:
            break
        await asyncio.sleep(0.05)
    await sweeper.stop()

    assert (await market.get_auction(auction.id)).status == AuctionStatus.EXPIRED
