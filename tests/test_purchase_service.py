"""
Purchase engine tests - gold conservation, ownership transfer, rejection order, races.
"""

import asyncio
import gc
import uuid
from datetime import timedelta

import pytest
from sqlalchemy import event
from sqlalchemy.exc import OperationalError

from auction_house.core.errors import MarketError
from auction_house.db.models import AuctionStatus
from auction_house.db.types import utcnow
from auction_house.services.expiry_sweeper import sweep_expired
from auction_house.services.purchase_service import PurchaseService


@pytest.mark.asyncio
async def test_purchase_transfers_gold_and_item(market, session_factory):
    """A lists at 100 with 500 gold, B with 200 buys: B=100, A=600, item moves to B."""
    auction = await market.listing("alice", gold=500, price=100)
    await market.character("bob", gold=200)

    result = await PurchaseService(session_factory).purchase(auction.id, "bob")

    assert not isinstance(result, MarketError)
    assert result.status == AuctionStatus.SOLD
    assert result.price == 100
    assert result.buyer_name == "bob"
    assert await market.gold("bob") == 100
    assert await market.gold("alice") == 600
    assert await market.owner_of(auction.item_instance_id) == "bob"


@pytest.mark.asyncio
async def test_purchase_conserves_total_gold(market, session_factory):
    auction = await market.listing("seller", gold=37, price=250)
    await market.character("buyer", gold=1000)
    before = await market.gold("seller") + await market.gold("buyer")

    await PurchaseService(session_factory).purchase(auction.id, "buyer")

    assert await market.gold("seller") + await market.gold("buyer") == before
    assert await market.gold("buyer") == 750
    assert await market.gold("seller") == 287


@pytest.mark.asyncio
async def test_second_purchase_is_rejected(market, session_factory):
    auction = await market.listing("alice", gold=500, price=100)
    await market.character("bob", gold=200)
    await market.character("carol", gold=900)
    engine = PurchaseService(session_factory)

    await engine.purchase(auction.id, "bob")
    result = await engine.purchase(auction.id, "carol")

    assert result is MarketError.AUCTION_NOT_ACTIVE
    assert await market.gold("carol") == 900
    assert (await market.get_auction(auction.id)).buyer_name == "bob"


@pytest.mark.asyncio
async def test_past_end_date_rejected_even_if_still_active(market, session_factory):
    """Status still says active (sweeper has not run) but the end date has passed."""
    auction = await market.listing("alice", gold=0, price=100, ends_in=timedelta(seconds=-1))
    await market.character("bob", gold=200)

    result = await PurchaseService(session_factory).purchase(auction.id, "bob")

    assert result is MarketError.AUCTION_NOT_ACTIVE
    assert await market.gold("bob") == 200
    assert await market.gold("alice") == 0
    assert (await market.get_auction(auction.id)).status == AuctionStatus.ACTIVE


@pytest.mark.asyncio
async def test_end_date_passing_between_check_and_write(market, session_factory):
    """The conditional write re-checks the clock; a listing closing mid-purchase changes nothing."""
    auction = await market.listing("alice", gold=0, price=100, ends_in=timedelta(seconds=30))
    await market.character("bob", gold=200)
    times = iter([utcnow(), utcnow() + timedelta(minutes=5)])

    result = await PurchaseService(session_factory, clock=lambda: next(times)).purchase(auction.id, "bob")

    assert result is MarketError.AUCTION_NOT_ACTIVE
    assert await market.gold("bob") == 200
    assert await market.gold("alice") == 0
    assert await market.owner_of(auction.item_instance_id) == "alice"


@pytest.mark.asyncio
async def test_expired_auction_rejected(market, session_factory):
    auction = await market.listing("alice", gold=0, price=10, status=AuctionStatus.EXPIRED)
    await market.character("bob", gold=200)

    result = await PurchaseService(session_factory).purchase(auction.id, "bob")

    assert result is MarketError.AUCTION_NOT_ACTIVE
    assert (await market.get_auction(auction.id)).status == AuctionStatus.EXPIRED


@pytest.mark.asyncio
async def test_self_purchase_rejected(market, session_factory):
    auction = await market.listing("alice", gold=500, price=100)

    result = await PurchaseService(session_factory).purchase(auction.id, "alice")

    assert result is MarketError.INCORRECT_BUYER
    assert await market.gold("alice") == 500
    assert (await market.get_auction(auction.id)).status == AuctionStatus.ACTIVE


@pytest.mark.asyncio
async def test_insufficient_gold_rejected(market, session_factory):
    auction = await market.listing("alice", gold=0, price=100)
    await market.character("bob", gold=50)

    result = await PurchaseService(session_factory).purchase(auction.id, "bob")

    assert result is MarketError.INSUFFICIENT_GOLD
    assert await market.gold("bob") == 50
    assert await market.gold("alice") == 0


@pytest.mark.asyncio
async def test_unknown_auction_and_buyer(market, session_factory):
    auction = await market.listing("alice", gold=0, price=100)
    engine = PurchaseService(session_factory)

    assert await engine.purchase(uuid.uuid4(), "alice") is MarketError.AUCTION_NOT_FOUND
    assert await engine.purchase(auction.id, "nobody") is MarketError.CHARACTER_NOT_FOUND


@pytest.mark.asyncio
async def test_rejection_order_inactive_before_funds_before_identity(market, session_factory):
    """Seller buying its own expired listing it cannot afford reports the inactive auction first."""
    engine = PurchaseService(session_factory)
    expired = await market.listing("alice", gold=10, price=100, ends_in=timedelta(seconds=-5))
    assert await engine.purchase(expired.id, "alice") is MarketError.AUCTION_NOT_ACTIVE

    open_listing = await market.listing("dave", gold=10, price=100)
    assert await engine.purchase(open_listing.id, "dave") is MarketError.INSUFFICIENT_GOLD


@pytest.mark.asyncio
async def test_unknown_buyer_reported_before_inactive_auction(market, session_factory):
    auction = await market.listing("alice", gold=0, price=100, status=AuctionStatus.SOLD)

    result = await PurchaseService(session_factory).purchase(auction.id, "ghost")

    assert result is MarketError.CHARACTER_NOT_FOUND


@pytest.mark.asyncio
async def test_concurrent_purchases_have_one_winner(market, session_factory):
    auction = await market.listing("alice", gold=0, price=100)
    await market.character("bob", gold=100)
    await market.character("carol", gold=100)
    engine = PurchaseService(session_factory)

    results = await asyncio.gather(
        engine.purchase(auction.id, "bob"),
        engine.purchase(auction.id, "carol"),
    )

    winners = [r for r in results if not isinstance(r, MarketError)]
    losers = [r for r in results if isinstance(r, MarketError)]
    assert len(winners) == 1
    assert losers == [MarketError.AUCTION_NOT_ACTIVE]
    winner = winners[0].buyer_name
    loser = "carol" if winner == "bob" else "bob"
    assert await market.gold(winner) == 0
    assert await market.gold(loser) == 100
    assert await market.gold("alice") == 100
    assert await market.owner_of(auction.item_instance_id) == winner


@pytest.mark.asyncio
async def test_sold_auction_untouched_by_later_attempts(market, session_factory):
    auction = await market.listing("alice", gold=0, price=5)
    await market.character("bob", gold=50)
    engine = PurchaseService(session_factory)
    await engine.purchase(auction.id, "bob")

    for _ in range(3):
        assert await engine.purchase(auction.id, "bob") is MarketError.AUCTION_NOT_ACTIVE

    assert (await market.get_auction(auction.id)).status == AuctionStatus.SOLD
    assert await market.gold("bob") == 45
    assert await market.gold("alice") == 5


@pytest.mark.asyncio
async def test_crossing_purchases_both_complete(market, session_factory):
    """amy buys zed's listing while zed buys amy's."""
    amys = await market.listing("amy", gold=100, price=30)
    zeds = await market.listing("zed", gold=100, price=50)
    engine = PurchaseService(session_factory)

    results = await asyncio.gather(
        engine.purchase(zeds.id, "amy"),
        engine.purchase(amys.id, "zed"),
    )

    assert not any(isinstance(r, MarketError) for r in results)
    assert await market.gold("amy") == 80
    assert await market.gold("zed") == 120
    assert await market.owner_of(zeds.item_instance_id) == "amy"
    assert await market.owner_of(amys.item_instance_id) == "zed"


@pytest.mark.asyncio
@pytest.mark.parametrize("buyer, seller", [("zed", "amy"), ("amy", "zed")])
async def test_balances_updated_in_name_order(market, engine, session_factory, buyer, seller):
    auction = await market.listing(seller, gold=0, price=30)
    await market.character(buyer, gold=100)
    touched = []

    def record(conn, cursor, statement, parameters, context, executemany):
        if statement.startswith("UPDATE characters"):
            touched.append(next(n for n in ("amy", "zed") if n in parameters))

    event.listen(engine.sync_engine, "before_cursor_execute", record)
    try:
        result = await PurchaseService(session_factory).purchase(auction.id, buyer)
    finally:
        event.remove(engine.sync_engine, "before_cursor_execute", record)

    assert not isinstance(result, MarketError)
    assert touched == ["amy", "zed"]


@pytest.mark.asyncio
@pytest.mark.parametrize("sweep_first", [True, False])
async def test_purchase_racing_the_sweep_has_one_winner(market, session_factory, sweep_first):
    """Buyer's clock is just before end_date, the sweep's just after: exactly one transition lands."""
    auction = await market.listing("alice", gold=0, price=40)
    await market.character("bob", gold=100)
    end = auction.end_date
    buyer = PurchaseService(session_factory, clock=lambda: end - timedelta(milliseconds=1))
    buy = buyer.purchase(auction.id, "bob")
    sweep = sweep_expired(session_factory, end + timedelta(milliseconds=1))

    if sweep_first:
        expired, purchase = await asyncio.gather(sweep, buy)
    else:
        purchase, expired = await asyncio.gather(buy, sweep)

    status = (await market.get_auction(auction.id)).status
    if status == AuctionStatus.SOLD:
        assert expired == 0
        assert not isinstance(purchase, MarketError)
        assert await market.gold("bob") == 60
        assert await market.gold("alice") == 40
        assert await market.owner_of(auction.item_instance_id) == "bob"
    else:
        assert status == AuctionStatus.EXPIRED
        assert expired == 1
        assert purchase is MarketError.AUCTION_NOT_ACTIVE
        assert await market.gold("bob") == 100
        assert await market.gold("alice") == 0
        assert await market.owner_of(auction.item_instance_id) == "alice"


@pytest.mark.asyncio
async def test_store_failure_after_cancellation_is_not_left_unretrieved():
    release = asyncio.Event()

    class StalledSession:
        async def __aenter__(self):
            await release.wait()
            raise OperationalError("BEGIN", {}, Exception("connection reset"))

        async def __aexit__(self, *exc_info):
            return False

    loop = asyncio.get_running_loop()
    reported = []
    loop.set_exception_handler(lambda _loop, context: reported.append(context))
    try:
        caller = asyncio.create_task(PurchaseService(StalledSession).purchase(uuid.uuid4(), "bob"))
        await asyncio.sleep(0.01)
        caller.cancel()
        with pytest.raises(asyncio.CancelledError):
            await caller

        release.set()
        await asyncio.sleep(0.01)
        gc.collect()
    finally:
        loop.set_exception_handler(None)

    assert reported == []
