"""
Purchase service - the buy-now transaction engine.

Validation runs in a fixed order so multi-violation requests always report
the same error: auction exists, buyer exists, auction active, buyer can pay,
buyer is not the seller, seller exists.

The transfer itself is one database transaction:
    1. auction active -> sold (conditional on still active and not past end_date)
    2. buyer debited (conditional on gold >= price) and seller credited,
       in character-name order so crossing purchases never deadlock
    3. item instance handed to the buyer
Any step affecting zero rows rolls the whole transaction back, so a purchase
racing another purchase or the expiry sweep either fully wins or changes nothing.
"""

import asyncio
import logging
import uuid
from collections.abc import Callable
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from auction_house.core.errors import MarketError
from auction_house.core.metrics import PURCHASES
from auction_house.db.models.auction import AuctionStatus
from auction_house.db.repositories.auction_repository import AuctionRepository
from auction_house.db.repositories.character_repository import CharacterRepository
from auction_house.db.repositories.item_instance_repository import ItemInstanceRepository
from auction_house.db.types import utcnow
from auction_house.schemas.auction import AuctionResponse

logger = logging.getLogger(__name__)


def _retrieve_failure(task: asyncio.Task) -> None:
    """Mark the outcome as seen when the caller was cancelled; failures are logged in `_purchase`."""
    if not task.cancelled():
        task.exception()


class PurchaseService:
    """Validates and executes purchases. Owns its session so the commit outlives a cancelled request."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        clock: Callable[[], datetime] = utcnow,
    ):
        self.session_factory = session_factory
        self.clock = clock

    async def purchase(self, auction_id: uuid.UUID, buyer_name: str) -> AuctionResponse | MarketError:
        """Buy `auction_id` for `buyer_name` at the stored price."""
        # Shielded: a disconnecting client must not abandon a half-applied transfer
        task = asyncio.create_task(self._purchase(auction_id, buyer_name))
        task.add_done_callback(_retrieve_failure)
        return await asyncio.shield(task)

    async def _purchase(self, auction_id: uuid.UUID, buyer_name: str) -> AuctionResponse | MarketError:
        async with self.session_factory() as session:
            try:
                outcome = await self._transfer(session, auction_id, buyer_name)
            except Exception:
                await session.rollback()
                PURCHASES.labels(outcome=MarketError.INTERNAL.code).inc()
                logger.exception(
                    "Purchase failed with a store error",
                    extra={"auction_id": auction_id, "buyer": buyer_name},
                )
                raise

            if isinstance(outcome, MarketError):
                await session.rollback()
                PURCHASES.labels(outcome=outcome.code).inc()
                logger.info(
                    "Purchase rejected: %s",
                    outcome.code,
                    extra={"auction_id": auction_id, "buyer": buyer_name, "error_code": outcome.code},
                )
                return outcome

            await session.commit()
            auction = await AuctionRepository(session).get_auction(auction_id)
            PURCHASES.labels(outcome=AuctionStatus.SOLD.value).inc()
            logger.info(
                "Auction sold",
                extra={
                    "auction_id": auction_id,
                    "buyer": buyer_name,
                    "seller": auction.seller_name,
                    "price": auction.price,
                },
            )
            return AuctionResponse.model_validate(auction)

    async def _transfer(
        self, session: AsyncSession, auction_id: uuid.UUID, buyer_name: str
    ) -> None | MarketError:
        auctions = AuctionRepository(session)
        characters = CharacterRepository(session)
        instances = ItemInstanceRepository(session)

        auction = await auctions.get_auction(auction_id)
        if auction is None:
            return MarketError.AUCTION_NOT_FOUND

        buyer = await characters.get_by_name(buyer_name)
        if buyer is None:
            return MarketError.CHARACTER_NOT_FOUND

        if auction.status != AuctionStatus.ACTIVE or self.clock() >= auction.end_date:
            return MarketError.AUCTION_NOT_ACTIVE

        # Price always comes from the stored row
        price = auction.price
        if buyer.gold < price:
            return MarketError.INSUFFICIENT_GOLD

        if buyer.name == auction.seller_name:
            return MarketError.INCORRECT_BUYER

        seller = await characters.get_by_name(auction.seller_name)
        if seller is None:
            return MarketError.CHARACTER_NOT_FOUND

        # Writes: the store re-checks every precondition and arbitrates races
        if await auctions.mark_sold(auction.id, buyer.name, self.clock()) != 1:
            return MarketError.AUCTION_NOT_ACTIVE
        # Fixed lock order on character rows
        for name in sorted((buyer.name, seller.name)):
            if name == buyer.name:
                if await characters.debit(name, price) != 1:
                    return MarketError.INSUFFICIENT_GOLD
            elif await characters.credit(name, price) != 1:
                return MarketError.CHARACTER_NOT_FOUND
        if await instances.transfer(auction.item_instance_id, seller.name, buyer.name) != 1:
            return MarketError.ITEM_INSTANCE_NOT_FOUND
        return None
