"""
Auction service - listing, lookup, creation and removal of auctions.
Design: Thin over AuctionRepository; purchases live in PurchaseService.
"""

import logging
import uuid
from collections.abc import Callable
from datetime import datetime, timedelta

from sqlalchemy.exc import IntegrityError

from auction_house.config import get_settings
from auction_house.core.errors import MarketError
from auction_house.db.models.auction import Auction, AuctionStatus
from auction_house.db.models.character import Character
from auction_house.db.models.item_instance import ItemInstance
from auction_house.db.repositories.auction_repository import AuctionRepository
from auction_house.db.types import utcnow
from auction_house.schemas.auction import AuctionCreate, AuctionResponse

logger = logging.getLogger(__name__)


class AuctionService:
    """Auction use cases other than purchase."""

    def __init__(
        self,
        auction_repo: AuctionRepository,
        duration: timedelta | None = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.auction_repo = auction_repo
        self.duration = duration or timedelta(seconds=get_settings().auction_duration_seconds)
        self.clock = clock

    async def list_auctions(self, status: AuctionStatus | None = None) -> list[AuctionResponse]:
        auctions = await self.auction_repo.list_auctions(status)
        return [AuctionResponse.model_validate(a) for a in auctions]

    async def list_by_seller(
        self, seller: Character, status: AuctionStatus | None = None
    ) -> list[AuctionResponse]:
        auctions = await self.auction_repo.list_by_seller(seller.name, status)
        return [AuctionResponse.model_validate(a) for a in auctions]

    async def create(
        self, seller: Character, instance: ItemInstance, data: AuctionCreate
    ) -> AuctionResponse | MarketError:
        """
        List an owned item instance at a fixed price.

        The listing closes `duration` after creation. One instance can back
        at most one active auction.
        """
        if instance.owner_name != seller.name:
            return MarketError.ITEM_INSTANCE_NOT_OWNED
        if await self.auction_repo.active_for_instance(instance.id) is not None:
            return MarketError.ITEM_INSTANCE_ALREADY_LISTED

        now = self.clock()
        auction = Auction(
            id=uuid.uuid4(),
            auctioned_item_id=instance.item_id,
            item_instance_id=instance.id,
            seller_name=seller.name,
            creation_date=now,
            end_date=now + self.duration,
            price=data.price,
        )
        try:
            auction = await self.auction_repo.create_auction(auction)
        except IntegrityError:
            # A concurrent listing of the same instance committed first
            await self.auction_repo.session.rollback()
            if await self.auction_repo.active_for_instance(instance.id) is not None:
                return MarketError.ITEM_INSTANCE_ALREADY_LISTED
            raise
        logger.info(
            "Auction created for %s",
            instance.item_name,
            extra={"auction_id": auction.id, "seller": seller.name, "price": auction.price},
        )
        return AuctionResponse.model_validate(auction)

    def describe(self, auction: Auction) -> AuctionResponse:
        return AuctionResponse.model_validate(auction)

    async def delete(self, auction: Auction) -> AuctionResponse:
        """Administrative cleanup; any status may be deleted."""
        resp = AuctionResponse.model_validate(auction)
        await self.auction_repo.delete_auction(auction)
        logger.info("Auction deleted", extra={"auction_id": resp.id})
        return resp
