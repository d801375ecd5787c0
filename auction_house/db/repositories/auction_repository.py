"""
Auction repository - every read and status write against the auctions table.
Challenge: Purchases and the expiry sweep race for the same rows.
Design: Status writes are conditional UPDATEs (`status = 'active'`), so the
database decides the single winner and the loser sees zero affected rows.
"""

import uuid
from datetime import datetime

from sqlalchemy import select, update

from auction_house.db.models.auction import Auction, AuctionStatus
from auction_house.db.repositories.base_repository import BaseRepository


class AuctionRepository(BaseRepository[Auction]):
    """Auction-specific queries and state transitions."""

    def __init__(self, session):
        super().__init__(session, Auction)

    async def list_auctions(self, status: AuctionStatus | None = None) -> list[Auction]:
        """All auctions, optionally filtered to one status."""
        stmt = select(Auction).order_by(Auction.creation_date, Auction.id)
        if status is not None:
            stmt = stmt.where(Auction.status == status)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_auction(self, auction_id: uuid.UUID) -> Auction | None:
        """Fresh read of one auction; None when absent."""
        return await self.get_by_id(auction_id)

    async def list_by_seller(
        self, seller_name: str, status: AuctionStatus | None = None
    ) -> list[Auction]:
        stmt = select(Auction).where(Auction.seller_name == seller_name).order_by(Auction.creation_date)
        if status is not None:
            stmt = stmt.where(Auction.status == status)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_by_item(
        self, item_id: uuid.UUID, status: AuctionStatus | None = None
    ) -> list[Auction]:
        stmt = select(Auction).where(Auction.auctioned_item_id == item_id).order_by(Auction.creation_date)
        if status is not None:
            stmt = stmt.where(Auction.status == status)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def active_for_instance(self, instance_id: uuid.UUID) -> Auction | None:
        """The Active listing of an item instance, if any."""
        result = await self.session.execute(
            select(Auction).where(
                Auction.item_instance_id == instance_id,
                Auction.status == AuctionStatus.ACTIVE,
            )
        )
        return result.scalars().first()

    async def create_auction(self, auction: Auction) -> Auction:
        """Insert a new listing. Status is always Active on creation."""
        auction.status = AuctionStatus.ACTIVE
        return await self.add(auction)

    async def mark_sold(self, auction_id: uuid.UUID, buyer_name: str, now: datetime) -> int:
        """
        Active -> Sold, only while the listing is still open at `now`.

        Returns the affected row count: 1 if this caller won, 0 if the row was
        already sold/expired or its end date has passed.
        """
        result = await self.session.execute(
            update(Auction)
            .where(
                Auction.id == auction_id,
                Auction.status == AuctionStatus.ACTIVE,
                Auction.end_date > now,
            )
            .values(status=AuctionStatus.SOLD, buyer_name=buyer_name)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def mark_expired_batch(self, now: datetime) -> int:
        """
        Active -> Expired for every listing whose end date is before `now`.

        One statement regardless of row count. Idempotent: rows already
        sold or expired never match.
        """
        result = await self.session.execute(
            update(Auction)
            .where(Auction.status == AuctionStatus.ACTIVE, Auction.end_date < now)
            .values(status=AuctionStatus.EXPIRED)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def delete_auction(self, auction: Auction) -> None:
        """Administrative removal; status is not checked."""
        await self.delete(auction)
