"""
Auction endpoints - list, read, purchase and delete auctions.
Challenge: Purchase must be atomic and race-safe against other buyers and the sweeper.
Design: The guard resolves the auction (404 early); PurchaseService does the rest.
"""

from fastapi import APIRouter, Query

from auction_house.core.dependencies import ResolvedAuction
from auction_house.core.errors import ok_or_raise
from auction_house.db.models.auction import AuctionStatus
from auction_house.db.repositories import AuctionRepository
from auction_house.db.session import DbSession, SessionFactory
from auction_house.schemas.auction import AuctionResponse, PurchaseRequest
from auction_house.services.auction_service import AuctionService
from auction_house.services.purchase_service import PurchaseService

router = APIRouter()


@router.get("", response_model=list[AuctionResponse])
async def list_auctions(
    session: DbSession,
    auction_status: AuctionStatus | None = Query(None, alias="status"),
):
    """All auctions; `?status=active|sold|expired` filters."""
    return await AuctionService(AuctionRepository(session)).list_auctions(auction_status)


@router.get("/{auction_id}", response_model=AuctionResponse)
async def get_auction(session: DbSession, auction: ResolvedAuction):
    return AuctionService(AuctionRepository(session)).describe(auction)


@router.post("/{auction_id}/purchase", response_model=AuctionResponse)
async def purchase_auction(
    session_factory: SessionFactory, auction: ResolvedAuction, data: PurchaseRequest
):
    """Buy the auction at its stored price. Gold and the item change hands atomically."""
    svc = PurchaseService(session_factory)
    return ok_or_raise(await svc.purchase(auction.id, data.buyer_name))


@router.delete("/{auction_id}", response_model=AuctionResponse)
async def delete_auction(session: DbSession, auction: ResolvedAuction):
    return await AuctionService(AuctionRepository(session)).delete(auction)
