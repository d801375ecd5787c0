"""
Item catalog endpoints - RESTful resource (GET/POST/DELETE).
Design: Thin controller; service layer holds business logic and caching.
"""

import uuid

from fastapi import APIRouter, Query, status

from auction_house.config import get_settings
from auction_house.core.dependencies import ResolvedItem
from auction_house.core.errors import MarketError, ok_or_raise
from auction_house.db.models.auction import AuctionStatus
from auction_house.db.repositories import AuctionRepository, ItemRepository
from auction_house.db.session import DbSession
from auction_house.schemas.auction import AuctionResponse
from auction_house.schemas.item import ItemCreate, ItemResponse
from auction_house.services.item_service import ItemService

router = APIRouter()
settings = get_settings()


def _get_item_service(session: DbSession) -> ItemService:
    """Factory for service with repository injection (Dependency Inversion)."""
    return ItemService(ItemRepository(session), AuctionRepository(session))


@router.get("", response_model=list[ItemResponse])
async def list_items(
    session: DbSession,
    skip: int = Query(0, ge=0),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
):
    return await _get_item_service(session).list_items(skip=skip, limit=limit)


@router.post("", response_model=ItemResponse, status_code=status.HTTP_201_CREATED)
async def create_item(session: DbSession, data: ItemCreate):
    return ok_or_raise(await _get_item_service(session).create(data))


@router.get("/{item_id}", response_model=ItemResponse)
async def get_item(session: DbSession, item_id: uuid.UUID):
    """Get single catalog entry. Uses Redis cache for performance."""
    item = await _get_item_service(session).get_by_id(item_id)
    return ok_or_raise(item if item is not None else MarketError.ITEM_NOT_FOUND)


@router.delete("/{item_id}", response_model=ItemResponse)
async def delete_item(session: DbSession, item: ResolvedItem):
    """Delete a catalog entry; its instances and auctions go with it."""
    return await _get_item_service(session).delete(item)


@router.get("/{item_id}/auctions", response_model=list[AuctionResponse])
async def list_item_auctions(
    session: DbSession,
    item: ResolvedItem,
    auction_status: AuctionStatus | None = Query(None, alias="status"),
):
    return await _get_item_service(session).list_auctions(item, auction_status)
