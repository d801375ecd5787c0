"""
Item service - catalog use cases (SOLID: Single Responsibility).
Challenge: Orchestrate repository and cache; keep controllers thin.
Design: Catalog entries never change after creation, so detail reads are cached in Redis.
"""

import json
import logging
import uuid

from sqlalchemy.exc import IntegrityError

from auction_house.cache.redis_client import cache_delete, cache_get, cache_set
from auction_house.config import get_settings
from auction_house.core.errors import MarketError
from auction_house.db.models.auction import AuctionStatus
from auction_house.db.models.item import Item
from auction_house.db.repositories.auction_repository import AuctionRepository
from auction_house.db.repositories.item_repository import ItemRepository
from auction_house.schemas.auction import AuctionResponse
from auction_house.schemas.item import ItemCreate, ItemResponse

logger = logging.getLogger(__name__)

# Cache key prefix for item detail
CACHE_PREFIX = "item:"


class ItemService:
    """Handles catalog use cases: create, read (cached), delete, auctions by item."""

    def __init__(self, item_repo: ItemRepository, auction_repo: AuctionRepository):
        self.item_repo = item_repo
        self.auction_repo = auction_repo
        self.cache_ttl = get_settings().item_cache_ttl_seconds

    async def list_items(self, skip: int = 0, limit: int = 20) -> list[ItemResponse]:
        items = await self.item_repo.get_many(skip=skip, limit=limit)
        return [ItemResponse.model_validate(i) for i in items]

    async def create(self, data: ItemCreate) -> ItemResponse | MarketError:
        """Add a catalog entry with a generated id. Name must be non-empty and unique."""
        name = data.name.strip()
        if not name:
            return MarketError.EMPTY_NAME
        if await self.item_repo.get_by_name(name) is not None:
            return MarketError.NAME_TAKEN
        try:
            item = await self.item_repo.add(Item(id=uuid.uuid4(), name=name))
        except IntegrityError:
            await self.item_repo.session.rollback()
            return MarketError.NAME_TAKEN
        logger.info("Item %s created (%s)", item.name, item.id)
        return ItemResponse.model_validate(item)

    async def get_by_id(self, item_id: uuid.UUID, use_cache: bool = True) -> ItemResponse | None:
        """Get item by id. Uses Redis cache to reduce DB load (performance)."""
        if use_cache:
            cached = await cache_get(CACHE_PREFIX + str(item_id))
            if cached:
                return ItemResponse(**json.loads(cached))
        item = await self.item_repo.get_by_id(item_id)
        if not item:
            return None
        resp = ItemResponse.model_validate(item)
        if use_cache:
            await cache_set(CACHE_PREFIX + str(item_id), resp.model_dump(mode="json"), self.cache_ttl)
        return resp

    async def delete(self, item: Item) -> ItemResponse:
        """Delete a catalog entry; instances and auctions referencing it cascade."""
        resp = ItemResponse.model_validate(item)
        await self.item_repo.delete(item)
        await cache_delete(CACHE_PREFIX + str(resp.id))
        return resp

    async def list_auctions(
        self, item: Item, status: AuctionStatus | None = None
    ) -> list[AuctionResponse]:
        auctions = await self.auction_repo.list_by_item(item.id, status)
        return [AuctionResponse.model_validate(a) for a in auctions]
