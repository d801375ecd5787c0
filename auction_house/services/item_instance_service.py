"""
Item instance service - a character's owned units of catalog items.
"""

import logging

from auction_house.core.errors import MarketError
from auction_house.db.models.character import Character
from auction_house.db.models.item_instance import ItemInstance
from auction_house.db.repositories.item_instance_repository import ItemInstanceRepository
from auction_house.db.repositories.item_repository import ItemRepository
from auction_house.schemas.item import ItemInstanceCreate, ItemInstanceResponse

logger = logging.getLogger(__name__)


class ItemInstanceService:
    def __init__(self, instance_repo: ItemInstanceRepository, item_repo: ItemRepository):
        self.instance_repo = instance_repo
        self.item_repo = item_repo

    async def list_for(self, owner: Character) -> list[ItemInstanceResponse]:
        instances = await self.instance_repo.list_by_owner(owner.name)
        return [ItemInstanceResponse.model_validate(i) for i in instances]

    async def acquire(
        self, owner: Character, data: ItemInstanceCreate
    ) -> ItemInstanceResponse | MarketError:
        """Give `owner` a new unit of a catalog item; the item name is copied onto the instance."""
        item = await self.item_repo.get_by_id(data.item_id)
        if item is None:
            return MarketError.ITEM_NOT_FOUND
        instance = await self.instance_repo.add(
            ItemInstance(item_id=item.id, item_name=item.name, owner_name=owner.name)
        )
        logger.info("Character %s acquired %s (%s)", owner.name, item.name, instance.id)
        return ItemInstanceResponse.model_validate(instance)

    def owned(self, owner: Character, instance: ItemInstance) -> ItemInstanceResponse | MarketError:
        """An instance is only visible under the character that owns it."""
        if instance.owner_name != owner.name:
            return MarketError.ITEM_INSTANCE_NOT_FOUND
        return ItemInstanceResponse.model_validate(instance)

    async def delete(self, owner: Character, instance: ItemInstance) -> ItemInstanceResponse | MarketError:
        resp = self.owned(owner, instance)
        if isinstance(resp, MarketError):
            return resp
        await self.instance_repo.delete(instance)
        return resp
