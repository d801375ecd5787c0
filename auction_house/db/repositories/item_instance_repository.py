"""
Item instance repository - ownership lookups and the ownership transfer on sale.
"""

import uuid

from sqlalchemy import select, update

from auction_house.db.models.item_instance import ItemInstance
from auction_house.db.repositories.base_repository import BaseRepository


class ItemInstanceRepository(BaseRepository[ItemInstance]):
    """Instances are always addressed through their owner in the API."""

    def __init__(self, session):
        super().__init__(session, ItemInstance)

    async def list_by_owner(self, owner_name: str) -> list[ItemInstance]:
        result = await self.session.execute(
            select(ItemInstance)
            .where(ItemInstance.owner_name == owner_name)
            .order_by(ItemInstance.item_name, ItemInstance.id)
        )
        return list(result.scalars().all())

    async def get_owned(self, owner_name: str, instance_id: uuid.UUID) -> ItemInstance | None:
        """The instance only if `owner_name` holds it; fresh read like `get_by_id`."""
        result = await self.session.execute(
            select(ItemInstance)
            .where(ItemInstance.id == instance_id, ItemInstance.owner_name == owner_name)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def transfer(self, instance_id: uuid.UUID, from_owner: str, to_owner: str) -> int:
        """Move ownership only if `from_owner` still holds the instance. Returns affected rows."""
        result = await self.session.execute(
            update(ItemInstance)
            .where(ItemInstance.id == instance_id, ItemInstance.owner_name == from_owner)
            .values(owner_name=to_owner)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount
