"""
Item repository - catalog data access.
"""

from sqlalchemy import select

from auction_house.db.models.item import Item
from auction_house.db.repositories.base_repository import BaseRepository


class ItemRepository(BaseRepository[Item]):
    def __init__(self, session):
        super().__init__(session, Item)

    async def get_by_name(self, name: str) -> Item | None:
        result = await self.session.execute(select(Item).where(Item.name == name))
        return result.scalar_one_or_none()
