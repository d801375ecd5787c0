"""
Character repository - character reads and the two balance writes used by purchases.
"""

from sqlalchemy import update

from auction_house.db.models.character import Character
from auction_house.db.repositories.base_repository import BaseRepository


class CharacterRepository(BaseRepository[Character]):
    """Character-specific queries. Balance changes are relative, never read-modify-write."""

    def __init__(self, session):
        super().__init__(session, Character)

    async def get_by_name(self, name: str) -> Character | None:
        return await self.get_by_id(name)

    async def debit(self, name: str, amount: int) -> int:
        """Subtract `amount` only if the balance covers it. Returns affected rows (0 or 1)."""
        result = await self.session.execute(
            update(Character)
            .where(Character.name == name, Character.gold >= amount)
            .values(gold=Character.gold - amount)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def credit(self, name: str, amount: int) -> int:
        """Add `amount` to the balance. Returns affected rows (0 or 1)."""
        result = await self.session.execute(
            update(Character)
            .where(Character.name == name)
            .values(gold=Character.gold + amount)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount
