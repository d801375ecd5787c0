"""
Character service - registration, lookup and removal of characters.
Design: Returns `MarketError` for expected failures; the endpoint maps them to responses.
"""

import logging

from sqlalchemy.exc import IntegrityError

from auction_house.core.errors import MarketError
from auction_house.db.models.character import Character
from auction_house.db.repositories.character_repository import CharacterRepository
from auction_house.schemas.character import CharacterCreate, CharacterResponse

logger = logging.getLogger(__name__)


def _character_to_response(character: Character) -> CharacterResponse:
    return CharacterResponse(
        name=character.name,
        character_class=character.character_class,
        gold=character.gold,
    )


class CharacterService:
    def __init__(self, character_repo: CharacterRepository):
        self.character_repo = character_repo

    async def list_characters(self, skip: int = 0, limit: int = 20) -> list[CharacterResponse]:
        characters = await self.character_repo.get_many(skip=skip, limit=limit)
        return [_character_to_response(c) for c in characters]

    async def create(self, data: CharacterCreate) -> CharacterResponse | MarketError:
        """Register a character. Name must be non-empty and unused."""
        name = data.name.strip()
        if not name:
            return MarketError.EMPTY_NAME
        if await self.character_repo.get_by_name(name) is not None:
            return MarketError.NAME_TAKEN
        character = Character(name=name, character_class=data.character_class, gold=data.gold)
        try:
            character = await self.character_repo.add(character)
        except IntegrityError:
            # Lost a race for the name after the precheck
            await self.character_repo.session.rollback()
            return MarketError.NAME_TAKEN
        logger.info("Character %s registered", character.name)
        return _character_to_response(character)

    def describe(self, character: Character) -> CharacterResponse:
        return _character_to_response(character)

    async def delete(self, character: Character) -> CharacterResponse:
        """Delete a character; instances and auctions go with it (FK cascade)."""
        response = _character_to_response(character)
        await self.character_repo.delete(character)
        logger.info("Character %s deleted", response.name)
        return response
