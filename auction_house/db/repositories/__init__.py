# Repository pattern: abstract data access (SOLID - Dependency Inversion)

from auction_house.db.repositories.auction_repository import AuctionRepository
from auction_house.db.repositories.character_repository import CharacterRepository
from auction_house.db.repositories.item_instance_repository import ItemInstanceRepository
from auction_house.db.repositories.item_repository import ItemRepository

__all__ = ["AuctionRepository", "CharacterRepository", "ItemInstanceRepository", "ItemRepository"]
