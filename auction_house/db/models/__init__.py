from auction_house.db.models.auction import Auction, AuctionStatus
from auction_house.db.models.character import Character, CharacterClass
from auction_house.db.models.item import Item
from auction_house.db.models.item_instance import ItemInstance

__all__ = ["Auction", "AuctionStatus", "Character", "CharacterClass", "Item", "ItemInstance"]
