"""
Character model - a player who owns item instances and holds gold.
"""

from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, String
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from auction_house.db.base import Base

if TYPE_CHECKING:
    from auction_house.db.models.auction import Auction
    from auction_house.db.models.item_instance import ItemInstance


class CharacterClass(str, Enum):
    WARRIOR = "warrior"
    MAGE = "mage"
    RANGER = "ranger"


class Character(Base):
    """Character entity. Gold is mutated only by purchase transfers."""

    __tablename__ = "characters"
    __table_args__ = (CheckConstraint("gold >= 0", name="ck_characters_gold_non_negative"),)

    name: Mapped[str] = mapped_column(String(64), primary_key=True)
    character_class: Mapped[CharacterClass] = mapped_column(
        "class",
        SAEnum(
            CharacterClass,
            name="character_class",
            native_enum=False,
            create_constraint=True,
            length=16,
            values_callable=lambda enum: [member.value for member in enum],
        ),
        nullable=False,
    )
    gold: Mapped[int] = mapped_column(nullable=False, default=0)

    # Deleting a character removes its instances and listings (DB-level cascade)
    item_instances: Mapped[list["ItemInstance"]] = relationship(
        "ItemInstance",
        back_populates="owner",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    auctions: Mapped[list["Auction"]] = relationship(
        "Auction",
        back_populates="seller",
        foreign_keys="Auction.seller_name",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Character(name={self.name}, gold={self.gold})>"
