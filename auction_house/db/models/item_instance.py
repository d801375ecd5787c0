"""
ItemInstance model - a concrete unit of a catalog item held by one character.
"""

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from auction_house.db.base import Base

if TYPE_CHECKING:
    from auction_house.db.models.character import Character


class ItemInstance(Base):
    """Owned unit. `item_name` is copied from the catalog at creation time."""

    __tablename__ = "item_instances"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    item_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("items.id", ondelete="CASCADE"), nullable=False, index=True
    )
    item_name: Mapped[str] = mapped_column(String(255), nullable=False)
    owner_name: Mapped[str] = mapped_column(
        ForeignKey("characters.name", ondelete="CASCADE"), nullable=False, index=True
    )

    owner: Mapped["Character"] = relationship("Character", back_populates="item_instances")

    def __repr__(self) -> str:
        return f"<ItemInstance(id={self.id}, item={self.item_name}, owner={self.owner_name})>"
