"""
Item model - catalog entry that item instances are minted from.
"""

import uuid

from sqlalchemy import String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from auction_house.db.base import Base


class Item(Base):
    """Catalog entry. Immutable once created; referenced by instances and auctions."""

    __tablename__ = "items"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<Item(id={self.id}, name={self.name})>"
