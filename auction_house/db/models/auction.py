"""
Auction model - fixed-price, time-bounded listing of one item instance.

State machine: active -> sold | expired. Both terminal states are final;
every status write is conditioned on the row still being active.
"""

import uuid
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, ForeignKey, Index, String, Uuid, text
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from auction_house.db.base import Base
from auction_house.db.types import UTCDateTime

if TYPE_CHECKING:
    from auction_house.db.models.character import Character


class AuctionStatus(str, Enum):
    ACTIVE = "active"
    SOLD = "sold"
    EXPIRED = "expired"


class Auction(Base):
    """Auction entity. `price` and `end_date` never change after insert."""

    __tablename__ = "auctions"
    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_auctions_price_non_negative"),
        # At most one active listing per item instance; sold and expired rows are history
        Index(
            "uq_auctions_active_item_instance",
            "item_instance_id",
            unique=True,
            sqlite_where=text("status = 'active'"),
            postgresql_where=text("status = 'active'"),
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    auctioned_item_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("items.id", ondelete="CASCADE"), nullable=False, index=True
    )
    item_instance_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("item_instances.id", ondelete="CASCADE"), nullable=False, index=True
    )
    seller_name: Mapped[str] = mapped_column(
        ForeignKey("characters.name", ondelete="CASCADE"), nullable=False, index=True
    )
    buyer_name: Mapped[str | None] = mapped_column(
        ForeignKey("characters.name", ondelete="SET NULL"), nullable=True
    )
    creation_date: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    end_date: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, index=True)
    price: Mapped[int] = mapped_column(nullable=False)
    status: Mapped[AuctionStatus] = mapped_column(
        SAEnum(
            AuctionStatus,
            name="auction_status",
            native_enum=False,
            create_constraint=True,
            length=16,
            values_callable=lambda enum: [member.value for member in enum],
        ),
        nullable=False,
        default=AuctionStatus.ACTIVE,
        index=True,
    )

    seller: Mapped["Character"] = relationship(
        "Character", back_populates="auctions", foreign_keys=[seller_name]
    )

    def __repr__(self) -> str:
        return f"<Auction(id={self.id}, seller={self.seller_name}, status={self.status})>"
