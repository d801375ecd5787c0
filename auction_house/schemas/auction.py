"""Auction request/response schemas. Price is never taken from a purchase request."""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from auction_house.db.models.auction import AuctionStatus


class AuctionCreate(BaseModel):
    price: int = Field(..., ge=0)


class PurchaseRequest(BaseModel):
    buyer_name: str


class AuctionResponse(BaseModel):
    id: uuid.UUID
    auctioned_item_id: uuid.UUID
    item_instance_id: uuid.UUID
    seller_name: str
    buyer_name: str | None = None
    creation_date: datetime
    end_date: datetime
    price: int
    status: AuctionStatus

    model_config = {"from_attributes": True}
