"""Item and item instance schemas - REST API contract."""

import uuid

from pydantic import BaseModel, Field


class ItemCreate(BaseModel):
    name: str = Field(..., max_length=255)


class ItemResponse(BaseModel):
    id: uuid.UUID
    name: str

    model_config = {"from_attributes": True}


class ItemInstanceCreate(BaseModel):
    item_id: uuid.UUID


class ItemInstanceResponse(BaseModel):
    id: uuid.UUID
    item_id: uuid.UUID
    item_name: str
    owner_name: str

    model_config = {"from_attributes": True}
