"""Character request/response schemas - API contract and validation."""

from pydantic import BaseModel, Field

from auction_house.db.models.character import CharacterClass


class CharacterBase(BaseModel):
    name: str = Field(..., max_length=64)
    character_class: CharacterClass = Field(..., alias="class")
    gold: int = Field(0, ge=0)

    model_config = {"populate_by_name": True}


class CharacterCreate(CharacterBase):
    pass


class CharacterResponse(CharacterBase):
    model_config = {"from_attributes": True, "populate_by_name": True}
