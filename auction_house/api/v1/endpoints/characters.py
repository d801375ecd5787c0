"""
Character endpoints - registration, lookup, inventory and listings of a character.
Design: Thin controller; path entities arrive pre-resolved from the guard dependencies.
"""

from fastapi import APIRouter, Query, status

from auction_house.config import get_settings
from auction_house.core.dependencies import ResolvedCharacter, ResolvedItemInstance
from auction_house.core.errors import ok_or_raise
from auction_house.db.models.auction import AuctionStatus
from auction_house.db.repositories import (
    AuctionRepository,
    CharacterRepository,
    ItemInstanceRepository,
    ItemRepository,
)
from auction_house.db.session import DbSession
from auction_house.schemas.auction import AuctionCreate, AuctionResponse
from auction_house.schemas.character import CharacterCreate, CharacterResponse
from auction_house.schemas.item import ItemInstanceCreate, ItemInstanceResponse
from auction_house.services.auction_service import AuctionService
from auction_house.services.character_service import CharacterService
from auction_house.services.item_instance_service import ItemInstanceService

router = APIRouter()
settings = get_settings()


def _get_character_service(session: DbSession) -> CharacterService:
    return CharacterService(CharacterRepository(session))


def _get_instance_service(session: DbSession) -> ItemInstanceService:
    return ItemInstanceService(ItemInstanceRepository(session), ItemRepository(session))


@router.get("", response_model=list[CharacterResponse])
async def list_characters(
    session: DbSession,
    skip: int = Query(0, ge=0),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
):
    return await _get_character_service(session).list_characters(skip=skip, limit=limit)


@router.post("", response_model=CharacterResponse, status_code=status.HTTP_201_CREATED)
async def create_character(session: DbSession, data: CharacterCreate):
    """Register a character with a class and a starting gold balance."""
    return ok_or_raise(await _get_character_service(session).create(data))


@router.get("/{name}", response_model=CharacterResponse)
async def get_character(session: DbSession, character: ResolvedCharacter):
    return _get_character_service(session).describe(character)


@router.delete("/{name}", response_model=CharacterResponse)
async def delete_character(session: DbSession, character: ResolvedCharacter):
    """Delete a character together with its item instances and auctions."""
    return await _get_character_service(session).delete(character)


@router.get("/{name}/auctions", response_model=list[AuctionResponse])
async def list_character_auctions(
    session: DbSession,
    character: ResolvedCharacter,
    auction_status: AuctionStatus | None = Query(None, alias="status"),
):
    """Auctions listed by this character, optionally filtered by status."""
    return await AuctionService(AuctionRepository(session)).list_by_seller(character, auction_status)


@router.get("/{name}/items", response_model=list[ItemInstanceResponse])
async def list_character_items(session: DbSession, character: ResolvedCharacter):
    return await _get_instance_service(session).list_for(character)


@router.post(
    "/{name}/items", response_model=ItemInstanceResponse, status_code=status.HTTP_201_CREATED
)
async def acquire_item(session: DbSession, character: ResolvedCharacter, data: ItemInstanceCreate):
    """Give the character a new instance of a catalog item."""
    return ok_or_raise(await _get_instance_service(session).acquire(character, data))


@router.get("/{name}/items/{instance_id}", response_model=ItemInstanceResponse)
async def get_character_item(
    session: DbSession, character: ResolvedCharacter, instance: ResolvedItemInstance
):
    return ok_or_raise(_get_instance_service(session).owned(character, instance))


@router.delete("/{name}/items/{instance_id}", response_model=ItemInstanceResponse)
async def delete_character_item(
    session: DbSession, character: ResolvedCharacter, instance: ResolvedItemInstance
):
    return ok_or_raise(await _get_instance_service(session).delete(character, instance))


@router.post(
    "/{name}/items/{instance_id}/auctions",
    response_model=AuctionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_auction(
    session: DbSession,
    character: ResolvedCharacter,
    instance: ResolvedItemInstance,
    data: AuctionCreate,
):
    """List an owned item instance for sale at a fixed price."""
    svc = AuctionService(AuctionRepository(session))
    return ok_or_raise(await svc.create(character, instance, data))
