"""
FastAPI dependencies - guard layer wiring (SOLID: Dependency Inversion).
Challenge: Resolve path entities once, consistent 404 responses.
Design: Each dependency calls `resolve()` and passes the fetched entity to the endpoint.
"""

import uuid
from typing import Annotated

from fastapi import Depends

from auction_house.core.errors import MarketHTTPException
from auction_house.core.guards import EntityKind, InstanceKey, Missing, resolve
from auction_house.db.models import Auction, Character, Item, ItemInstance
from auction_house.db.session import DbSession


async def get_character_or_404(session: DbSession, name: str) -> Character:
    outcome = await resolve(session, EntityKind.CHARACTER, name)
    if isinstance(outcome, Missing):
        raise MarketHTTPException(outcome.error)
    return outcome.entity


async def get_item_or_404(session: DbSession, item_id: uuid.UUID) -> Item:
    outcome = await resolve(session, EntityKind.ITEM, item_id)
    if isinstance(outcome, Missing):
        raise MarketHTTPException(outcome.error)
    return outcome.entity


async def get_item_instance_or_404(
    session: DbSession, name: str, instance_id: uuid.UUID
) -> ItemInstance:
    outcome = await resolve(session, EntityKind.ITEM_INSTANCE, InstanceKey(name, instance_id))
    if isinstance(outcome, Missing):
        raise MarketHTTPException(outcome.error)
    return outcome.entity


async def get_auction_or_404(session: DbSession, auction_id: uuid.UUID) -> Auction:
    outcome = await resolve(session, EntityKind.AUCTION, auction_id)
    if isinstance(outcome, Missing):
        raise MarketHTTPException(outcome.error)
    return outcome.entity


ResolvedCharacter = Annotated[Character, Depends(get_character_or_404)]
ResolvedItem = Annotated[Item, Depends(get_item_or_404)]
ResolvedItemInstance = Annotated[ItemInstance, Depends(get_item_instance_or_404)]
ResolvedAuction = Annotated[Auction, Depends(get_auction_or_404)]
