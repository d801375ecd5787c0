"""
Guard layer - resolve referenced entities before business logic runs.

`resolve(session, kind, key)` returns `Resolved(entity)` or `Missing(kind)`;
nothing is attached to the request. FastAPI dependencies in
`auction_house.core.dependencies` turn `Missing` into a 404 and hand the
already-fetched entity to the endpoint.
"""

import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from auction_house.core.errors import MarketError
from auction_house.db.repositories import (
    AuctionRepository,
    CharacterRepository,
    ItemInstanceRepository,
    ItemRepository,
)

T = TypeVar("T")


class EntityKind(str, Enum):
    CHARACTER = "character"
    ITEM = "item"
    ITEM_INSTANCE = "item_instance"
    AUCTION = "auction"

    @property
    def not_found(self) -> MarketError:
        return _NOT_FOUND[self]


_NOT_FOUND = {
    EntityKind.CHARACTER: MarketError.CHARACTER_NOT_FOUND,
    EntityKind.ITEM: MarketError.ITEM_NOT_FOUND,
    EntityKind.ITEM_INSTANCE: MarketError.ITEM_INSTANCE_NOT_FOUND,
    EntityKind.AUCTION: MarketError.AUCTION_NOT_FOUND,
}


@dataclass(frozen=True)
class Resolved(Generic[T]):
    entity: T


@dataclass(frozen=True)
class Missing:
    kind: EntityKind

    @property
    def error(self) -> MarketError:
        return self.kind.not_found


@dataclass(frozen=True)
class InstanceKey:
    """Item instances are addressed by owner and id together; another owner's instance is Missing."""

    owner_name: str
    instance_id: uuid.UUID


async def resolve(session: AsyncSession, kind: EntityKind, key: Any) -> Resolved | Missing:
    """Fetch the entity of `kind` identified by `key`."""
    if kind is EntityKind.CHARACTER:
        entity = await CharacterRepository(session).get_by_name(key)
    elif kind is EntityKind.ITEM:
        entity = await ItemRepository(session).get_by_id(key)
    elif kind is EntityKind.AUCTION:
        entity = await AuctionRepository(session).get_auction(key)
    elif kind is EntityKind.ITEM_INSTANCE:
        owner = await CharacterRepository(session).get_by_name(key.owner_name)
        if owner is None:
            return Missing(EntityKind.CHARACTER)
        entity = await ItemInstanceRepository(session).get_owned(key.owner_name, key.instance_id)
    else:
        raise ValueError(f"Unknown entity kind: {kind!r}")

    if entity is None:
        return Missing(kind)
    return Resolved(entity)
