"""
Pytest fixtures - test DB, client, marketplace factories (TDD/BDD support).
Challenge: Isolated tests; every test gets its own SQLite file database.
"""

import uuid
from datetime import timedelta
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from auction_house.db.base import Base
from auction_house.db.models import (
    Auction,
    AuctionStatus,
    Character,
    CharacterClass,
    Item,
    ItemInstance,
)
from auction_house.db.session import build_engine, build_session_factory, get_db, get_session_factory
from auction_house.db.types import utcnow
from auction_house.main import app
from auction_house.services import item_service


class MarketFactory:
    """Creates and inspects rows, each call in its own committed session."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def _add(self, entity):
        async with self.session_factory() as s:
            s.add(entity)
            await s.commit()
            await s.refresh(entity)
        return entity

    async def character(
        self, name: str, gold: int = 0, character_class: CharacterClass = CharacterClass.WARRIOR
    ) -> Character:
        return await self._add(Character(name=name, character_class=character_class, gold=gold))

    async def item(self, name: str) -> Item:
        return await self._add(Item(id=uuid.uuid4(), name=name))

    async def instance(self, owner_name: str, item: Item) -> ItemInstance:
        return await self._add(ItemInstance(item_id=item.id, item_name=item.name, owner_name=owner_name))

    async def auction(
        self,
        seller_name: str,
        instance: ItemInstance,
        price: int,
        ends_in: timedelta = timedelta(seconds=60),
        status: AuctionStatus = AuctionStatus.ACTIVE,
    ) -> Auction:
        end_date = utcnow() + ends_in
        return await self._add(
            Auction(
                auctioned_item_id=instance.item_id,
                item_instance_id=instance.id,
                seller_name=seller_name,
                creation_date=end_date - timedelta(seconds=60),
                end_date=end_date,
                price=price,
                status=status,
            )
        )

    async def listing(self, seller_name: str, gold: int, price: int, **kwargs) -> Auction:
        """Seller with `gold`, one item instance, listed at `price`."""
        await self.character(seller_name, gold=gold)
        item = await self.item(f"{seller_name}-item-{uuid.uuid4().hex[:6]}")
        instance = await self.instance(seller_name, item)
        return await self.auction(seller_name, instance, price, **kwargs)

    async def gold(self, name: str) -> int:
        async with self.session_factory() as s:
            return (await s.execute(select(Character.gold).where(Character.name == name))).scalar_one()

    async def get_auction(self, auction_id: uuid.UUID) -> Auction:
        async with self.session_factory() as s:
            return (await s.execute(select(Auction).where(Auction.id == auction_id))).scalar_one()

    async def owner_of(self, instance_id: uuid.UUID) -> str:
        async with self.session_factory() as s:
            return (
                await s.execute(select(ItemInstance.owner_name).where(ItemInstance.id == instance_id))
            ).scalar_one()


@pytest.fixture(autouse=True)
def no_redis(monkeypatch):
    """Catalog cache always misses; tests never touch a Redis server."""

    async def miss(key):
        return None

    async def skip(*args, **kwargs):
        return False

    monkeypatch.setattr(item_service, "cache_get", miss)
    monkeypatch.setattr(item_service, "cache_set", skip)
    monkeypatch.setattr(item_service, "cache_delete", skip)


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return build_session_factory(engine)


@pytest_asyncio.fixture
async def session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as s:
        yield s


@pytest.fixture
def market(session_factory) -> MarketFactory:
    return MarketFactory(session_factory)


@pytest_asyncio.fixture
async def client(session_factory):
    """One session per request, like production; purchases use the same database file."""

    async def override_get_db():
        async with session_factory() as s:
            try:
                yield s
                await s.commit()
            except Exception:
                await s.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
    app.dependency_overrides.clear()
