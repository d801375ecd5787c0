"""
Async database session management.
Challenge: Connection pooling, scoped sessions, proper cleanup.
Design: Dependency injection for request-scoped sessions (no connection leaks).
"""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from auction_house.config import get_settings

settings = get_settings()


def build_engine(url: str, *, echo: bool = False, **engine_kwargs) -> AsyncEngine:
    """Create the async engine. Pool sizing only applies to server databases without a `poolclass`."""
    if url.startswith("sqlite"):
        sqlite_engine = create_async_engine(
            url, echo=echo, connect_args={"timeout": 30}, **engine_kwargs
        )

        # SQLite leaves foreign keys (and ON DELETE CASCADE) off per connection
        @event.listens_for(sqlite_engine.sync_engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return sqlite_engine
    pool_sizing = {} if "poolclass" in engine_kwargs else {"pool_size": 10, "max_overflow": 20}
    return create_async_engine(
        url,
        echo=echo,
        pool_pre_ping=True,  # Verify connections before use
        **pool_sizing,
        **engine_kwargs,
    )


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory: one session per request or sweep tick."""
    return async_sessionmaker(
        bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


# Single long-lived store handle shared by requests and the sweeper
engine = build_engine(settings.database_url, echo=settings.debug)
async_session_maker = build_session_factory(engine)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield a database session per request. Ensures rollback on error, close on exit."""
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# Type alias for FastAPI dependency injection
DbSession = Annotated[AsyncSession, Depends(get_db)]


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Store handle for components that manage their own transactions (purchases)."""
    return async_session_maker


SessionFactory = Annotated[async_sessionmaker[AsyncSession], Depends(get_session_factory)]
