"""
SQLAlchemy declarative base for the marketplace ledger tables.
Alembic and the test suite build the schema from `Base.metadata`.
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for characters, items, item instances and auctions."""
