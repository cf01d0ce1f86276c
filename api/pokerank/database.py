"""Storage wiring: picks the adapter from settings.database_url.

A non-empty database_url gets an async SQLAlchemy engine and one
SqlStorage per request; an empty one gets a single process-wide
MemoryStorage (development and tests).
"""

from contextlib import asynccontextmanager
from typing import AsyncContextManager, AsyncIterator, Callable

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from pokerank.config import Settings
from pokerank.models.base import Base
from pokerank.storage import MemoryStorage, SqlStorage, Storage

StorageProvider = Callable[[], AsyncContextManager[Storage]]


def create_engine(app_settings: Settings) -> AsyncEngine:
    return create_async_engine(app_settings.database_url, echo=app_settings.debug)


def sql_storage_provider(engine: AsyncEngine) -> StorageProvider:
    session_factory = async_sessionmaker(
        engine,
        expire_on_commit=False,
        class_=AsyncSession,
    )

    @asynccontextmanager
    async def provide() -> AsyncIterator[Storage]:
        async with session_factory() as session:
            yield SqlStorage(session)

    return provide


def memory_storage_provider(storage: MemoryStorage | None = None) -> StorageProvider:
    shared = storage or MemoryStorage()

    @asynccontextmanager
    async def provide() -> AsyncIterator[Storage]:
        yield shared

    return provide


async def create_schema(engine: AsyncEngine) -> None:
    """Create tables directly; production deployments run Alembic instead."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
