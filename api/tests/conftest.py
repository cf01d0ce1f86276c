"""Shared fixtures: storage adapters with a controllable clock, and an HTTP
client wired to the FastAPI app without network access."""

from datetime import datetime, timedelta, timezone

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from pokerank.database import memory_storage_provider
from pokerank.main import app
from pokerank.models import Base
from pokerank.services.seed_source import StaticSeedSource
from pokerank.storage import EntityUpsert, MemoryStorage, SqlStorage

TEST_ROSTER = [
    EntityUpsert(natural_key=1, display_name="Bulbasaur", categories=("Grass", "Poison")),
    EntityUpsert(natural_key=4, display_name="Charmander", categories=("Fire",)),
    EntityUpsert(natural_key=7, display_name="Squirtle", categories=("Water",)),
    EntityUpsert(natural_key=25, display_name="Pikachu", categories=("Electric",)),
]


class FakeClock:
    """Callable clock whose time only moves when a test says so."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime.now(timezone.utc).replace(microsecond=0))


@pytest.fixture
def memory_storage(clock) -> MemoryStorage:
    return MemoryStorage(clock=clock)


@pytest.fixture
async def sql_storage(clock):
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)
    async with session_factory() as session:
        yield SqlStorage(session, clock=clock)

    await engine.dispose()


@pytest.fixture(params=["memory", "sql"])
def storage(request):
    """Runs a test once per storage adapter."""
    return request.getfixturevalue(f"{request.param}_storage")


@pytest.fixture
def roster() -> list[EntityUpsert]:
    return list(TEST_ROSTER)


@pytest.fixture
async def seeded(storage, roster):
    """The test roster upserted into `storage`; returns the created entities."""
    async with storage.transaction():
        return [await storage.entities.upsert(record) for record in roster]


@pytest.fixture
async def client(memory_storage):
    app.state.storage_provider = memory_storage_provider(memory_storage)
    app.state.seed_source = StaticSeedSource(TEST_ROSTER)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.state.storage_provider = None
    app.state.seed_source = None
    app.state.seed_lock = None
