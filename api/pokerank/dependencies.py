import asyncio
from typing import Annotated, AsyncIterator

from fastapi import Depends, Request

from pokerank.services.seed_source import PokeApiSeedSource, SeedSource
from pokerank.storage.base import Storage


async def get_storage(request: Request) -> AsyncIterator[Storage]:
    """FastAPI dependency: yields the Storage for this request.

    The provider is installed on app.state during lifespan startup (one
    SqlStorage per request, or the shared MemoryStorage).
    """
    async with request.app.state.storage_provider() as storage:
        yield storage


def get_seed_source(request: Request) -> SeedSource:
    """Inject the seed source from app.state, defaulting to PokeAPI."""
    source = getattr(request.app.state, "seed_source", None)
    return source if source is not None else PokeApiSeedSource()


def get_seed_lock(request: Request) -> asyncio.Lock:
    """One seeding lock per app, created on the loop serving it."""
    lock = getattr(request.app.state, "seed_lock", None)
    if lock is None:
        lock = request.app.state.seed_lock = asyncio.Lock()
    return lock


# Annotated type aliases for clean endpoint signatures
StorageDep = Annotated[Storage, Depends(get_storage)]
SeedSourceDep = Annotated[SeedSource, Depends(get_seed_source)]
SeedLockDep = Annotated[asyncio.Lock, Depends(get_seed_lock)]
