"""Roster initialization endpoint.

GET /api/init -- seed the roster if empty; ?reset=true wipes votes and
                 entities first (administrative)
"""

from fastapi import APIRouter, Query

from pokerank.dependencies import SeedLockDep, SeedSourceDep, StorageDep
from pokerank.schemas.common import MessageResponse
from pokerank.services.seeding import ensure_seeded, reset_and_reseed

router = APIRouter(prefix="/api", tags=["roster"])


@router.get("/init", response_model=MessageResponse)
async def initialize_roster(
    storage: StorageDep,
    source: SeedSourceDep,
    seed_lock: SeedLockDep,
    reset: bool = Query(False, description="Clear all votes and Pokémon, then reseed"),
) -> MessageResponse:
    """Seed the entity store when it is empty.

    With reset=true every vote is deleted, tallies are reset, all entities
    are removed and the roster is seeded again. Seeding never fails on an
    unreachable seed source; it falls back to the starter roster.
    """
    if reset:
        count = await reset_and_reseed(storage, source, lock=seed_lock)
        return MessageResponse(success=True, message=f"Reset and initialized {count} Pokémon")

    seeded = await ensure_seeded(storage, source, lock=seed_lock)
    if seeded:
        return MessageResponse(success=True, message=f"Initialized {seeded} Pokémon")

    existing = await storage.entities.count()
    return MessageResponse(
        success=True,
        message=f"Database already contains {existing} Pokémon",
    )
