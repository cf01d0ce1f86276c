"""Matchup endpoint.

GET /api/matchup -- two distinct Pokémon drawn uniformly at random
"""

from fastapi import APIRouter

from pokerank.dependencies import SeedLockDep, SeedSourceDep, StorageDep
from pokerank.schemas.entity import EntityResponse, MatchupResponse
from pokerank.services.matchup import select_pair
from pokerank.services.seeding import ensure_seeded
from pokerank.storage.base import Storage

router = APIRouter(prefix="/api", tags=["matchups"])


async def build_matchup(storage: Storage) -> MatchupResponse:
    entity_a, entity_b = await select_pair(storage.entities)
    return MatchupResponse(
        entity_a=EntityResponse.model_validate(entity_a),
        entity_b=EntityResponse.model_validate(entity_b),
    )


@router.get("/matchup", response_model=MatchupResponse)
async def get_matchup(
    storage: StorageDep,
    source: SeedSourceDep,
    seed_lock: SeedLockDep,
) -> MatchupResponse:
    """Return a random pair, seeding first if fewer than two Pokémon exist.

    Responds 503 (retryable) if a pair still cannot be formed.
    """
    await ensure_seeded(storage, source, minimum=2, lock=seed_lock)
    return await build_matchup(storage)
