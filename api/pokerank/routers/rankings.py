"""Rankings endpoint.

GET /api/rankings?limit=N -- Pokémon ordered by rating with positional ranks
"""

from fastapi import APIRouter, Query

from pokerank.dependencies import StorageDep
from pokerank.schemas.entity import RankedEntityResponse
from pokerank.services.ranking import top_ranked

router = APIRouter(prefix="/api", tags=["rankings"])


@router.get("/rankings", response_model=list[RankedEntityResponse])
async def get_rankings(
    storage: StorageDep,
    limit: int = Query(10, ge=0, description="Values >= 1000 return every Pokémon"),
) -> list[RankedEntityResponse]:
    """Return the top `limit` Pokémon by rating (ties broken by id)."""
    ranked = await top_ranked(storage.entities, limit)
    return [RankedEntityResponse.from_ranked(item) for item in ranked]
