"""Statistics endpoint.

GET /api/stats -- vote totals and per-type win rates
"""

from fastapi import APIRouter

from pokerank.dependencies import StorageDep
from pokerank.schemas.stats import CategoryWinRateResponse, StatsResponse
from pokerank.services.stats import compute_stats

router = APIRouter(prefix="/api", tags=["stats"])


@router.get("/stats", response_model=StatsResponse)
async def get_stats(storage: StorageDep) -> StatsResponse:
    """Return totals and per-type win rates, sorted by win rate descending.

    Types with no votes on either side are omitted.
    """
    stats = await compute_stats(storage)
    return StatsResponse(
        total_votes=stats.total_votes,
        total_entities=stats.total_entities,
        votes_today=stats.votes_today,
        per_category_win_rate=[
            CategoryWinRateResponse.model_validate(item)
            for item in stats.per_category_win_rate
        ],
    )
