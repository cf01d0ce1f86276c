"""Vote endpoints.

POST /api/vote         -- record that one Pokémon beat the other
GET  /api/votes/recent -- newest votes with both Pokémon and an age label
"""

from fastapi import APIRouter, Query

from pokerank.dependencies import StorageDep
from pokerank.routers.matchups import build_matchup
from pokerank.schemas.vote import (
    RecentVoteResponse,
    VoteCastResponse,
    VoteCreate,
    VoteResponse,
)
from pokerank.services.ledger import recent_votes
from pokerank.services.voting import cast_vote

router = APIRouter(prefix="/api", tags=["votes"])


@router.post("/vote", response_model=VoteCastResponse)
async def submit_vote(body: VoteCreate, storage: StorageDep) -> VoteCastResponse:
    """Resolve a vote and hand back the next matchup.

    Validation rules enforced:
    - winnerId and loserId must be integers and differ (400, enforced by
      VoteCreate before this function is called)
    - Both Pokémon must exist (404)

    Ratings, win/loss tallies and the ledger entry are committed together.
    """
    vote = await cast_vote(storage, body.winner_id, body.loser_id)

    return VoteCastResponse(
        success=True,
        vote=VoteResponse.model_validate(vote),
        new_matchup=await build_matchup(storage),
    )


@router.get("/votes/recent", response_model=list[RecentVoteResponse])
async def get_recent_votes(
    storage: StorageDep,
    limit: int = Query(5, ge=0),
) -> list[RecentVoteResponse]:
    items = await recent_votes(storage, limit)
    return [RecentVoteResponse.from_feed(item) for item in items]
