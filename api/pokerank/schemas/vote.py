"""Pydantic schemas for casting votes and reading the recent-vote feed."""

from datetime import datetime

from pydantic import StrictInt, model_validator

from pokerank.schemas.common import CamelModel
from pokerank.schemas.entity import EntityResponse, MatchupResponse
from pokerank.services.ledger import VoteWithEntities


class VoteCreate(CamelModel):
    """Request schema for POST /api/vote: the winner beat the loser."""

    # Strict: "3", 3.5 and true are rejected rather than coerced
    winner_id: StrictInt
    loser_id: StrictInt

    @model_validator(mode="after")
    def distinct_entities(self) -> "VoteCreate":
        if self.winner_id == self.loser_id:
            raise ValueError("winnerId and loserId must be different")
        return self


class VoteResponse(CamelModel):
    id: int
    winner_id: int
    loser_id: int
    winner_rating_delta: int
    loser_rating_delta: int
    timestamp: datetime


class VoteCastResponse(CamelModel):
    success: bool
    vote: VoteResponse
    new_matchup: MatchupResponse


class RecentVoteResponse(VoteResponse):
    winner: EntityResponse
    loser: EntityResponse
    time_ago: str

    @classmethod
    def from_feed(cls, item: VoteWithEntities) -> "RecentVoteResponse":
        base = VoteResponse.model_validate(item.vote)
        return cls(
            **base.model_dump(),
            winner=EntityResponse.model_validate(item.winner),
            loser=EntityResponse.model_validate(item.loser),
            time_ago=item.time_ago,
        )
