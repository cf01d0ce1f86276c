"""PokeRank Pydantic schemas package.

Re-exports all request and response schemas for convenient importing:

    from pokerank.schemas import VoteCreate, MatchupResponse, StatsResponse, ...
"""

from pokerank.schemas.common import CamelModel, ErrorResponse, MessageResponse
from pokerank.schemas.entity import EntityResponse, MatchupResponse, RankedEntityResponse
from pokerank.schemas.stats import CategoryWinRateResponse, StatsResponse
from pokerank.schemas.vote import (
    RecentVoteResponse,
    VoteCastResponse,
    VoteCreate,
    VoteResponse,
)

__all__ = [
    # Entity
    "EntityResponse",
    "RankedEntityResponse",
    "MatchupResponse",
    # Vote
    "VoteCreate",
    "VoteResponse",
    "VoteCastResponse",
    "RecentVoteResponse",
    # Stats
    "CategoryWinRateResponse",
    "StatsResponse",
    # Common
    "CamelModel",
    "ErrorResponse",
    "MessageResponse",
]
