"""Pydantic schemas for entities, rankings and matchups."""

from pokerank.schemas.common import CamelModel
from pokerank.services.ranking import RankedEntity


class EntityResponse(CamelModel):
    id: int
    natural_key: int
    display_name: str
    categories: list[str]
    image_url: str
    rating: int
    wins: int
    losses: int


class RankedEntityResponse(EntityResponse):
    rank: int

    @classmethod
    def from_ranked(cls, ranked: RankedEntity) -> "RankedEntityResponse":
        base = EntityResponse.model_validate(ranked.entity)
        return cls(**base.model_dump(), rank=ranked.rank)


class MatchupResponse(CamelModel):
    entity_a: EntityResponse
    entity_b: EntityResponse
