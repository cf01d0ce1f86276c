"""Ranking materializer: a read-only view, recomputed per request."""

from dataclasses import dataclass
from typing import Optional

from pokerank.config import settings
from pokerank.storage.base import Entity, EntityStore


@dataclass(frozen=True)
class RankedEntity:
    entity: Entity
    rank: int


def rank_entities(entities: list[Entity]) -> list[RankedEntity]:
    """Order by rating descending, ties by id ascending, ranks 1..n by position.

    Ranks are positional: tied ratings still get distinct consecutive ranks.
    """
    ordered = sorted(entities, key=lambda e: (-e.rating, e.id))
    return [
        RankedEntity(entity=entity, rank=position)
        for position, entity in enumerate(ordered, start=1)
    ]


async def top_ranked(
    store: EntityStore,
    limit: Optional[int] = None,
    all_threshold: Optional[int] = None,
) -> list[RankedEntity]:
    """Return the top `limit` ranked entities.

    A missing limit, or one at or above the "all" threshold, returns the
    full ranking.
    """
    threshold = settings.rankings_all_threshold if all_threshold is None else all_threshold
    ranked = rank_entities(await store.get_all())
    if limit is None or limit >= threshold:
        return ranked
    return ranked[:limit]
