"""Process-local storage adapter.

Holds entities in a dict and votes in a list. Adapter methods never await,
so a sequence of calls made inside one transaction() runs without an
intervening suspension point and is atomic to every other coroutine.
"""

import asyncio
from collections import defaultdict
from contextlib import AsyncExitStack, asynccontextmanager
from dataclasses import replace
from datetime import datetime, timezone
from typing import AsyncIterator, Callable, Optional

from pokerank.config import settings
from pokerank.errors import EntityNotFoundError, InvalidArgumentError
from pokerank.storage.base import (
    Entity,
    EntityStore,
    EntityUpsert,
    Storage,
    Vote,
    VoteLedger,
)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class MemoryEntityStore(EntityStore):
    def __init__(self) -> None:
        self._entities: dict[int, Entity] = {}
        self._by_natural_key: dict[int, int] = {}
        self._next_id = 1

    async def get_by_id(self, entity_id: int) -> Optional[Entity]:
        return self._entities.get(entity_id)

    async def get_by_natural_key(self, natural_key: int) -> Optional[Entity]:
        entity_id = self._by_natural_key.get(natural_key)
        return None if entity_id is None else self._entities[entity_id]

    async def get_all(self) -> list[Entity]:
        return list(self._entities.values())

    async def count(self) -> int:
        return len(self._entities)

    async def get_nth(self, index: int) -> Entity:
        if not 0 <= index < len(self._entities):
            raise IndexError(index)
        # dict preserves insertion order and ids are assigned increasing
        return list(self._entities.values())[index]

    async def upsert(self, record: EntityUpsert) -> Entity:
        if not record.categories:
            raise InvalidArgumentError(
                f"Pokémon #{record.natural_key} must have at least one type"
            )

        existing = await self.get_by_natural_key(record.natural_key)
        if existing is not None:
            entity = replace(
                existing,
                display_name=record.display_name,
                categories=tuple(record.categories),
                image_url=record.image_url,
                rating=existing.rating if record.rating is None else record.rating,
                wins=existing.wins if record.wins is None else record.wins,
                losses=existing.losses if record.losses is None else record.losses,
            )
        else:
            entity = Entity(
                id=self._next_id,
                natural_key=record.natural_key,
                display_name=record.display_name,
                categories=tuple(record.categories),
                image_url=record.image_url,
                rating=settings.default_rating if record.rating is None else record.rating,
                wins=record.wins or 0,
                losses=record.losses or 0,
            )
            self._next_id += 1
            self._by_natural_key[entity.natural_key] = entity.id

        self._entities[entity.id] = entity
        return entity

    async def apply_match_result(
        self,
        winner_id: int,
        loser_id: int,
        new_winner_rating: int,
        new_loser_rating: int,
    ) -> tuple[Entity, Entity]:
        winner = self._entities.get(winner_id)
        if winner is None:
            raise EntityNotFoundError(winner_id, "winner")
        loser = self._entities.get(loser_id)
        if loser is None:
            raise EntityNotFoundError(loser_id, "loser")

        winner = replace(winner, rating=new_winner_rating, wins=winner.wins + 1)
        loser = replace(loser, rating=new_loser_rating, losses=loser.losses + 1)
        self._entities[winner.id] = winner
        self._entities[loser.id] = loser
        return winner, loser

    async def clear_all(self) -> None:
        self._entities.clear()
        self._by_natural_key.clear()
        self._next_id = 1

    async def reset_tallies(self) -> None:
        for entity_id, entity in self._entities.items():
            self._entities[entity_id] = replace(
                entity, rating=settings.default_rating, wins=0, losses=0
            )

    def _snapshot(self, entity_ids: list[int]) -> dict[int, Optional[Entity]]:
        return {entity_id: self._entities.get(entity_id) for entity_id in entity_ids}

    def _restore(self, snapshot: dict[int, Optional[Entity]]) -> None:
        for entity_id, entity in snapshot.items():
            if entity is not None:
                self._entities[entity_id] = entity


class MemoryVoteLedger(VoteLedger):
    def __init__(self, clock: Clock = utc_now) -> None:
        self._votes: list[Vote] = []
        self._next_id = 1
        self._clock = clock

    async def append(
        self,
        winner_id: int,
        loser_id: int,
        winner_rating_delta: int,
        loser_rating_delta: int,
    ) -> Vote:
        if winner_id == loser_id:
            raise InvalidArgumentError("winnerId and loserId must be different")

        vote = Vote(
            id=self._next_id,
            winner_id=winner_id,
            loser_id=loser_id,
            winner_rating_delta=winner_rating_delta,
            loser_rating_delta=loser_rating_delta,
            timestamp=self._clock(),
        )
        self._next_id += 1
        self._votes.append(vote)
        return vote

    async def recent(self, limit: int) -> list[Vote]:
        # Stable sort over the reversed list keeps later insertions first on ties
        ordered = sorted(reversed(self._votes), key=lambda v: v.timestamp, reverse=True)
        return ordered[:limit]

    async def get_all(self) -> list[Vote]:
        return list(self._votes)

    async def count(self, since: Optional[datetime] = None) -> int:
        if since is None:
            return len(self._votes)
        return sum(1 for vote in self._votes if vote.timestamp >= since)

    async def clear_all(self) -> None:
        self._votes.clear()
        self._next_id = 1


class MemoryStorage(Storage):
    def __init__(self, clock: Clock = utc_now) -> None:
        self.entities = MemoryEntityStore()
        self.votes = MemoryVoteLedger(clock=clock)
        self._locks: defaultdict[int, asyncio.Lock] = defaultdict(asyncio.Lock)

    @asynccontextmanager
    async def transaction(self, *lock_ids: int) -> AsyncIterator[None]:
        ordered_ids = sorted(set(lock_ids))
        async with AsyncExitStack() as stack:
            # Ascending id order so two transactions can never deadlock
            for entity_id in ordered_ids:
                await stack.enter_async_context(self._locks[entity_id])

            snapshot = self.entities._snapshot(ordered_ids)
            try:
                yield
            except BaseException:
                self.entities._restore(snapshot)
                raise
