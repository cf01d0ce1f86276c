"""Storage contract required by the rating/ranking services.

Services depend only on these abstractions. Two adapters implement them:
pokerank.storage.memory (process-local, used for development and tests)
and pokerank.storage.sql (SQLAlchemy async, used in production).

Records crossing this boundary are frozen dataclasses, never ORM rows, so
callers cannot mutate stored state behind the store's back.
"""

import abc
from dataclasses import dataclass
from datetime import datetime
from typing import AsyncContextManager, Optional


@dataclass(frozen=True)
class Entity:
    id: int
    natural_key: int
    display_name: str
    categories: tuple[str, ...]
    image_url: str
    rating: int
    wins: int = 0
    losses: int = 0


@dataclass(frozen=True)
class EntityUpsert:
    """An entity without its id, as produced by a seed source.

    rating/wins/losses are None unless the caller is deliberately
    correcting them; None means "keep the stored value" on update and
    "use the default" on create.
    """

    natural_key: int
    display_name: str
    categories: tuple[str, ...]
    image_url: str = ""
    rating: Optional[int] = None
    wins: Optional[int] = None
    losses: Optional[int] = None


@dataclass(frozen=True)
class Vote:
    id: int
    winner_id: int
    loser_id: int
    winner_rating_delta: int
    loser_rating_delta: int
    timestamp: datetime


class EntityStore(abc.ABC):
    @abc.abstractmethod
    async def get_by_id(self, entity_id: int) -> Optional[Entity]: ...

    @abc.abstractmethod
    async def get_by_natural_key(self, natural_key: int) -> Optional[Entity]: ...

    @abc.abstractmethod
    async def get_all(self) -> list[Entity]:
        """Return every entity, in no particular order."""

    @abc.abstractmethod
    async def count(self) -> int: ...

    @abc.abstractmethod
    async def get_nth(self, index: int) -> Entity:
        """Return the entity at position `index` when ordered by id.

        Raises IndexError if index is outside [0, count()).
        """

    @abc.abstractmethod
    async def upsert(self, record: EntityUpsert) -> Entity:
        """Create or update an entity keyed by natural_key.

        An existing entity keeps its id; display_name, categories and
        image_url are overwritten, rating/wins/losses only when supplied.
        Raises InvalidArgumentError if categories is empty.
        """

    @abc.abstractmethod
    async def apply_match_result(
        self,
        winner_id: int,
        loser_id: int,
        new_winner_rating: int,
        new_loser_rating: int,
    ) -> tuple[Entity, Entity]:
        """Set both ratings, increment winner.wins and loser.losses.

        Raises EntityNotFoundError if either id is absent; nothing is
        changed in that case.
        """

    @abc.abstractmethod
    async def clear_all(self) -> None: ...

    @abc.abstractmethod
    async def reset_tallies(self) -> None:
        """Reset every entity to the default rating with zero wins/losses."""


class VoteLedger(abc.ABC):
    @abc.abstractmethod
    async def append(
        self,
        winner_id: int,
        loser_id: int,
        winner_rating_delta: int,
        loser_rating_delta: int,
    ) -> Vote:
        """Record a resolved vote, assigning id and timestamp.

        Raises InvalidArgumentError if winner_id == loser_id.
        """

    @abc.abstractmethod
    async def recent(self, limit: int) -> list[Vote]:
        """Newest first; equal timestamps ordered by later insertion first."""

    @abc.abstractmethod
    async def get_all(self) -> list[Vote]: ...

    @abc.abstractmethod
    async def count(self, since: Optional[datetime] = None) -> int:
        """Count votes, optionally only those at or after `since`."""

    @abc.abstractmethod
    async def clear_all(self) -> None: ...


class Storage(abc.ABC):
    """Entity store and vote ledger sharing one atomicity boundary."""

    entities: EntityStore
    votes: VoteLedger

    @abc.abstractmethod
    def transaction(self, *lock_ids: int) -> AsyncContextManager[None]:
        """Group mutations so readers see all of them or none.

        Entities named in lock_ids are locked for the duration, so
        concurrent transactions touching the same entity serialize while
        transactions on disjoint entities proceed independently.
        """
