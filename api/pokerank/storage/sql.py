"""SQLAlchemy (async) storage adapter.

One SqlStorage wraps one AsyncSession; the dependency layer creates a
session per request. Adapter methods flush but never commit: commit happens
when the enclosing transaction() exits cleanly, rollback when it raises.

Design notes:
- Tally increments use column expressions (EntityRow.wins + 1) so the
  UPDATE itself never loses a concurrent increment.
- The vote path reads ratings before computing new ones, so transaction()
  takes SELECT ... FOR UPDATE row locks on the involved entities in id
  order. SQLite ignores FOR UPDATE; it serializes writers on its own.
- SQLite hands back naive datetimes; they are stored as UTC and re-tagged
  as UTC on the way out.
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator, Callable, Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from pokerank.config import settings
from pokerank.errors import EntityNotFoundError, InvalidArgumentError
from pokerank.models.entity import EntityRow
from pokerank.models.vote import VoteRow
from pokerank.storage.base import (
    Entity,
    EntityStore,
    EntityUpsert,
    Storage,
    Vote,
    VoteLedger,
)
from pokerank.storage.memory import utc_now


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _to_entity(row: EntityRow) -> Entity:
    return Entity(
        id=row.id,
        natural_key=row.natural_key,
        display_name=row.display_name,
        categories=tuple(row.categories),
        image_url=row.image_url,
        rating=row.rating,
        wins=row.wins,
        losses=row.losses,
    )


def _to_vote(row: VoteRow) -> Vote:
    return Vote(
        id=row.id,
        winner_id=row.winner_id,
        loser_id=row.loser_id,
        winner_rating_delta=row.winner_rating_delta,
        loser_rating_delta=row.loser_rating_delta,
        timestamp=_as_utc(row.timestamp),
    )


class SqlEntityStore(EntityStore):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, entity_id: int) -> Optional[Entity]:
        row = await self._session.get(EntityRow, entity_id)
        return None if row is None else _to_entity(row)

    async def get_by_natural_key(self, natural_key: int) -> Optional[Entity]:
        row = await self._row_by_natural_key(natural_key)
        return None if row is None else _to_entity(row)

    async def get_all(self) -> list[Entity]:
        result = await self._session.execute(select(EntityRow))
        return [_to_entity(row) for row in result.scalars().all()]

    async def count(self) -> int:
        result = await self._session.execute(select(func.count()).select_from(EntityRow))
        return result.scalar_one()

    async def get_nth(self, index: int) -> Entity:
        if index < 0:
            raise IndexError(index)
        result = await self._session.execute(
            select(EntityRow).order_by(EntityRow.id).offset(index).limit(1)
        )
        row = result.scalar_one_or_none()
        if row is None:
            raise IndexError(index)
        return _to_entity(row)

    async def upsert(self, record: EntityUpsert) -> Entity:
        if not record.categories:
            raise InvalidArgumentError(
                f"Pokémon #{record.natural_key} must have at least one type"
            )

        row = await self._row_by_natural_key(record.natural_key)
        if row is None:
            row = EntityRow(
                natural_key=record.natural_key,
                display_name=record.display_name,
                categories=list(record.categories),
                image_url=record.image_url,
                rating=settings.default_rating if record.rating is None else record.rating,
                wins=record.wins or 0,
                losses=record.losses or 0,
            )
            self._session.add(row)
        else:
            row.display_name = record.display_name
            row.categories = list(record.categories)
            row.image_url = record.image_url
            if record.rating is not None:
                row.rating = record.rating
            if record.wins is not None:
                row.wins = record.wins
            if record.losses is not None:
                row.losses = record.losses

        await self._session.flush()  # Populate row.id
        return _to_entity(row)

    async def apply_match_result(
        self,
        winner_id: int,
        loser_id: int,
        new_winner_rating: int,
        new_loser_rating: int,
    ) -> tuple[Entity, Entity]:
        result = await self._session.execute(
            select(EntityRow.id).where(EntityRow.id.in_([winner_id, loser_id]))
        )
        present = set(result.scalars().all())
        if winner_id not in present:
            raise EntityNotFoundError(winner_id, "winner")
        if loser_id not in present:
            raise EntityNotFoundError(loser_id, "loser")

        await self._session.execute(
            update(EntityRow)
            .where(EntityRow.id == winner_id)
            .values(rating=new_winner_rating, wins=EntityRow.wins + 1)
        )
        await self._session.execute(
            update(EntityRow)
            .where(EntityRow.id == loser_id)
            .values(rating=new_loser_rating, losses=EntityRow.losses + 1)
        )

        # Re-read so identity-map copies reflect the UPDATEs
        result = await self._session.execute(
            select(EntityRow)
            .where(EntityRow.id.in_([winner_id, loser_id]))
            .execution_options(populate_existing=True)
        )
        rows = {row.id: row for row in result.scalars().all()}
        return _to_entity(rows[winner_id]), _to_entity(rows[loser_id])

    async def clear_all(self) -> None:
        await self._session.execute(delete(EntityRow))

    async def reset_tallies(self) -> None:
        await self._session.execute(
            update(EntityRow).values(rating=settings.default_rating, wins=0, losses=0)
        )

    async def lock(self, entity_ids: list[int]) -> None:
        if not entity_ids:
            return
        await self._session.execute(
            select(EntityRow.id)
            .where(EntityRow.id.in_(entity_ids))
            .order_by(EntityRow.id)
            .with_for_update()
        )

    async def _row_by_natural_key(self, natural_key: int) -> Optional[EntityRow]:
        result = await self._session.execute(
            select(EntityRow).where(EntityRow.natural_key == natural_key)
        )
        return result.scalar_one_or_none()


class SqlVoteLedger(VoteLedger):
    def __init__(
        self,
        session: AsyncSession,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._session = session
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

        row = VoteRow(
            winner_id=winner_id,
            loser_id=loser_id,
            winner_rating_delta=winner_rating_delta,
            loser_rating_delta=loser_rating_delta,
            timestamp=_as_utc(self._clock()),
        )
        self._session.add(row)
        await self._session.flush()  # Populate row.id
        return _to_vote(row)

    async def recent(self, limit: int) -> list[Vote]:
        result = await self._session.execute(
            select(VoteRow)
            .order_by(VoteRow.timestamp.desc(), VoteRow.id.desc())
            .limit(limit)
        )
        return [_to_vote(row) for row in result.scalars().all()]

    async def get_all(self) -> list[Vote]:
        result = await self._session.execute(select(VoteRow).order_by(VoteRow.id))
        return [_to_vote(row) for row in result.scalars().all()]

    async def count(self, since: Optional[datetime] = None) -> int:
        query = select(func.count()).select_from(VoteRow)
        if since is not None:
            query = query.where(VoteRow.timestamp >= _as_utc(since))
        result = await self._session.execute(query)
        return result.scalar_one()

    async def clear_all(self) -> None:
        await self._session.execute(delete(VoteRow))


class SqlStorage(Storage):
    def __init__(
        self,
        session: AsyncSession,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.session = session
        self.entities = SqlEntityStore(session)
        self.votes = SqlVoteLedger(session, clock=clock)

    @asynccontextmanager
    async def transaction(self, *lock_ids: int) -> AsyncIterator[None]:
        try:
            await self.entities.lock(sorted(set(lock_ids)))
            yield
        except BaseException:
            await self.session.rollback()
            raise
        else:
            await self.session.commit()
