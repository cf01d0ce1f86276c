"""Aggregate statistics, replayed from the full ledger on every call.

Design notes:
- The per-type win rate walks every vote (O(votes x types per entity)).
  Fine at expected volumes; incremental per-type counters would be the fix
  if the ledger grows large.
- Types are taken from each entity's current categories at query time, so
  a roster correction re-attributes historical votes.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from pokerank.services.roster import DEFAULT_TYPE_COLOR, POKEMON_TYPES, TYPE_COLORS
from pokerank.storage.base import Storage


@dataclass(frozen=True)
class CategoryWinRate:
    type: str
    wins: int
    total: int
    win_rate: float
    color: str


@dataclass(frozen=True)
class Stats:
    total_votes: int
    total_entities: int
    votes_today: int
    per_category_win_rate: list[CategoryWinRate]


def local_midnight(now: Optional[datetime] = None) -> datetime:
    """Start of the current day in the server's local timezone (tz-aware)."""
    now = (now or datetime.now()).astimezone()
    return now.replace(hour=0, minute=0, second=0, microsecond=0)


def _type_order(name: str) -> int:
    try:
        return POKEMON_TYPES.index(name)
    except ValueError:
        return len(POKEMON_TYPES)


async def compute_stats(storage: Storage, now: Optional[datetime] = None) -> Stats:
    entities = {entity.id: entity for entity in await storage.entities.get_all()}
    votes = await storage.votes.get_all()

    wins: dict[str, int] = {}
    totals: dict[str, int] = {}
    for vote in votes:
        winner = entities.get(vote.winner_id)
        loser = entities.get(vote.loser_id)
        if winner is None or loser is None:
            continue
        for category in winner.categories:
            wins[category] = wins.get(category, 0) + 1
            totals[category] = totals.get(category, 0) + 1
        for category in loser.categories:
            totals[category] = totals.get(category, 0) + 1

    rates = [
        CategoryWinRate(
            type=category,
            wins=wins.get(category, 0),
            total=total,
            win_rate=wins.get(category, 0) / total,
            color=TYPE_COLORS.get(category, DEFAULT_TYPE_COLOR),
        )
        for category, total in sorted(totals.items(), key=lambda item: _type_order(item[0]))
        if total > 0
    ]
    # Stable: equal win rates keep the type enumeration order
    rates.sort(key=lambda r: r.win_rate, reverse=True)

    return Stats(
        total_votes=len(votes),
        total_entities=len(entities),
        votes_today=await storage.votes.count(since=local_midnight(now)),
        per_category_win_rate=rates,
    )
