"""Recent-vote feed: ledger entries joined with entity snapshots."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from pokerank.storage.base import Entity, Storage, Vote


@dataclass(frozen=True)
class VoteWithEntities:
    vote: Vote
    winner: Entity
    loser: Entity
    time_ago: str


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'' if count == 1 else 's'} ago"


def format_time_ago(timestamp: datetime, now: datetime) -> str:
    """Human-readable age of a vote, bucketed by whole elapsed minutes.

    < 1 min -> "just now", < 60 -> "N min(s) ago", < 1440 -> "N hour(s) ago",
    otherwise "N day(s) ago".
    """
    minutes = int((now - timestamp).total_seconds() // 60)
    if minutes < 1:
        return "just now"
    if minutes < 60:
        return _plural(minutes, "min")
    if minutes < 1440:
        return _plural(minutes // 60, "hour")
    return _plural(minutes // 1440, "day")


async def recent_votes(
    storage: Storage,
    limit: int,
    now: Optional[datetime] = None,
) -> list[VoteWithEntities]:
    """Newest votes first, each with winner/loser snapshots and an age label.

    Votes referencing an entity that no longer exists are skipped, so the
    result can be shorter than `limit`.
    """
    now = now or datetime.now(timezone.utc)
    votes = await storage.votes.recent(limit)

    result = []
    for vote in votes:
        winner = await storage.entities.get_by_id(vote.winner_id)
        loser = await storage.entities.get_by_id(vote.loser_id)
        if winner is None or loser is None:
            continue
        result.append(
            VoteWithEntities(
                vote=vote,
                winner=winner,
                loser=loser,
                time_ago=format_time_ago(vote.timestamp, now),
            )
        )
    return result
