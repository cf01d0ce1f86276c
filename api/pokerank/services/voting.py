"""Vote resolution: rate the pair, apply the result, append to the ledger.

Everything happens inside one storage transaction holding locks on both
entities, so ranking and stats readers see either the whole vote or none
of it, and two votes on the same Pokémon never interleave their
read-modify-write of its rating.
"""

import structlog

from pokerank.config import settings
from pokerank.errors import EntityNotFoundError, InvalidArgumentError
from pokerank.metrics import rating_delta, votes_recorded
from pokerank.services.rating import rate
from pokerank.storage.base import Storage, Vote

log = structlog.get_logger()


async def cast_vote(
    storage: Storage,
    winner_id: int,
    loser_id: int,
    k_factor: int | None = None,
) -> Vote:
    """Resolve a head-to-head vote.

    Raises:
        InvalidArgumentError: winner_id == loser_id (nothing is mutated).
        EntityNotFoundError: either id is unknown (nothing is mutated).
    """
    if winner_id == loser_id:
        raise InvalidArgumentError("winnerId and loserId must be different")

    k = settings.k_factor if k_factor is None else k_factor

    async with storage.transaction(winner_id, loser_id):
        winner = await storage.entities.get_by_id(winner_id)
        if winner is None:
            raise EntityNotFoundError(winner_id, "winner")
        loser = await storage.entities.get_by_id(loser_id)
        if loser is None:
            raise EntityNotFoundError(loser_id, "loser")

        change = rate(winner.rating, loser.rating, k=k)

        await storage.entities.apply_match_result(
            winner_id,
            loser_id,
            change.new_winner_rating,
            change.new_loser_rating,
        )
        vote = await storage.votes.append(
            winner_id,
            loser_id,
            change.winner_rating_delta,
            change.loser_rating_delta,
        )

    votes_recorded.inc()
    rating_delta.observe(abs(change.winner_rating_delta))
    log.info(
        "vote_recorded",
        vote_id=vote.id,
        winner_id=winner_id,
        loser_id=loser_id,
        winner_rating=change.new_winner_rating,
        loser_rating=change.new_loser_rating,
        winner_delta=change.winner_rating_delta,
        loser_delta=change.loser_rating_delta,
    )
    return vote
