"""ELO rating engine.

Pure functions: no I/O, no state. Given the pre-match ratings of a winner
and a loser, compute the post-match ratings and the signed deltas that the
entity store applies and the vote ledger records.

Design notes:
- Deltas are rounded half-up independently, so winner_rating_delta and
  -loser_rating_delta can differ by 1.
- No clamping: ratings can go below zero in principle.
"""

import math
from dataclasses import dataclass

DEFAULT_K_FACTOR = 32
SCALE_FACTOR = 400.0


@dataclass(frozen=True)
class RatingChange:
    new_winner_rating: int
    new_loser_rating: int
    winner_rating_delta: int
    loser_rating_delta: int


def expected_score(rating: float, opponent_rating: float) -> float:
    """Compute the ELO expected score (win probability) for one side."""
    return 1.0 / (1.0 + 10.0 ** ((opponent_rating - rating) / SCALE_FACTOR))


def round_half_up(value: float) -> int:
    # round() is banker's rounding; deltas of exactly x.5 must go up
    return math.floor(value + 0.5)


def rate(winner_rating: int, loser_rating: int, k: int = DEFAULT_K_FACTOR) -> RatingChange:
    """Compute new ratings after the winner beat the loser.

    Args:
        winner_rating: Winner's rating before the match.
        loser_rating: Loser's rating before the match.
        k: K-factor, the maximum swing per match. Larger values amplify changes.

    Returns:
        RatingChange with both new ratings and the deltas applied.
    """
    winner_expected = expected_score(winner_rating, loser_rating)
    loser_expected = expected_score(loser_rating, winner_rating)

    winner_delta = round_half_up(k * (1.0 - winner_expected))
    loser_delta = round_half_up(k * (0.0 - loser_expected))

    return RatingChange(
        new_winner_rating=winner_rating + winner_delta,
        new_loser_rating=loser_rating + loser_delta,
        winner_rating_delta=winner_delta,
        loser_rating_delta=loser_delta,
    )
