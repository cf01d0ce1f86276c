"""Matchup selection: two distinct entities, uniformly at random.

Draw i from [0, n) and j from [0, n - 1), shifting j up by one when it
lands on or past i. Every unordered pair of distinct entities is equally
likely and no entity is ever paired with itself. There is deliberately no
weighting by rating, type or recency.
"""

import random
from typing import Optional

from pokerank.errors import InsufficientDataError
from pokerank.storage.base import Entity, EntityStore


def pick_indices(n: int, rng: Optional[random.Random] = None) -> tuple[int, int]:
    if n < 2:
        raise InsufficientDataError(n)
    rng = rng or random
    first = rng.randrange(n)
    second = rng.randrange(n - 1)
    if second >= first:
        second += 1
    return first, second


async def select_pair(
    store: EntityStore, rng: Optional[random.Random] = None
) -> tuple[Entity, Entity]:
    """Select a random matchup from the store.

    Raises InsufficientDataError when fewer than two entities exist.
    """
    first, second = pick_indices(await store.count(), rng)
    try:
        return await store.get_nth(first), await store.get_nth(second)
    except IndexError:
        # The population shrank between count() and get_nth() (a reset raced us)
        raise InsufficientDataError(await store.count())
