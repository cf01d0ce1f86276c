"""Tests for random matchup selection."""

import random
from collections import Counter
from itertools import combinations

import pytest

from pokerank.errors import InsufficientDataError
from pokerank.services.matchup import pick_indices, select_pair
from pokerank.storage import EntityUpsert


class TestPickIndices:
    @pytest.mark.parametrize("n", [0, 1])
    def test_needs_two_entities(self, n):
        with pytest.raises(InsufficientDataError):
            pick_indices(n)

    def test_two_entities_always_pairs_both(self):
        rng = random.Random(7)
        for _ in range(50):
            assert set(pick_indices(2, rng)) == {0, 1}

    def test_never_pairs_with_itself(self):
        rng = random.Random(42)
        for _ in range(2000):
            first, second = pick_indices(5, rng)
            assert first != second
            assert 0 <= first < 5
            assert 0 <= second < 5

    def test_unordered_pairs_are_roughly_uniform(self):
        """All C(4, 2) pairs show up with similar frequency."""
        rng = random.Random(1234)
        draws = 12000
        counts = Counter(frozenset(pick_indices(4, rng)) for _ in range(draws))

        assert set(counts) == {frozenset(pair) for pair in combinations(range(4), 2)}
        expected = draws / 6
        for count in counts.values():
            assert abs(count - expected) < expected * 0.1


class TestSelectPair:
    async def test_returns_two_distinct_entities(self, storage, seeded):
        rng = random.Random(3)
        ids = {entity.id for entity in seeded}
        for _ in range(20):
            first, second = await select_pair(storage.entities, rng)
            assert first.id != second.id
            assert {first.id, second.id} <= ids

    async def test_empty_store(self, storage):
        with pytest.raises(InsufficientDataError):
            await select_pair(storage.entities)

    async def test_single_entity(self, storage):
        async with storage.transaction():
            await storage.entities.upsert(
                EntityUpsert(natural_key=151, display_name="Mew", categories=("Psychic",))
            )
        with pytest.raises(InsufficientDataError):
            await select_pair(storage.entities)
