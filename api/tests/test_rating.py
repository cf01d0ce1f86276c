"""Unit tests for the ELO rating engine in pokerank.services.rating."""

import pytest

from pokerank.services.rating import expected_score, rate, round_half_up


class TestExpectedScore:
    def test_equal_ratings_are_even(self):
        assert expected_score(1500, 1500) == pytest.approx(0.5)

    def test_scores_are_complementary(self):
        assert expected_score(1620, 1480) + expected_score(1480, 1620) == pytest.approx(1.0)

    def test_400_point_gap_is_ten_to_one(self):
        assert expected_score(1900, 1500) == pytest.approx(10 / 11)


class TestRate:
    def test_even_match_with_default_k(self):
        """rate(1500, 1500) moves each side exactly 16 points."""
        change = rate(1500, 1500)
        assert change.winner_rating_delta == 16
        assert change.loser_rating_delta == -16
        assert change.new_winner_rating == 1516
        assert change.new_loser_rating == 1484

    def test_favourite_wins_small_gain(self):
        change = rate(1600, 1400)
        assert change.winner_rating_delta == 8
        assert change.loser_rating_delta == -8

    def test_upset_earns_bonus(self):
        change = rate(1400, 1600)
        assert change.winner_rating_delta == 24
        assert change.loser_rating_delta == -24
        assert change.winner_rating_delta > rate(1600, 1400).winner_rating_delta

    def test_k_factor_scales_swing(self):
        assert rate(1500, 1500, k=64).winner_rating_delta == 32
        assert rate(1500, 1500, k=16).winner_rating_delta == 8

    @pytest.mark.parametrize(
        "winner,loser",
        [(1500, 1500), (1700, 1300), (1300, 1700), (2100, 1500), (1000, 1650), (1500, 1501)],
    )
    def test_winner_gains_and_loser_drops(self, winner, loser):
        change = rate(winner, loser)
        assert change.new_winner_rating > winner
        assert change.new_loser_rating < loser

    @pytest.mark.parametrize("gap", [0, 50, 200, 400, 700, 1200, 3000])
    def test_favourite_deltas_have_correct_sign(self, gap):
        change = rate(1500 + gap, 1500)
        assert change.winner_rating_delta >= 0
        assert change.loser_rating_delta <= 0

    @pytest.mark.parametrize("winner,loser", [(1500, 1500), (1523, 1477), (1337, 1811), (2000, 1999)])
    def test_independent_rounding_differs_by_at_most_one(self, winner, loser):
        change = rate(winner, loser)
        assert abs(change.winner_rating_delta + change.loser_rating_delta) <= 1

    def test_ratings_are_not_clamped(self):
        """Close matches near zero push the loser below it."""
        change = rate(10, 5)
        assert change.loser_rating_delta == -16
        assert change.new_loser_rating < 0
        change = rate(-20, -30)
        assert change.new_loser_rating < -30

    def test_extreme_favourite_gains_nothing(self):
        change = rate(1500, 5)
        assert change.winner_rating_delta == 0
        assert change.loser_rating_delta == 0

    def test_is_deterministic(self):
        assert rate(1612, 1544) == rate(1612, 1544)


class TestRoundHalfUp:
    def test_positive_half_rounds_up(self):
        assert round_half_up(2.5) == 3

    def test_negative_half_rounds_toward_zero(self):
        assert round_half_up(-2.5) == -2

    def test_below_half_rounds_down(self):
        assert round_half_up(0.49) == 0
        assert round_half_up(-7.688) == -8
