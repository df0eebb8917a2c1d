"""
Tests for selection/order_type.py - weighted order type choice.
"""

import random
from unittest.mock import MagicMock

from selection.models import OrderType, OrderWeights
from selection.order_type import select_order_type


def _rng_drawing(value):
    rng = MagicMock()
    rng.randint.return_value = value
    return rng


class TestSelectOrderTypeBands:
    """Draw boundaries for 30/50/20 weights."""

    weights = OrderWeights(tv=30, movies=50, custom=20)

    def test_lowest_draw_is_tv(self):
        """A draw of 1 is TV."""
        assert select_order_type(self.weights, _rng_drawing(1)) == OrderType.TV_GENERAL

    def test_tv_upper_bound_is_inclusive(self):
        """The TV weight itself is still TV."""
        assert select_order_type(self.weights, _rng_drawing(30)) == OrderType.TV_GENERAL

    def test_first_movie_draw(self):
        """One past the TV band is movies."""
        assert select_order_type(self.weights, _rng_drawing(31)) == OrderType.MOVIES_GENERAL

    def test_movie_upper_bound_is_inclusive(self):
        """TV plus movies is still movies."""
        assert select_order_type(self.weights, _rng_drawing(80)) == OrderType.MOVIES_GENERAL

    def test_draws_above_movies_are_custom(self):
        """Everything above the movie band is custom."""
        assert select_order_type(self.weights, _rng_drawing(81)) == OrderType.CUSTOM_ORDER
        assert select_order_type(self.weights, _rng_drawing(100)) == OrderType.CUSTOM_ORDER

    def test_draw_range_is_one_to_hundred(self):
        """Draws are integers from 1 to 100."""
        rng = _rng_drawing(50)
        select_order_type(self.weights, rng)
        rng.randint.assert_called_once_with(1, 100)


class TestSelectOrderTypeWeights:
    """Edge weights and long-run frequencies."""

    def test_zero_tv_never_picks_tv(self):
        """A zero weight is never chosen."""
        weights = OrderWeights(tv=0, movies=100, custom=0)
        rng = random.Random(7)
        picks = {select_order_type(weights, rng) for _ in range(500)}
        assert picks == {OrderType.MOVIES_GENERAL}

    def test_all_custom_always_picks_custom(self):
        """With every point on custom, no seeded draw ever lands on TV or movies."""
        weights = OrderWeights(tv=0, movies=0, custom=100)
        for seed in range(50):
            rng = random.Random(seed)
            picks = {select_order_type(weights, rng) for _ in range(200)}
            assert picks == {OrderType.CUSTOM_ORDER}

    def test_weights_below_hundred_leave_rest_to_custom(self):
        """Unassigned points fall into the custom band."""
        weights = OrderWeights(tv=30, movies=30, custom=0)
        assert select_order_type(weights, _rng_drawing(61)) == OrderType.CUSTOM_ORDER

    def test_frequencies_converge(self):
        """Long-run frequencies follow the weights."""
        weights = OrderWeights(tv=30, movies=50, custom=20)
        rng = random.Random(12345)
        draws = 20000
        counts = {order_type: 0 for order_type in OrderType}
        for _ in range(draws):
            counts[select_order_type(weights, rng)] += 1

        assert abs(counts[OrderType.TV_GENERAL] / draws - 0.30) < 0.02
        assert abs(counts[OrderType.MOVIES_GENERAL] / draws - 0.50) < 0.02
        assert abs(counts[OrderType.CUSTOM_ORDER] / draws - 0.20) < 0.02
