"""
Weighted choice between the TV, movie and custom-order pools.
"""

import logging
import random

from utils.config import ORDER_WEIGHT_TOTAL

from .models import OrderType, OrderWeights

logger = logging.getLogger('nextarr')


def select_order_type(weights: OrderWeights, rng: random.Random) -> OrderType:
    """
    Pick the pool for this selection.

    Draws an integer in [1, 100] and maps it onto cumulative bands:
    [1, tv] is TV, (tv, tv + movies] is movies, anything above is custom
    order. Weights that do not sum to 100 are used as-is, so the custom
    band grows or shrinks accordingly.

    Args:
        weights: Percentages for each order type
        rng: Random source

    Returns:
        The chosen OrderType
    """
    draw = rng.randint(1, ORDER_WEIGHT_TOTAL)
    logger.debug(
        f"Order type percentages - TV: {weights.tv}%, Movies: {weights.movies}%, "
        f"Custom: {weights.custom}% (draw: {draw})"
    )

    if draw <= weights.tv:
        return OrderType.TV_GENERAL
    if draw <= weights.tv + weights.movies:
        return OrderType.MOVIES_GENERAL
    return OrderType.CUSTOM_ORDER
