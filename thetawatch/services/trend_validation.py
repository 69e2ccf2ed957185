"""
Risk trend validation.

Problems are reported as warnings and a False return, never raised: an invalid
trend point is a signal for the theta analysis, not an error.
"""
import logging
import math
from numbers import Real
from typing import Any, Mapping, Optional, Sequence

from thetawatch.models.conjunction import COLLISION_PROBABILITY, TIME_TO_TCA

logger = logging.getLogger(__name__)

MINIMUM_TREND_POINTS = 2


def _as_float(value: Any) -> Optional[float]:
    """The value as a float, or None when it is not a number a float can hold."""
    if not isinstance(value, Real) or isinstance(value, bool):
        return None
    try:
        return float(value)
    except OverflowError:
        return None


def is_point_valid(point: Any) -> bool:
    """True if the trend point has a usable time_to_tca and collision_probability."""
    if not isinstance(point, Mapping):
        logger.warning(f"A risk trend is invalid: {point!r}")
        return False

    missing = [key for key in (TIME_TO_TCA, COLLISION_PROBABILITY) if key not in point]
    if missing:
        logger.warning(f"A risk trend is invalid, missing {', '.join(missing)}")
        return False

    valid = True
    time_to_tca = point[TIME_TO_TCA]
    collision_probability = point[COLLISION_PROBABILITY]

    if _as_float(time_to_tca) is None:
        logger.warning(f"{TIME_TO_TCA} for a risk trend is invalid: {time_to_tca!r}")
        valid = False
    probability = _as_float(collision_probability)
    if probability is None or math.isnan(probability):
        logger.warning(f"{COLLISION_PROBABILITY} for a risk trend is invalid: {collision_probability!r}")
        valid = False

    return valid


def has_sufficient_points(risk_trend: Optional[Sequence[Any]]) -> bool:
    if risk_trend is None or len(risk_trend) < MINIMUM_TREND_POINTS:
        logger.warning("There are not enough risk trends to analyze theta")
        return False
    return True
