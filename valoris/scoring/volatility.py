"""D1 volatility scoring.

Low price dispersion reads as an investable card and scores high; erratic
prices score low. The score inverts the coefficient of variation (CV)
through a piecewise-linear curve.
"""

from __future__ import annotations

from typing import Sequence

from valoris.core.logging import get_logger
from valoris.core.technical_utils import (
    clamp,
    coefficient_of_variation,
    daily_returns,
    mean,
    peak_to_trough,
)
from valoris.domain.price import PricePoint, PriceSeries, price_values
from valoris.domain.scores import DimensionScore


logger = get_logger("scoring.volatility")

EMPTY_SERIES_SCORE = 0.0
SINGLE_POINT_SCORE = 50.0

# (cv_low, cv_high, score_at_cv_low, score_at_cv_high)
CV_SCORE_BANDS: tuple[tuple[float, float, float, float], ...] = (
    (0.0, 5.0, 100.0, 85.0),     # very stable
    (5.0, 15.0, 85.0, 65.0),     # stable
    (15.0, 30.0, 65.0, 40.0),    # volatile
    (30.0, 60.0, 40.0, 10.0),    # very volatile
)
# Beyond the last band the score decays from 10 towards 0
CV_TAIL_SCORE = 10.0
CV_TAIL_SLOPE = 0.5

SHORT_WINDOW = 30
LONG_WINDOW = 90
ACCELERATION_RECENT = 7
ACCELERATION_LOOKBACK = 60
ACCELERATION_MIN_POINTS = 14


def cv_to_score(cv: float) -> float:
    """Map a coefficient of variation (%) onto the 0-100 stability curve."""
    for low, high, score_low, score_high in CV_SCORE_BANDS:
        if cv <= high:
            position = (max(cv, low) - low) / (high - low)
            return score_low - position * (score_low - score_high)

    last_high = CV_SCORE_BANDS[-1][1]
    return max(0.0, CV_TAIL_SCORE - (cv - last_high) * CV_TAIL_SLOPE)


def calculate_volatility_score(prices: PriceSeries | Sequence[PricePoint] | Sequence[float]) -> float:
    """
    Score price stability (D1).

    Args:
        prices: Price history in chronological order

    Returns:
        Score in [0, 100]: 0 for no data, 50 for a single point
    """
    values = price_values(prices)

    if not values:
        logger.debug("No prices, volatility score is 0")
        return EMPTY_SERIES_SCORE
    if len(values) == 1:
        return SINGLE_POINT_SCORE

    return clamp(cv_to_score(coefficient_of_variation(values)))


def calculate_acceleration(values: Sequence[float]) -> float:
    """
    Ratio of the mean of the last 7 returns to the mean of the 60 before.

    Values above 1 mean gains are accelerating. Returns 1.0 when the ratio
    is undefined.
    """
    if len(values) < ACCELERATION_MIN_POINTS:
        return 1.0

    returns = daily_returns(values)
    recent = returns[-ACCELERATION_RECENT:]
    previous = returns[-(ACCELERATION_LOOKBACK + ACCELERATION_RECENT):-ACCELERATION_RECENT]

    avg_previous = mean(previous)
    if not recent or avg_previous == 0:
        return 1.0

    return mean(recent) / avg_previous


def compute_volatility_dimension(
    prices: PriceSeries | Sequence[PricePoint] | Sequence[float],
) -> DimensionScore:
    """D1 score with its dispersion diagnostics."""
    values = price_values(prices)

    return DimensionScore(
        value=calculate_volatility_score(values),
        sub_metrics={
            "cv": coefficient_of_variation(values),
            "cv30": coefficient_of_variation(values[-SHORT_WINDOW:]),
            "cv90": coefficient_of_variation(values[-LONG_WINDOW:]),
            "ptr30": peak_to_trough(values[-SHORT_WINDOW:]),
            "acceleration": calculate_acceleration(values),
        },
    )
