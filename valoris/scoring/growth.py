"""D2 growth scoring.

The total return over the series is squashed with tanh so that a flat card
scores 50, steady appreciation approaches 100 and decline approaches 0.
"""

from __future__ import annotations

import math
from typing import Sequence

from valoris.core.logging import get_logger
from valoris.core.technical_utils import clamp
from valoris.domain.price import PricePoint, PriceSeries, price_values
from valoris.domain.scores import DimensionScore

from .config import ScoringConfig, get_scoring_config
from .macro import calculate_btc_correlation


logger = get_logger("scoring.growth")

NEUTRAL_GROWTH_SCORE = 50.0

# Annual return a card of each era is expected to deliver (%)
VINTAGE_ANNUAL_RETURN = 18.0
MODERN_ANNUAL_RETURN = 8.0

PUMP_DUMP_MIN_POINTS = 10


def total_return_pct(values: Sequence[float]) -> float | None:
    """Percentage change from the first to the last value."""
    if len(values) < 2 or values[0] <= 0:
        return None
    return (values[-1] / values[0] - 1) * 100


def calculate_growth_score(
    prices: PriceSeries | Sequence[PricePoint] | Sequence[float],
    config: ScoringConfig | None = None,
) -> float:
    """
    Score the price trend (D2).

    Args:
        prices: Price history in chronological order
        config: Scoring configuration (``growth_scale``)

    Returns:
        Score in [0, 100], 50 when the return cannot be computed
    """
    config = config or get_scoring_config()

    ret = total_return_pct(price_values(prices))
    if ret is None:
        logger.debug("Insufficient prices for growth, using neutral score")
        return NEUTRAL_GROWTH_SCORE

    return clamp(50.0 + 50.0 * math.tanh(ret / config.growth_scale))


def calculate_pump_dump_ratio(values: Sequence[float]) -> float:
    """
    Consecutive rising points before the peak over falling points after it.

    A ratio below 0.5 means a quick rise followed by a slow bleed. Returns
    1.0 below 10 points.
    """
    if len(values) < PUMP_DUMP_MIN_POINTS:
        return 1.0

    peak_idx = max(range(len(values)), key=lambda i: (values[i], -i))

    rise_days = 0
    for i in range(peak_idx, 0, -1):
        if values[i] >= values[i - 1]:
            rise_days += 1
        else:
            break

    fall_days = 0
    for i in range(peak_idx, len(values) - 1):
        if values[i] > values[i + 1]:
            fall_days += 1
        else:
            break

    if fall_days == 0:
        return float(rise_days) if rise_days > 0 else 1.0

    return rise_days / fall_days


def compute_growth_dimension(
    prices: PriceSeries | Sequence[PricePoint] | Sequence[float],
    btc_prices: Sequence[float] | None = None,
    is_vintage: bool = False,
    config: ScoringConfig | None = None,
) -> DimensionScore:
    """D2 score with return, asymmetry and crypto-correlation diagnostics."""
    values = price_values(prices)
    ret = total_return_pct(values)
    benchmark = VINTAGE_ANNUAL_RETURN if is_vintage else MODERN_ANNUAL_RETURN

    return DimensionScore(
        value=calculate_growth_score(values, config),
        sub_metrics={
            "total_return_pct": ret if ret is not None else 0.0,
            "excess_return_pct": (ret - benchmark) if ret is not None else 0.0,
            "pump_dump_ratio": calculate_pump_dump_ratio(values),
            "btc_correlation": calculate_btc_correlation(values, btc_prices),
        },
    )
