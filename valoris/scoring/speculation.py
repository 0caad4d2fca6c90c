"""Speculation score: weighted aggregation of the five dimensions.

    total = 0.25 * D1 + 0.25 * D2 + 0.20 * D3 + 0.15 * D4 + 0.15 * D5

0-20 reads as a solid investment, 80-100 as mania.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from valoris.core.technical_utils import clamp, coefficient_of_variation, round_half_up
from valoris.domain.price import PricePoint, PriceSeries, price_values
from valoris.domain.scores import DimensionScore

from .config import ScoringConfig, get_scoring_config


class SpeculationRating(str, Enum):
    SOLID_INVESTMENT = "solid_investment"
    ACCEPTABLE = "acceptable"
    MODERATE_SPECULATION = "moderate_speculation"
    HIGH_SPECULATION = "high_speculation"
    MANIA = "mania"


class Interpretation(str, Enum):
    INVESTMENT = "investment"
    TRANSITION = "transition"
    SPECULATION = "speculation"


# (total strictly below, rating)
RATING_BANDS: tuple[tuple[float, SpeculationRating], ...] = (
    (20.0, SpeculationRating.SOLID_INVESTMENT),
    (40.0, SpeculationRating.ACCEPTABLE),
    (60.0, SpeculationRating.MODERATE_SPECULATION),
    (80.0, SpeculationRating.HIGH_SPECULATION),
)

RATING_COLORS = {
    SpeculationRating.SOLID_INVESTMENT: "green",
    SpeculationRating.ACCEPTABLE: "yellow",
    SpeculationRating.MODERATE_SPECULATION: "orange",
    SpeculationRating.HIGH_SPECULATION: "red",
    SpeculationRating.MANIA: "darkred",
}

RATING_LABELS = {
    SpeculationRating.SOLID_INVESTMENT: "Solid investment",
    SpeculationRating.ACCEPTABLE: "Acceptable investment",
    SpeculationRating.MODERATE_SPECULATION: "Moderate speculation",
    SpeculationRating.HIGH_SPECULATION: "High speculation",
    SpeculationRating.MANIA: "Mania - danger",
}

# (total strictly below, interpretation)
INTERPRETATION_BANDS: tuple[tuple[float, Interpretation], ...] = (
    (30.0, Interpretation.INVESTMENT),
    (60.0, Interpretation.TRANSITION),
)

# Quick score bands: (strictly above, score), first match wins
QUICK_CV_BANDS = ((50.0, 80.0), (30.0, 50.0), (15.0, 25.0))
QUICK_CV_FLOOR = 10.0
QUICK_RETURN_BANDS = ((500.0, 90.0), (100.0, 60.0), (30.0, 30.0))
QUICK_RETURN_FLOOR = 10.0
QUICK_POPULATION_BANDS = ((10000, 80.0), (2000, 50.0), (500, 25.0))
QUICK_POPULATION_FLOOR = 5.0
QUICK_NEUTRAL_SCORE = 50.0
QUICK_CV_WINDOW = 30


@dataclass
class SpeculationScore:
    """Total speculation score with the five dimensions behind it."""

    total: float
    d1: DimensionScore
    d2: DimensionScore
    d3: DimensionScore
    d4: DimensionScore
    d5: DimensionScore
    rating: SpeculationRating
    interpretation: Interpretation

    @property
    def rating_color(self) -> str:
        return RATING_COLORS[self.rating]

    @property
    def rating_label(self) -> str:
        return RATING_LABELS[self.rating]

    def to_dict(self) -> dict:
        return {
            "total": round(self.total, 2),
            "rating": self.rating.value,
            "rating_color": self.rating_color,
            "rating_label": self.rating_label,
            "interpretation": self.interpretation.value,
            "d1": self.d1.to_dict(),
            "d2": self.d2.to_dict(),
            "d3": self.d3.to_dict(),
            "d4": self.d4.to_dict(),
            "d5": self.d5.to_dict(),
        }


def _value(dimension: DimensionScore | float) -> float:
    if isinstance(dimension, DimensionScore):
        return dimension.value
    return clamp(float(dimension))


def compute_speculation_total(
    d1: DimensionScore | float,
    d2: DimensionScore | float,
    d3: DimensionScore | float,
    d4: DimensionScore | float,
    d5: DimensionScore | float,
    config: ScoringConfig | None = None,
) -> float:
    """Weighted sum of the five dimension values, clamped to [0, 100]."""
    config = config or get_scoring_config()
    w = config.weights

    total = (
        w["d1"] * _value(d1)
        + w["d2"] * _value(d2)
        + w["d3"] * _value(d3)
        + w["d4"] * _value(d4)
        + w["d5"] * _value(d5)
    )
    return clamp(total)


def get_rating(total: float) -> SpeculationRating:
    for below, rating in RATING_BANDS:
        if total < below:
            return rating
    return SpeculationRating.MANIA


def get_interpretation(total: float) -> Interpretation:
    for below, interpretation in INTERPRETATION_BANDS:
        if total < below:
            return interpretation
    return Interpretation.SPECULATION


def compute_speculation_score(
    d1: DimensionScore,
    d2: DimensionScore,
    d3: DimensionScore,
    d4: DimensionScore,
    d5: DimensionScore,
    config: ScoringConfig | None = None,
) -> SpeculationScore:
    """
    Aggregate the five dimensions into a speculation score.

    Args:
        d1: Volatility
        d2: Growth
        d3: Scarcity
        d4: Sentiment
        d5: Macro
        config: Scoring configuration (dimension weights)

    Returns:
        SpeculationScore with its rating and interpretation
    """
    total = compute_speculation_total(d1, d2, d3, d4, d5, config)
    return SpeculationScore(
        total=total,
        d1=d1,
        d2=d2,
        d3=d3,
        d4=d4,
        d5=d5,
        rating=get_rating(total),
        interpretation=get_interpretation(total),
    )


def _first_band(value: float, bands, floor: float) -> float:
    for above, score in bands:
        if value > above:
            return score
    return floor


def calculate_quick_score(
    prices: PriceSeries | Sequence[PricePoint] | Sequence[float],
    psa_population: int,
    is_vintage: bool = False,
    config: ScoringConfig | None = None,
) -> float:
    """
    Coarse speculation score for batch ranking.

    Uses banded CV, total return and PSA population with neutral sentiment
    and macro, so it needs no external data. ``is_vintage`` is accepted for
    call-site symmetry; the population bands already reflect it.
    """
    values = price_values(prices)

    cv = coefficient_of_variation(values[-QUICK_CV_WINDOW:])
    d1 = _first_band(cv, QUICK_CV_BANDS, QUICK_CV_FLOOR)

    if len(values) > 1 and values[0] != 0:
        total_return = (values[-1] / values[0] - 1) * 100
    else:
        total_return = 0.0
    d2 = _first_band(total_return, QUICK_RETURN_BANDS, QUICK_RETURN_FLOOR)

    d3 = _first_band(psa_population, QUICK_POPULATION_BANDS, QUICK_POPULATION_FLOOR)

    total = compute_speculation_total(
        d1, d2, d3, QUICK_NEUTRAL_SCORE, QUICK_NEUTRAL_SCORE, config
    )
    return round_half_up(total)
