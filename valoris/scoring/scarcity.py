"""D3 scarcity scoring.

A low graded population reads as genuine scarcity (investable, low score);
a large, easily gem-graded population reads as mass production (high
speculation score). Population figures come from a pluggable provider.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from valoris.core.logging import get_logger
from valoris.core.technical_utils import clamp
from valoris.domain.market import PSAPopulation
from valoris.domain.scores import DimensionScore


logger = get_logger("scoring.scarcity")


class ScarcityRating(str, Enum):
    """Scarcity tier from the PSA 10 population."""

    ULTRA_RARE = "Ultra Rare"
    VERY_RARE = "Very Rare"
    RARE = "Rare"
    COMMON = "Common"
    MASS_PRODUCED = "Mass Produced"


# (psa10 population upper bound, base score, rating)
POPULATION_BANDS: tuple[tuple[int, float, ScarcityRating], ...] = (
    (100, 5.0, ScarcityRating.ULTRA_RARE),
    (500, 15.0, ScarcityRating.VERY_RARE),
    (2000, 30.0, ScarcityRating.RARE),
    (10000, 60.0, ScarcityRating.COMMON),
)
MASS_PRODUCED_SCORE = 85.0

# (psa10 share above which, adjustment); easy gems are worth less
PSA10_SHARE_PENALTIES: tuple[tuple[float, float], ...] = (
    (30.0, 20.0),
    (15.0, 10.0),
)
PSA10_SHARE_HARD_GRADE = 5.0
PSA10_SHARE_HARD_GRADE_BONUS = -10.0
VINTAGE_ADJUSTMENT = -20.0

VINTAGE_CUTOFF_YEAR = 2003

# Populations from published PSA reports, keyed "<card>-<set>"
KNOWN_POPULATIONS: dict[str, dict[str, int]] = {
    # Vintage Base Set
    "charizard-base1": {"psa10": 121, "psa9": 2500, "total_graded": 15000},
    "blastoise-base1": {"psa10": 200, "psa9": 3000, "total_graded": 12000},
    "venusaur-base1": {"psa10": 180, "psa9": 2800, "total_graded": 11000},
    "pikachu-base1": {"psa10": 1500, "psa9": 8000, "total_graded": 35000},
    # Modern
    "charizard-swsh": {"psa10": 15000, "psa9": 25000, "total_graded": 60000},
    "pikachu-vmax": {"psa10": 8000, "psa9": 15000, "total_graded": 40000},
    "umbreon-vmax": {"psa10": 5000, "psa9": 12000, "total_graded": 30000},
    "giratina-v": {"psa10": 12000, "psa9": 20000, "total_graded": 50000},
    # Japanese promos
    "stamp-pikachu": {"psa10": 2500, "psa9": 5000, "total_graded": 15000},
}

MODERN_BASE_POPULATION = 10000
MODERN_PSA10_RATIO = 0.15
VINTAGE_BASE_POPULATION = 5000
VINTAGE_PSA10_RATIO = 0.01
VINTAGE_SET_PREFIXES = ("base", "neo", "gym")
HIGH_RARITY_MARKERS = ("rare", "secret", "illustration")
HIGH_RARITY_FACTOR = 0.5
JAPANESE_SET_MARKERS = ("jp", "japanese")
JAPANESE_FACTOR = 0.7

RARITY_SCORES: dict[str, float] = {
    "Common": 5,
    "Uncommon": 10,
    "Rare": 25,
    "Rare Holo": 40,
    "Rare Holo V": 50,
    "Rare Holo VMAX": 55,
    "Rare Holo VSTAR": 55,
    "Rare Ultra": 60,
    "Rare Rainbow": 70,
    "Rare Secret": 75,
    "Rare Shiny": 65,
    "Amazing Rare": 55,
    "Radiant Rare": 60,
    "Illustration Rare": 65,
    "Special Art Rare": 70,
    "Ultra Rare": 68,
    "Hyper Rare": 75,
    "Shiny Rare": 65,
    "Double Rare": 55,
    "Art Rare": 70,
    "Trainer Gallery Rare": 50,
}
UNKNOWN_RARITY_SCORE = 30.0

# Fallback for rarity labels missing from the table, first match wins
RARITY_KEYWORD_SCORES: tuple[tuple[tuple[str, ...], float], ...] = (
    (("shining",), 85),
    ((" ex",), 80),
    (("secret", "hyper"), 75),
    (("rainbow",), 70),
    (("ultra", "special art"), 68),
    (("illustration",), 65),
    (("shiny", "radiant"), 60),
    (("vmax", "vstar"), 55),
    (("holo v",), 50),
    (("holo",), 40),
    (("rare",), 25),
    (("uncommon",), 10),
    (("common",), 5),
)
GOLD_STAR_SCORE = 90.0

# (set id prefix, release year), checked in order
SET_YEAR_PREFIXES: tuple[tuple[str, int], ...] = (
    ("sv", 2023),
    ("swsh", 2020),
    ("sm", 2017),
    ("xy", 2014),
    ("bw", 2011),
    ("hgss", 2010),
    ("pl", 2009),
    ("dp", 2007),
    ("ex", 2003),
)
SET_YEARS: dict[str, int] = {
    "base1": 1999,
    "base2": 1999,
    "base3": 1999,
    "base4": 2000,
    "base5": 2000,
    "base6": 2001,
    "cel25": 2021,
}
WOTC_SET_PREFIXES = ("neo", "gym")
WOTC_YEAR = 2000


@dataclass
class ScarcityScore:
    """D3 outcome for one card."""

    population: PSAPopulation
    scarcity_rating: ScarcityRating
    d3_score: float

    def to_dict(self) -> dict:
        return {
            "population": self.population.model_dump(),
            "scarcity_rating": self.scarcity_rating.value,
            "d3_score": round(self.d3_score, 2),
        }

    def to_dimension(self, rarity_score: float | None = None) -> DimensionScore:
        sub_metrics = {
            "psa10": float(self.population.psa10),
            "total_graded": float(self.population.total_graded),
            "psa10_percentage": self.population.psa10_percentage,
        }
        if rarity_score is not None:
            sub_metrics["rarity_score"] = rarity_score
        return DimensionScore(value=self.d3_score, sub_metrics=sub_metrics)


class PopulationProvider(Protocol):
    """Source of graded population reports."""

    def get_population(
        self, card_name: str, set_id: str, rarity: str | None = None
    ) -> PSAPopulation:
        ...


class EstimatedPopulationProvider:
    """Population from known PSA reports, otherwise estimated from card traits.

    Estimation starts at 10,000 graded copies with 15% gems for modern
    cards, or 5,000 at 1% for WOTC-era sets, then halves the base for high
    rarities and takes 70% for Japanese sets.
    """

    def __init__(self, known_populations: dict[str, dict[str, int]] | None = None):
        self.known_populations = known_populations if known_populations is not None else KNOWN_POPULATIONS

    def get_population(
        self, card_name: str, set_id: str, rarity: str | None = None
    ) -> PSAPopulation:
        key = f"{card_name.lower()}-{set_id.lower()}"
        known = self.known_populations.get(key)
        if known:
            return self._from_known(card_name, set_id, known)
        return self._estimate(card_name, set_id, rarity)

    @staticmethod
    def _from_known(card_name: str, set_id: str, known: dict[str, int]) -> PSAPopulation:
        psa10 = known.get("psa10", 0)
        psa9 = known.get("psa9", 0)
        total = known.get("total_graded", 0)
        return PSAPopulation(
            card_name=card_name,
            set_name=set_id,
            psa10=psa10,
            psa9=psa9,
            psa8=math.floor(psa9 * 0.5),
            psa7=math.floor(psa9 * 0.3),
            total_graded=total,
            psa10_percentage=psa10 / total * 100 if total else 0.0,
        )

    @staticmethod
    def _estimate(card_name: str, set_id: str, rarity: str | None) -> PSAPopulation:
        base = MODERN_BASE_POPULATION
        ratio = MODERN_PSA10_RATIO

        if set_id.startswith(VINTAGE_SET_PREFIXES):
            base = VINTAGE_BASE_POPULATION
            ratio = VINTAGE_PSA10_RATIO

        if rarity and any(marker in rarity for marker in HIGH_RARITY_MARKERS):
            base = math.floor(base * HIGH_RARITY_FACTOR)

        if any(marker in set_id for marker in JAPANESE_SET_MARKERS):
            base = math.floor(base * JAPANESE_FACTOR)

        logger.debug(f"Estimated population for {card_name} ({set_id}): {base} graded")

        return PSAPopulation(
            card_name=card_name,
            set_name=set_id,
            psa10=math.floor(base * ratio),
            psa9=math.floor(base * 0.25),
            psa8=math.floor(base * 0.15),
            psa7=math.floor(base * 0.10),
            total_graded=base,
            psa10_percentage=ratio * 100,
        )


def compute_scarcity_score(population: PSAPopulation, is_vintage: bool = False) -> ScarcityScore:
    """
    Score a graded population (D3).

    Args:
        population: PSA population report
        is_vintage: Vintage cards get a further reduction for real scarcity

    Returns:
        ScarcityScore with the rating and the clamped score
    """
    score = MASS_PRODUCED_SCORE
    rating = ScarcityRating.MASS_PRODUCED
    for upper, band_score, band_rating in POPULATION_BANDS:
        if population.psa10 < upper:
            score = band_score
            rating = band_rating
            break

    for share_above, penalty in PSA10_SHARE_PENALTIES:
        if population.psa10_percentage > share_above:
            score += penalty
            break
    else:
        if population.psa10_percentage < PSA10_SHARE_HARD_GRADE:
            score += PSA10_SHARE_HARD_GRADE_BONUS

    if is_vintage:
        score += VINTAGE_ADJUSTMENT

    return ScarcityScore(population=population, scarcity_rating=rating, d3_score=clamp(score))


_default_provider = EstimatedPopulationProvider()


def get_scarcity_score(
    card_name: str,
    set_id: str,
    rarity: str | None = None,
    is_vintage: bool = False,
    provider: PopulationProvider | None = None,
) -> ScarcityScore:
    """Look up the population for a card and score it."""
    population = (provider or _default_provider).get_population(card_name, set_id, rarity)
    return compute_scarcity_score(population, is_vintage)


def get_rarity_score(rarity: str | None) -> float:
    """Scarcity of a printed rarity label (0-100, higher is rarer)."""
    if not rarity:
        return UNKNOWN_RARITY_SCORE

    if rarity in RARITY_SCORES:
        return float(RARITY_SCORES[rarity])

    lower = rarity.lower()
    if "star" in lower and "vstar" not in lower:
        return GOLD_STAR_SCORE
    for keywords, score in RARITY_KEYWORD_SCORES:
        if any(k in lower for k in keywords):
            return float(score)

    return UNKNOWN_RARITY_SCORE


def estimate_set_year(set_id: str) -> int | None:
    """Release year of a set from its id, None when unknown."""
    for prefix, year in SET_YEAR_PREFIXES:
        if set_id.startswith(prefix):
            return year
    if set_id in SET_YEARS:
        return SET_YEARS[set_id]
    if set_id.startswith(WOTC_SET_PREFIXES):
        return WOTC_YEAR
    return None


def is_vintage_set(set_id: str) -> bool:
    """True for sets released before the EX era."""
    year = estimate_set_year(set_id)
    return year is not None and year < VINTAGE_CUTOFF_YEAR
