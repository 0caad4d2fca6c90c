"""Domain models for strongly-typed data throughout the scoring engine.

Usage:
    from valoris.domain import PriceSeries, MacroSnapshot

    series = PriceSeries.from_values([12.0, 12.5, 13.1])
    data = series.model_dump()
"""

from valoris.domain.market import (
    MENTION_WEIGHTS,
    BTCData,
    FearGreedData,
    IndexQuote,
    MacroSnapshot,
    MarketIndices,
    PSAPopulation,
    SocialMentions,
)
from valoris.domain.price import (
    PricePoint,
    PriceSeries,
    price_values,
)
from valoris.domain.scores import DimensionScore

__all__ = [
    # Price
    "PricePoint",
    "PriceSeries",
    "price_values",
    # Market
    "BTCData",
    "FearGreedData",
    "IndexQuote",
    "MarketIndices",
    "MacroSnapshot",
    "MENTION_WEIGHTS",
    "SocialMentions",
    "PSAPopulation",
    # Scores
    "DimensionScore",
]
