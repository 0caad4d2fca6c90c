"""Card speculation scoring.

Five dimensions, each 0-100, aggregate into the speculation score:

- D1 volatility: price stability (stable cards score high)
- D2 growth: trend of the price history
- D3 scarcity: graded population
- D4 sentiment: social buzz, order book, search hype, popularity
- D5 macro: crypto momentum, Fear & Greed, VIX

Technical indicators feed the rebound score, and both feed the hybrid
recommendation. The card-level pipeline lives in ``valoris.scoring.service``.
"""

from .config import ScoringConfig, ScoringSettings, get_scoring_config
from .growth import calculate_growth_score, compute_growth_dimension
from .macro import MacroScore, calculate_btc_correlation, get_macro_score
from .recommendation import (
    HybridRecommendation,
    Recommendation,
    RiskLevel,
    Verdict,
    compute_hybrid_recommendation,
    parse_verdict,
)
from .risk import (
    PriceStatistics,
    calculate_max_drawdown,
    calculate_sharpe_ratio,
    compute_price_statistics,
)
from .scarcity import (
    EstimatedPopulationProvider,
    PopulationProvider,
    ScarcityRating,
    ScarcityScore,
    compute_scarcity_score,
    estimate_set_year,
    get_rarity_score,
    get_scarcity_score,
    is_vintage_set,
)
from .sentiment import SentimentScore, calculate_d4_score
from .speculation import (
    SpeculationRating,
    SpeculationScore,
    calculate_quick_score,
    compute_speculation_score,
    compute_speculation_total,
)
from .technicals import (
    RebondScore,
    TechnicalIndicators,
    calculate_rebond_score,
    calculate_technical_indicators,
)
from .volatility import calculate_volatility_score, compute_volatility_dimension


__all__ = [
    # Config
    "ScoringConfig",
    "ScoringSettings",
    "get_scoring_config",
    # Dimensions
    "calculate_volatility_score",
    "compute_volatility_dimension",
    "calculate_growth_score",
    "compute_growth_dimension",
    "ScarcityRating",
    "ScarcityScore",
    "PopulationProvider",
    "EstimatedPopulationProvider",
    "compute_scarcity_score",
    "get_scarcity_score",
    "get_rarity_score",
    "estimate_set_year",
    "is_vintage_set",
    "SentimentScore",
    "calculate_d4_score",
    "MacroScore",
    "get_macro_score",
    "calculate_btc_correlation",
    # Aggregation
    "SpeculationRating",
    "SpeculationScore",
    "compute_speculation_total",
    "compute_speculation_score",
    "calculate_quick_score",
    # Technicals
    "TechnicalIndicators",
    "RebondScore",
    "calculate_technical_indicators",
    "calculate_rebond_score",
    # Recommendation
    "Verdict",
    "Recommendation",
    "RiskLevel",
    "HybridRecommendation",
    "parse_verdict",
    "compute_hybrid_recommendation",
    # Risk
    "PriceStatistics",
    "calculate_sharpe_ratio",
    "calculate_max_drawdown",
    "compute_price_statistics",
]
