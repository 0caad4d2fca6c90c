"""Pydantic schemas at the scoring boundary."""

from .scoring import (
    AIDimensionScores,
    CardAnalysis,
    CardScoringInput,
    DimensionScoreResponse,
    HybridRecommendationResponse,
    PriceStatisticsResponse,
    PumpResponse,
    RebondResponse,
    SpeculationResponse,
    TechnicalIndicatorsResponse,
)


__all__ = [
    "AIDimensionScores",
    "CardAnalysis",
    "CardScoringInput",
    "DimensionScoreResponse",
    "HybridRecommendationResponse",
    "PriceStatisticsResponse",
    "PumpResponse",
    "RebondResponse",
    "SpeculationResponse",
    "TechnicalIndicatorsResponse",
]
