"""Card scoring Pydantic schemas for service input and output."""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, Field

from valoris.domain.market import MacroSnapshot, PSAPopulation, SocialMentions
from valoris.domain.price import PricePoint


# === Input Schemas ===


class AIDimensionScores(BaseModel):
    """Per-dimension scores from an external AI analysis."""

    volatility: float = Field(..., ge=0, le=100)
    growth: float = Field(..., ge=0, le=100)
    scarcity: float = Field(..., ge=0, le=100)
    sentiment: float = Field(..., ge=0, le=100)
    macro: float = Field(..., ge=0, le=100)


class CardScoringInput(BaseModel):
    """Everything known about one card at scoring time.

    All external signals are optional; missing ones fall back to the
    neutral readings of each scorer.
    """

    card_id: str = Field(..., description="Card identifier")
    card_name: str = Field(..., description="Card name, e.g. 'Charizard'")
    set_id: str = Field(default="", description="Set identifier, e.g. 'base1'")
    pokemon_name: str | None = Field(
        default=None, description="Featured Pokémon (defaults to the card name)"
    )
    rarity: str | None = Field(default=None, description="Printed rarity label")
    is_vintage: bool | None = Field(
        default=None, description="Vintage flag (inferred from the set when omitted)"
    )

    # Market data
    price_history: list[PricePoint] = Field(default_factory=list, description="Prices (any order)")
    current_volume: float = Field(default=0, ge=0, description="Latest traded volume")
    historical_volumes: list[Annotated[float, Field(ge=0)]] = Field(
        default_factory=list, description="Past volumes"
    )
    btc_prices: list[float] | None = Field(default=None, description="BTC prices for correlation")
    ml_score: float | None = Field(default=None, ge=0, le=100, description="External ML score")

    # Sentiment
    social_mentions: SocialMentions = Field(default_factory=SocialMentions)
    buy_orders: int = Field(default=1, ge=0)
    sell_orders: int = Field(default=1, ge=0)
    search_volume_change: float = Field(default=0, description="Search volume change (%)")

    # Grading
    is_graded: bool = False
    graded_score: float = Field(default=0, ge=0, le=10)
    psa_population: PSAPopulation | None = Field(
        default=None, description="Population report (looked up when omitted)"
    )

    # Macro and external analysis
    macro: MacroSnapshot = Field(default_factory=MacroSnapshot)
    ai_verdict: str | None = Field(default=None, description="Free-text AI verdict")
    ai_scores: AIDimensionScores | None = None


# === Response Schemas ===


class DimensionScoreResponse(BaseModel):
    value: float = Field(..., ge=0, le=100)
    sub_metrics: dict[str, float] = Field(default_factory=dict)


class SpeculationResponse(BaseModel):
    """Speculation score with its five dimensions."""

    total: float = Field(..., ge=0, le=100)
    rating: str
    rating_color: str
    rating_label: str
    interpretation: str
    d1: DimensionScoreResponse
    d2: DimensionScoreResponse
    d3: DimensionScoreResponse
    d4: DimensionScoreResponse
    d5: DimensionScoreResponse


class MACDResponse(BaseModel):
    macd_line: float = 0.0
    signal_line: float = 0.0
    histogram: float = 0.0


class TechnicalIndicatorsResponse(BaseModel):
    rsi14: float = Field(..., ge=0, le=100)
    macd: MACDResponse
    volume_ratio: float = Field(..., ge=0)
    is_oversold: bool
    is_volume_spiking: bool
    is_macd_bullish: bool
    ml_score: float | None = None


class RebondSignalsResponse(BaseModel):
    rsi: str
    macd: str
    volume: str
    ml: str | None = None


class RebondResponse(BaseModel):
    """Rebound score."""

    score: float = Field(..., ge=0, le=100)
    confidence: float = Field(..., ge=0, le=1)
    signals: RebondSignalsResponse
    recommendation: str
    technical_score: float
    ml_contribution: float | None = None


class VotesResponse(BaseModel):
    bullish: int
    bearish: int
    breakdown: dict[str, int] = Field(default_factory=dict)


class HybridRecommendationResponse(BaseModel):
    """Final recommendation."""

    hybrid_score: float = Field(..., ge=0, le=100)
    recommendation: str = Field(..., description="STRONG_BUY, BUY, HOLD, SELL or STRONG_SELL")
    risk_level: str = Field(..., description="Low, Moderate or High")
    confidence: int = Field(..., ge=0, le=100)
    votes: VotesResponse


class PumpResponse(BaseModel):
    has_pump: bool
    pump_magnitude_pct: float | None = None
    days_since_peak: int | None = None


class PriceStatisticsResponse(BaseModel):
    current_price: float | None = None
    min_30d: float | None = None
    max_30d: float | None = None
    avg_30d: float | None = None
    change_30d_pct: float | None = None
    min_90d: float | None = None
    max_90d: float | None = None
    avg_90d: float | None = None
    change_90d_pct: float | None = None
    volatility: float | None = None


class CardAnalysis(BaseModel):
    """Complete scoring output for one card."""

    card_id: str
    card_name: str
    is_vintage: bool
    scarcity_rating: str

    speculation: SpeculationResponse
    technicals: TechnicalIndicatorsResponse
    rebond: RebondResponse
    recommendation: HybridRecommendationResponse
    price_statistics: PriceStatisticsResponse
    pump: PumpResponse

    # Data quality
    price_points_used: int = Field(..., ge=0)
    outliers_removed: list[float] = Field(default_factory=list)
    suspicious_last_change: bool = False

    model_config = {
        "from_attributes": True,
    }
