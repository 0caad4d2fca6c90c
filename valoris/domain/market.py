"""Market and collectible domain models.

Inputs supplied by external collaborators (crypto feed, Fear & Greed index,
volatility index, social counters, grading population reports). Defaults
are the neutral readings used when a source is unavailable.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, computed_field


# Relative reach of one mention per platform
MENTION_WEIGHTS = {
    "reddit": 1.0,
    "twitter": 1.2,
    "youtube": 1.5,
    "discord": 0.8,
}


class BTCData(BaseModel):
    """Bitcoin price and momentum."""

    price: float = Field(default=0.0, description="Spot price in USD")
    change_24h: float = Field(default=0.0, description="24h change (%)")
    change_7d: float = Field(default=0.0, description="7d change (%)")
    change_30d: float = Field(default=0.0, description="30d change (%)")

    model_config = {"from_attributes": True, "extra": "ignore"}


class FearGreedData(BaseModel):
    """Crypto Fear & Greed index reading."""

    value: float = Field(default=50.0, ge=0, le=100, description="Index value (0-100)")
    classification: str = Field(default="Neutral", description="Index label")

    model_config = {"from_attributes": True, "extra": "ignore"}


class IndexQuote(BaseModel):
    """Single market index quote."""

    price: float = Field(default=0.0, description="Index level")
    change: float = Field(default=0.0, description="Daily change (%)")

    model_config = {"from_attributes": True, "extra": "ignore"}


class MarketIndices(BaseModel):
    """Equity market indices relevant to risk appetite."""

    vix: IndexQuote = Field(default_factory=lambda: IndexQuote(price=20.0))
    sp500: IndexQuote = Field(default_factory=IndexQuote)

    model_config = {"from_attributes": True, "extra": "ignore"}


class MacroSnapshot(BaseModel):
    """Complete macro picture at scoring time."""

    btc: BTCData = Field(default_factory=BTCData)
    fear_greed: FearGreedData = Field(default_factory=FearGreedData)
    indices: MarketIndices = Field(default_factory=MarketIndices)

    model_config = {"from_attributes": True}


class SocialMentions(BaseModel):
    """Mention counts per platform over the observation window."""

    reddit: int = Field(default=0, ge=0)
    twitter: int = Field(default=0, ge=0)
    youtube: int = Field(default=0, ge=0)
    discord: int = Field(default=0, ge=0)

    model_config = {"from_attributes": True, "extra": "ignore"}

    def weighted_total(self) -> float:
        """Mentions weighted by platform reach."""
        return sum(getattr(self, platform) * weight for platform, weight in MENTION_WEIGHTS.items())


class PSAPopulation(BaseModel):
    """PSA graded population report for one card."""

    card_name: str = Field(..., description="Card name")
    set_name: str = Field(..., description="Set identifier")
    psa10: int = Field(default=0, ge=0, description="PSA 10 population")
    psa9: int = Field(default=0, ge=0, description="PSA 9 population")
    psa8: int = Field(default=0, ge=0, description="PSA 8 population")
    psa7: int = Field(default=0, ge=0, description="PSA 7 population")
    total_graded: int = Field(default=0, ge=0, description="Total graded copies")
    psa10_percentage: float = Field(default=0.0, ge=0, description="Share of PSA 10 (%)")

    model_config = {"from_attributes": True}

    @computed_field
    @property
    def gem_rate(self) -> float | None:
        """PSA 10 share derived from the counts."""
        if self.total_graded > 0:
            return self.psa10 / self.total_graded
        return None
