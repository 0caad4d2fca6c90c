"""Technical indicators and the rebound ("rebond") score.

The rebound score accumulates oversold, momentum and volume signals into a
0-100 technical score, optionally blended with an external ML score.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Sequence

from valoris.core.logging import get_logger
from valoris.core.technical_utils import (
    MACD_SLOW_PERIOD,
    MACDResult,
    clamp,
    macd,
    round_half_up,
    rsi,
    volume_ratio,
)
from valoris.domain.price import PricePoint, PriceSeries, price_values

from .config import ScoringConfig, get_scoring_config


logger = get_logger("scoring.technicals")

# Points per signal
RSI_OVERSOLD_POINTS = 35.0
RSI_WEAK_POINTS = 20.0
RSI_OVERBOUGHT_POINTS = -15.0
MACD_BULLISH_POINTS = 35.0
MACD_BEARISH_POINTS = -10.0
VOLUME_SPIKE_POINTS = 30.0

# Confidence gained per signal
RSI_OVERSOLD_CONFIDENCE = 0.30
RSI_WEAK_CONFIDENCE = 0.15
MACD_BULLISH_CONFIDENCE = 0.35
VOLUME_SPIKE_CONFIDENCE = 0.25
AGREEMENT_CONFIDENCE = 0.15

ML_BULLISH_THRESHOLD = 60.0
ML_BEARISH_THRESHOLD = 40.0

# (minimum final score, recommendation label)
REBOND_RECOMMENDATION_BANDS = (
    (80.0, "strong_buy"),
    (60.0, "buy"),
    (40.0, "hold"),
    (20.0, "sell"),
)


class RsiSignal(str, Enum):
    OVERSOLD = "oversold"
    NEUTRAL = "neutral"
    OVERBOUGHT = "overbought"


class TrendSignal(str, Enum):
    BULLISH = "bullish"
    NEUTRAL = "neutral"
    BEARISH = "bearish"


class VolumeSignal(str, Enum):
    SPIKING = "spiking"
    NORMAL = "normal"
    LOW = "low"


class RebondRecommendation(str, Enum):
    """Rebound recommendation bands."""

    STRONG_BUY = "strong_buy"
    BUY = "buy"
    HOLD = "hold"
    SELL = "sell"
    STRONG_SELL = "strong_sell"


@dataclass
class TechnicalIndicators:
    """Indicators derived from one price history."""

    rsi14: float = 50.0
    macd: MACDResult = field(default_factory=MACDResult)
    volume_ratio: float = 1.0
    is_oversold: bool = False
    is_volume_spiking: bool = False
    is_macd_bullish: bool = False
    ml_score: float | None = None

    def to_dict(self) -> dict:
        return {
            "rsi14": self.rsi14,
            "macd": self.macd.to_dict(),
            "volume_ratio": self.volume_ratio,
            "is_oversold": self.is_oversold,
            "is_volume_spiking": self.is_volume_spiking,
            "is_macd_bullish": self.is_macd_bullish,
            "ml_score": self.ml_score,
        }


@dataclass
class RebondSignals:
    rsi: RsiSignal = RsiSignal.NEUTRAL
    macd: TrendSignal = TrendSignal.NEUTRAL
    volume: VolumeSignal = VolumeSignal.NORMAL
    ml: TrendSignal | None = None

    def to_dict(self) -> dict:
        return {
            "rsi": self.rsi.value,
            "macd": self.macd.value,
            "volume": self.volume.value,
            "ml": self.ml.value if self.ml else None,
        }


@dataclass
class RebondScore:
    """Rebound score with its confidence and contributing signals."""

    score: float
    confidence: float
    signals: RebondSignals
    recommendation: RebondRecommendation
    technical_score: float = 0.0
    ml_contribution: float | None = None

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "confidence": round(self.confidence, 4),
            "signals": self.signals.to_dict(),
            "recommendation": self.recommendation.value,
            "technical_score": self.technical_score,
            "ml_contribution": self.ml_contribution,
        }


def calculate_technical_indicators(
    price_history: PriceSeries | Sequence[PricePoint] | Sequence[float],
    current_volume: float = 0,
    historical_volumes: Sequence[float] = (),
    ml_score: float | None = None,
    config: ScoringConfig | None = None,
) -> TechnicalIndicators:
    """
    Derive RSI(14), MACD and the volume ratio from a price history.

    Args:
        price_history: Prices in chronological order
        current_volume: Latest traded volume (0 when unknown)
        historical_volumes: Past volumes for the average
        ml_score: Optional external model score (0-100)
        config: Scoring configuration

    Returns:
        TechnicalIndicators; short histories yield neutral readings
    """
    config = config or get_scoring_config()

    prices = price_values(price_history)
    if len(prices) < MACD_SLOW_PERIOD:
        logger.debug(f"Only {len(prices)} prices, MACD is neutral")

    rsi14 = rsi(prices, config.rsi_period)
    macd_result = macd(prices)
    ratio = volume_ratio(current_volume, historical_volumes)

    return TechnicalIndicators(
        rsi14=rsi14,
        macd=macd_result,
        volume_ratio=ratio,
        is_oversold=rsi14 < config.rsi_oversold,
        is_volume_spiking=ratio > config.volume_spike_ratio,
        is_macd_bullish=(
            macd_result.histogram > 0 and macd_result.macd_line > macd_result.signal_line
        ),
        ml_score=ml_score,
    )


def _recommendation(score: float) -> RebondRecommendation:
    for minimum, label in REBOND_RECOMMENDATION_BANDS:
        if score >= minimum:
            return RebondRecommendation(label)
    return RebondRecommendation.STRONG_SELL


def calculate_rebond_score(
    indicators: TechnicalIndicators,
    config: ScoringConfig | None = None,
) -> RebondScore:
    """
    Fuse technical signals (and the ML score, if any) into a rebound score.

    The technical score is clamped before the 70/30 ML blend; the
    recommendation is taken from the unrounded final score.
    """
    config = config or get_scoring_config()

    technical = 0.0
    confidence = 0.0
    signals = RebondSignals()

    if indicators.rsi14 < config.rsi_oversold:
        technical += RSI_OVERSOLD_POINTS
        confidence += RSI_OVERSOLD_CONFIDENCE
        signals.rsi = RsiSignal.OVERSOLD
    elif indicators.rsi14 < config.rsi_weak:
        technical += RSI_WEAK_POINTS
        confidence += RSI_WEAK_CONFIDENCE
    elif indicators.rsi14 > config.rsi_overbought:
        technical += RSI_OVERBOUGHT_POINTS
        signals.rsi = RsiSignal.OVERBOUGHT

    m = indicators.macd
    if indicators.is_macd_bullish:
        technical += MACD_BULLISH_POINTS
        confidence += MACD_BULLISH_CONFIDENCE
        signals.macd = TrendSignal.BULLISH
    elif m.histogram < 0 and m.macd_line < m.signal_line:
        technical += MACD_BEARISH_POINTS
        signals.macd = TrendSignal.BEARISH

    if indicators.is_volume_spiking:
        technical += VOLUME_SPIKE_POINTS
        confidence += VOLUME_SPIKE_CONFIDENCE
        signals.volume = VolumeSignal.SPIKING
    elif indicators.volume_ratio < config.volume_low_ratio:
        signals.volume = VolumeSignal.LOW

    technical = clamp(technical)
    final = technical

    ml = indicators.ml_score
    if ml is not None:
        final = technical * config.rebond_technical_weight + ml * config.rebond_ml_weight
        both_bullish = technical > ML_BULLISH_THRESHOLD and ml > ML_BULLISH_THRESHOLD
        both_bearish = technical < ML_BEARISH_THRESHOLD and ml < ML_BEARISH_THRESHOLD
        if both_bullish or both_bearish:
            confidence += AGREEMENT_CONFIDENCE

        if ml > ML_BULLISH_THRESHOLD:
            signals.ml = TrendSignal.BULLISH
        elif ml < ML_BEARISH_THRESHOLD:
            signals.ml = TrendSignal.BEARISH
        else:
            signals.ml = TrendSignal.NEUTRAL

    final = clamp(final)
    confidence = clamp(confidence, 0.0, 1.0)

    return RebondScore(
        score=round_half_up(final),
        confidence=confidence,
        signals=signals,
        recommendation=_recommendation(final),
        technical_score=technical,
        ml_contribution=ml,
    )
