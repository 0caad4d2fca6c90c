"""Hybrid recommendation.

Four independent votes (speculation score, price momentum, rebound score
and an optional external verdict) are tallied into bullish and bearish
points, which decide the final label.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping

from valoris.core.technical_utils import mean, round_half_up

from .config import ScoringConfig, get_scoring_config


class Verdict(str, Enum):
    """External qualitative verdict, parsed once at the boundary."""

    BUY = "buy"
    SELL = "sell"
    HOLD = "hold"


class Recommendation(str, Enum):
    STRONG_BUY = "STRONG_BUY"
    BUY = "BUY"
    HOLD = "HOLD"
    SELL = "SELL"
    STRONG_SELL = "STRONG_SELL"


class RiskLevel(str, Enum):
    LOW = "Low"
    MODERATE = "Moderate"
    HIGH = "High"


# English and French verdict vocabulary; underscores and hyphens separate words
_BUY_PATTERN = re.compile(r"(?<![a-zà-ÿ])(buy|achat)(?![a-zà-ÿ])", re.IGNORECASE)
_SELL_PATTERN = re.compile(r"(?<![a-zà-ÿ])(sell|vente)(?![a-zà-ÿ])", re.IGNORECASE)

# Votes: (score at or above, bullish points)
SPECULATION_BULLISH_VOTES = ((70.0, 2), (50.0, 1))
SPECULATION_BEARISH_MAX = 30.0
SPECULATION_BEARISH_POINTS = 2
MOMENTUM_POINTS = 1
REBOND_BULLISH_MIN = 70.0
REBOND_BULLISH_POINTS = 2
REBOND_BEARISH_MAX = 30.0
REBOND_BEARISH_POINTS = 1
VERDICT_POINTS = 2

STRONG_SIGNAL_POINTS = 5
SIGNAL_POINTS = 3

REBOND_NEUTRAL = 50.0
BASE_CONFIDENCE = 50
AI_SCORES_CONFIDENCE = 25
REBOND_CONFIDENCE = 15
PRICE_CONFIDENCE = 10
MAX_CONFIDENCE = 100


@dataclass
class SignalVotes:
    """Bullish and bearish points with the vote that cast each."""

    bullish: int = 0
    bearish: int = 0
    breakdown: dict[str, int] = field(default_factory=dict)

    def cast(self, source: str, points: int) -> None:
        """Record a vote; positive points are bullish, negative bearish."""
        if points > 0:
            self.bullish += points
        elif points < 0:
            self.bearish += -points
        self.breakdown[source] = points

    def to_dict(self) -> dict:
        return {
            "bullish": self.bullish,
            "bearish": self.bearish,
            "breakdown": dict(self.breakdown),
        }


@dataclass
class HybridRecommendation:
    """Final recommendation shown for a card."""

    hybrid_score: float
    recommendation: Recommendation
    risk_level: RiskLevel
    confidence: int
    votes: SignalVotes = field(default_factory=SignalVotes)

    def to_dict(self) -> dict:
        return {
            "hybrid_score": self.hybrid_score,
            "recommendation": self.recommendation.value,
            "risk_level": self.risk_level.value,
            "confidence": self.confidence,
            "votes": self.votes.to_dict(),
        }


def parse_verdict(text: str | None) -> Verdict:
    """
    Map free-text verdicts ("Strong buy", "Vente conseillée") to a Verdict.

    Matches whole words only, so "buyer" or "bestseller" stay HOLD while
    "STRONG_BUY" counts. A text naming both sides counts as BUY.
    """
    if not text:
        return Verdict.HOLD
    if _BUY_PATTERN.search(text):
        return Verdict.BUY
    if _SELL_PATTERN.search(text):
        return Verdict.SELL
    return Verdict.HOLD


def _speculation_vote(score: float) -> int:
    for minimum, points in SPECULATION_BULLISH_VOTES:
        if score >= minimum:
            return points
    if score <= SPECULATION_BEARISH_MAX:
        return -SPECULATION_BEARISH_POINTS
    return 0


def _momentum_vote(price_change_pct: float, threshold: float) -> int:
    if price_change_pct >= threshold:
        return MOMENTUM_POINTS
    if price_change_pct <= -threshold:
        return -MOMENTUM_POINTS
    return 0


def _rebond_vote(rebond_score: float) -> int:
    if rebond_score >= REBOND_BULLISH_MIN:
        return REBOND_BULLISH_POINTS
    if rebond_score <= REBOND_BEARISH_MAX:
        return -REBOND_BEARISH_POINTS
    return 0


def _verdict_vote(verdict: Verdict) -> int:
    if verdict is Verdict.BUY:
        return VERDICT_POINTS
    if verdict is Verdict.SELL:
        return -VERDICT_POINTS
    return 0


def _label(votes: SignalVotes) -> Recommendation:
    if votes.bullish >= STRONG_SIGNAL_POINTS:
        return Recommendation.STRONG_BUY
    if votes.bullish >= SIGNAL_POINTS:
        return Recommendation.BUY
    if votes.bearish >= STRONG_SIGNAL_POINTS:
        return Recommendation.STRONG_SELL
    if votes.bearish >= SIGNAL_POINTS:
        return Recommendation.SELL
    return Recommendation.HOLD


def get_risk_level(d1_value: float, config: ScoringConfig | None = None) -> RiskLevel:
    """Risk from D1: a high volatility score means stable prices, so low risk."""
    config = config or get_scoring_config()
    if d1_value >= config.risk_low_threshold:
        return RiskLevel.LOW
    if d1_value >= config.risk_moderate_threshold:
        return RiskLevel.MODERATE
    return RiskLevel.HIGH


def compute_hybrid_recommendation(
    speculation_score: float,
    d1_value: float,
    price_change_pct: float = 0.0,
    rebond_score: float = REBOND_NEUTRAL,
    verdict: Verdict | str | None = Verdict.HOLD,
    ai_scores: Mapping[str, float] | None = None,
    price: float = 0.0,
    config: ScoringConfig | None = None,
) -> HybridRecommendation:
    """
    Combine speculation, momentum, rebound and the external verdict.

    Args:
        speculation_score: Total speculation score (0-100)
        d1_value: D1 volatility value, used for the risk level
        price_change_pct: Recent price change (%)
        rebond_score: Rebound score (50 when not computed)
        verdict: External verdict; free text is parsed with parse_verdict
        ai_scores: External per-dimension scores (0-100), if any
        price: Current price (0 when unknown)
        config: Scoring configuration

    Returns:
        HybridRecommendation with the vote tally
    """
    config = config or get_scoring_config()

    if not isinstance(verdict, Verdict):
        verdict = parse_verdict(verdict)

    votes = SignalVotes()
    votes.cast("speculation", _speculation_vote(speculation_score))
    votes.cast("momentum", _momentum_vote(price_change_pct, config.momentum_threshold_pct))
    votes.cast("rebond", _rebond_vote(rebond_score))
    votes.cast("verdict", _verdict_vote(verdict))

    has_ai_scores = bool(ai_scores)
    if has_ai_scores:
        hybrid_score = round_half_up((speculation_score + mean(list(ai_scores.values()))) / 2)
    else:
        hybrid_score = speculation_score

    confidence = BASE_CONFIDENCE
    if has_ai_scores:
        confidence += AI_SCORES_CONFIDENCE
    if rebond_score != REBOND_NEUTRAL:
        confidence += REBOND_CONFIDENCE
    if price > 0:
        confidence += PRICE_CONFIDENCE

    return HybridRecommendation(
        hybrid_score=hybrid_score,
        recommendation=_label(votes),
        risk_level=get_risk_level(d1_value, config),
        confidence=min(MAX_CONFIDENCE, confidence),
        votes=votes,
    )
