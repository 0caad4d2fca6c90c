"""D5 macro scoring.

Reads the broader risk appetite: crypto momentum, the Fear & Greed index
and equity volatility. A euphoric macro backdrop raises the speculation
score.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from valoris.core.technical_utils import clamp, pearson_correlation
from valoris.domain.market import BTCData, FearGreedData, MacroSnapshot, MarketIndices
from valoris.domain.scores import DimensionScore


# (30d BTC change % strictly above, points), first match wins
BTC_MOMENTUM_BANDS: tuple[tuple[float, float], ...] = (
    (50.0, 30.0),
    (20.0, 20.0),
    (0.0, 10.0),
)
BTC_CRASH_THRESHOLD = -20.0
BTC_CRASH_POINTS = -15.0

# (Fear & Greed strictly above, points)
FEAR_GREED_BANDS: tuple[tuple[float, float], ...] = (
    (80.0, 40.0),
    (60.0, 25.0),
    (40.0, 10.0),
)
EXTREME_FEAR_THRESHOLD = 20.0
EXTREME_FEAR_POINTS = -20.0

# (VIX strictly below, points)
VIX_BANDS: tuple[tuple[float, float], ...] = (
    (15.0, 30.0),
    (20.0, 15.0),
)
VIX_PANIC_THRESHOLD = 30.0
VIX_PANIC_POINTS = -20.0

CORRELATION_MIN_POINTS = 3


@dataclass
class MacroScore:
    """D5 outcome with the inputs it was computed from."""

    btc_data: BTCData
    fear_greed: FearGreedData
    indices: MarketIndices
    macro_risk_score: float
    contributions: dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "btc_data": self.btc_data.model_dump(),
            "fear_greed": self.fear_greed.model_dump(),
            "indices": self.indices.model_dump(),
            "macro_risk_score": self.macro_risk_score,
            "contributions": dict(self.contributions),
        }

    def to_dimension(self) -> DimensionScore:
        return DimensionScore(value=self.macro_risk_score, sub_metrics=dict(self.contributions))


def _btc_points(change_30d: float) -> float:
    for above, points in BTC_MOMENTUM_BANDS:
        if change_30d > above:
            return points
    if change_30d < BTC_CRASH_THRESHOLD:
        return BTC_CRASH_POINTS
    return 0.0


def _fear_greed_points(value: float) -> float:
    for above, points in FEAR_GREED_BANDS:
        if value > above:
            return points
    if value < EXTREME_FEAR_THRESHOLD:
        return EXTREME_FEAR_POINTS
    return 0.0


def _vix_points(vix: float) -> float:
    for below, points in VIX_BANDS:
        if vix < below:
            return points
    if vix > VIX_PANIC_THRESHOLD:
        return VIX_PANIC_POINTS
    return 0.0


def get_macro_score(
    btc_data: BTCData | None = None,
    fear_greed: FearGreedData | None = None,
    indices: MarketIndices | None = None,
) -> MacroScore:
    """
    Compute the D5 macro risk score.

    Contributions are additive and may be negative; only the sum is clamped.

    Args:
        btc_data: Bitcoin momentum (neutral when omitted)
        fear_greed: Fear & Greed reading (50 when omitted)
        indices: Market indices (VIX 20 when omitted)

    Returns:
        MacroScore with per-source contributions
    """
    btc_data = btc_data or BTCData()
    fear_greed = fear_greed or FearGreedData()
    indices = indices or MarketIndices()

    contributions = {
        "btc_momentum": _btc_points(btc_data.change_30d),
        "fear_greed": _fear_greed_points(fear_greed.value),
        "vix": _vix_points(indices.vix.price),
    }

    return MacroScore(
        btc_data=btc_data,
        fear_greed=fear_greed,
        indices=indices,
        macro_risk_score=clamp(sum(contributions.values())),
        contributions=contributions,
    )


def get_macro_score_from_snapshot(snapshot: MacroSnapshot) -> MacroScore:
    return get_macro_score(snapshot.btc, snapshot.fear_greed, snapshot.indices)


def calculate_btc_correlation(
    card_prices: Sequence[float],
    btc_prices: Sequence[float] | None,
) -> float:
    """
    Pearson correlation between a card and Bitcoin.

    The longer series is cut to the tail of the shorter one so both cover
    the same recent period. Returns 0.0 with fewer than 3 aligned points.
    """
    if not btc_prices or not card_prices:
        return 0.0

    n = min(len(card_prices), len(btc_prices))
    if n < CORRELATION_MIN_POINTS:
        return 0.0

    return pearson_correlation(list(card_prices[-n:]), list(btc_prices[-n:]))
