"""Risk metrics and price statistics for the card detail view."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from valoris.core.technical_utils import coefficient_of_variation, mean
from valoris.domain.price import PricePoint, PriceSeries, price_values


DEFAULT_RISK_FREE_RATE = 0.02
SHORT_WINDOW = 30
LONG_WINDOW = 90
MIN_SIGMA = 1e-12


@dataclass
class PriceStatistics:
    """Summary statistics over the recent price history."""

    current_price: Optional[float] = None
    min_30d: Optional[float] = None
    max_30d: Optional[float] = None
    avg_30d: Optional[float] = None
    change_30d_pct: Optional[float] = None
    min_90d: Optional[float] = None
    max_90d: Optional[float] = None
    avg_90d: Optional[float] = None
    change_90d_pct: Optional[float] = None
    volatility: Optional[float] = None

    def to_dict(self) -> dict:
        return {
            "current_price": self.current_price,
            "min_30d": self.min_30d,
            "max_30d": self.max_30d,
            "avg_30d": self.avg_30d,
            "change_30d_pct": self.change_30d_pct,
            "min_90d": self.min_90d,
            "max_90d": self.max_90d,
            "avg_90d": self.avg_90d,
            "change_90d_pct": self.change_90d_pct,
            "volatility": self.volatility,
        }


def calculate_sharpe_ratio(
    returns: Sequence[float],
    risk_free_rate: float = DEFAULT_RISK_FREE_RATE,
) -> float:
    """Excess mean return per unit of (population) standard deviation."""
    returns_arr = np.asarray(returns, dtype=float)
    if len(returns_arr) == 0:
        return 0.0

    sigma = float(np.std(returns_arr))
    if sigma < MIN_SIGMA:
        return 0.0
    return float((np.mean(returns_arr) - risk_free_rate) / sigma)


def calculate_max_drawdown(prices: PriceSeries | Sequence[PricePoint] | Sequence[float]) -> float:
    """
    Compute maximum drawdown from peak to trough.

    Args:
        prices: Prices in chronological order

    Returns:
        Max drawdown as a negative percentage (-35.0 = 35% drawdown),
        0.0 for empty input or a series that never falls
    """
    close_prices = np.asarray(price_values(prices), dtype=float)
    if len(close_prices) == 0:
        return 0.0

    # Running maximum
    running_max = np.maximum.accumulate(close_prices)

    # Drawdown at each point; non-positive peaks have none
    safe_max = np.where(running_max > 0, running_max, 1.0)
    drawdowns = np.where(running_max > 0, (running_max - close_prices) / safe_max, 0.0)

    max_dd = float(np.max(drawdowns)) * 100
    return -max_dd if max_dd > 0 else 0.0


def _window_stats(values: list[float]) -> tuple[Optional[float], ...]:
    if not values:
        return None, None, None, None
    change = None
    if len(values) > 1 and values[0] != 0:
        change = round((values[-1] - values[0]) / values[0] * 100, 2)
    return round(min(values), 2), round(max(values), 2), round(mean(values), 2), change


def compute_price_statistics(
    prices: PriceSeries | Sequence[PricePoint] | Sequence[float],
) -> PriceStatistics:
    """Min/max/average/change over the last 30 and 90 points."""
    values = price_values(prices)
    if not values:
        return PriceStatistics()

    min_30, max_30, avg_30, change_30 = _window_stats(values[-SHORT_WINDOW:])
    min_90, max_90, avg_90, change_90 = _window_stats(values[-LONG_WINDOW:])

    return PriceStatistics(
        current_price=round(values[-1], 2),
        min_30d=min_30,
        max_30d=max_30,
        avg_30d=avg_30,
        change_30d_pct=change_30,
        min_90d=min_90,
        max_90d=max_90,
        avg_90d=avg_90,
        change_90d_pct=change_90,
        volatility=round(coefficient_of_variation(values), 2),
    )
