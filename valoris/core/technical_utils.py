"""
Simple Technical Indicator Utilities.

Lightweight time-series statistics over plain Python sequences. Every
function degrades to a documented neutral value on short or degenerate
input instead of raising, so callers can always render a score.

Usage:
    from valoris.core.technical_utils import ema, rsi, macd, coefficient_of_variation

    closes = [100.0, 101.5, 99.0, 102.0, ...]
    rsi_value = rsi(closes, period=14)
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence


RSI_NEUTRAL = 50.0
VOLUME_RATIO_NEUTRAL = 1.0

MACD_FAST_PERIOD = 12
MACD_SLOW_PERIOD = 26
MACD_SIGNAL_PERIOD = 9


@dataclass(frozen=True)
class MACDResult:
    """MACD line, signal line and histogram."""

    macd_line: float = 0.0
    signal_line: float = 0.0
    histogram: float = 0.0

    def to_dict(self) -> dict:
        return {
            "macd_line": self.macd_line,
            "signal_line": self.signal_line,
            "histogram": self.histogram,
        }


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round with ties going towards positive infinity.

    Matches the rounding of the scores historically shown on the dashboard,
    which Python's banker's rounding would not.
    """
    factor = 10 ** ndigits
    return math.floor(value * factor + 0.5) / factor


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean, 0.0 for empty input."""
    if len(values) == 0:
        return 0.0
    return sum(values) / len(values)


def sma(values: Sequence[float], period: int) -> float | None:
    """
    Calculate Simple Moving Average.

    Args:
        values: Price or value series
        period: Lookback period

    Returns:
        SMA value or None if insufficient data
    """
    if period <= 0 or len(values) < period:
        return None
    return sum(values[-period:]) / period


def std(values: Sequence[float], period: int | None = None) -> float:
    """
    Population standard deviation.

    Args:
        values: Price or value series
        period: Optional lookback; the whole series when omitted

    Returns:
        Standard deviation, 0.0 when there is nothing to measure
    """
    subset = list(values[-period:]) if period else list(values)
    if not subset:
        return 0.0
    avg = sum(subset) / len(subset)
    variance = sum((x - avg) ** 2 for x in subset) / len(subset)
    return math.sqrt(variance)


def ema(values: Sequence[float], period: int) -> float:
    """
    Calculate Exponential Moving Average.

    Seeded with the SMA of the first ``period`` values, then smoothed with
    the standard multiplier 2 / (period + 1).

    Args:
        values: Price or value series
        period: Lookback period

    Returns:
        EMA value; 0.0 for empty input, the last value when shorter than period
    """
    if len(values) == 0:
        return 0.0
    if len(values) < period:
        return float(values[-1])

    multiplier = 2 / (period + 1)
    ema_value = sum(values[:period]) / period  # Start with SMA

    for price in values[period:]:
        ema_value = (price - ema_value) * multiplier + ema_value

    return ema_value


def rsi(closes: Sequence[float], period: int = 14) -> float:
    """
    Calculate Relative Strength Index.

    RSI < 30 reads as oversold (potential bounce), RSI > 70 as overbought.

    Args:
        closes: Closing prices
        period: RSI period (default 14)

    Returns:
        RSI value (0-100) rounded to 2 decimals, 50.0 if insufficient data
    """
    if len(closes) < period + 1:
        return RSI_NEUTRAL

    changes = [closes[i] - closes[i - 1] for i in range(1, len(closes))]

    gains = [max(0.0, c) for c in changes]
    losses = [abs(min(0.0, c)) for c in changes]

    avg_gain = sum(gains[:period]) / period
    avg_loss = sum(losses[:period]) / period

    # Wilder's smoothing
    for i in range(period, len(gains)):
        avg_gain = (avg_gain * (period - 1) + gains[i]) / period
        avg_loss = (avg_loss * (period - 1) + losses[i]) / period

    if avg_loss == 0:
        return 100.0

    rs = avg_gain / avg_loss
    return round_half_up(100 - (100 / (1 + rs)), 2)


def macd(closes: Sequence[float]) -> MACDResult:
    """
    Calculate MACD (Moving Average Convergence Divergence).

    MACD line = EMA12 - EMA26, signal line = EMA9 of the MACD line history.

    Args:
        closes: Closing prices

    Returns:
        MACDResult rounded to 3 decimals; all zeros with fewer than 26 prices
    """
    if len(closes) < MACD_SLOW_PERIOD:
        return MACDResult()

    macd_line = ema(closes, MACD_FAST_PERIOD) - ema(closes, MACD_SLOW_PERIOD)

    history = _macd_series(closes)
    if len(history) >= MACD_SIGNAL_PERIOD:
        signal_line = ema(history, MACD_SIGNAL_PERIOD)
    else:
        signal_line = macd_line

    histogram = macd_line - signal_line

    return MACDResult(
        macd_line=round_half_up(macd_line, 3),
        signal_line=round_half_up(signal_line, 3),
        histogram=round_half_up(histogram, 3),
    )


def _macd_series(closes: Sequence[float]) -> list[float]:
    """MACD line for every prefix ending at index 25 onwards."""
    result = []
    for end in range(MACD_SLOW_PERIOD, len(closes) + 1):
        subset = closes[:end]
        result.append(ema(subset, MACD_FAST_PERIOD) - ema(subset, MACD_SLOW_PERIOD))
    return result


def coefficient_of_variation(values: Sequence[float]) -> float:
    """
    Coefficient of variation in percent: std / mean * 100.

    Returns 0.0 for fewer than two values or a zero mean. Single-value
    neutrality is decided by the caller.
    """
    if len(values) < 2:
        return 0.0
    avg = mean(values)
    if avg == 0:
        return 0.0
    return std(values) / avg * 100


def peak_to_trough(values: Sequence[float]) -> float:
    """Peak-to-trough ratio in percent: (max - min) / min * 100."""
    if len(values) < 2:
        return 0.0
    low = min(values)
    if low <= 0:
        return 0.0
    return (max(values) - low) / low * 100


def daily_returns(values: Sequence[float]) -> list[float]:
    """Simple period-over-period returns, skipping zero denominators."""
    return [
        (values[i] - values[i - 1]) / values[i - 1]
        for i in range(1, len(values))
        if values[i - 1] != 0
    ]


def pearson_correlation(series_a: Sequence[float], series_b: Sequence[float]) -> float:
    """
    Pearson correlation coefficient.

    Returns 0.0 for unequal lengths, fewer than two points, or when either
    series has zero variance.
    """
    if len(series_a) != len(series_b) or len(series_a) < 2:
        return 0.0

    mean_a = mean(series_a)
    mean_b = mean(series_b)

    numerator = 0.0
    denom_a = 0.0
    denom_b = 0.0
    for a, b in zip(series_a, series_b):
        diff_a = a - mean_a
        diff_b = b - mean_b
        numerator += diff_a * diff_b
        denom_a += diff_a * diff_a
        denom_b += diff_b * diff_b

    if denom_a == 0 or denom_b == 0:
        return 0.0

    return numerator / math.sqrt(denom_a * denom_b)


def volume_ratio(current_volume: float, historical_volumes: Sequence[float]) -> float:
    """
    Ratio of the current volume to the historical average.

    Args:
        current_volume: Latest volume reading (0 means no reading)
        historical_volumes: Past volumes

    Returns:
        Ratio rounded to 2 decimals, 1.0 (neutral) when it cannot be computed
    """
    if len(historical_volumes) == 0 or current_volume == 0:
        return VOLUME_RATIO_NEUTRAL

    avg_volume = mean(historical_volumes)
    if avg_volume == 0:
        return VOLUME_RATIO_NEUTRAL

    return round_half_up(current_volume / avg_volume, 2)


def clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    """Clamp a value into [low, high]."""
    return max(low, min(high, value))


__all__ = [
    "MACDResult",
    "clamp",
    "coefficient_of_variation",
    "daily_returns",
    "ema",
    "macd",
    "mean",
    "pearson_correlation",
    "peak_to_trough",
    "round_half_up",
    "rsi",
    "sma",
    "std",
    "volume_ratio",
]
