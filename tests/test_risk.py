"""Tests for risk metrics and price statistics."""

from __future__ import annotations

import pytest

from valoris.scoring.risk import (
    calculate_max_drawdown,
    calculate_sharpe_ratio,
    compute_price_statistics,
)


class TestSharpeRatio:
    def test_empty(self):
        assert calculate_sharpe_ratio([]) == 0.0

    def test_zero_variance(self):
        assert calculate_sharpe_ratio([0.01] * 5) == 0.0

    def test_value(self):
        # mean 0.2, population std 0.1
        assert calculate_sharpe_ratio([0.1, 0.3]) == pytest.approx(1.8)

    def test_custom_risk_free_rate(self):
        assert calculate_sharpe_ratio([0.1, 0.3], risk_free_rate=0.0) == pytest.approx(2.0)


class TestMaxDrawdown:
    def test_drawdown_is_negative(self):
        assert calculate_max_drawdown([100, 120, 60, 90, 130]) == pytest.approx(-50.0)

    def test_rising_series(self):
        assert calculate_max_drawdown([1, 2, 3, 4]) == 0.0

    def test_empty(self):
        assert calculate_max_drawdown([]) == 0.0

    def test_accepts_price_series(self, rising_series):
        assert calculate_max_drawdown(rising_series) == 0.0


class TestPriceStatistics:
    """Tests for compute_price_statistics."""

    def test_windows(self):
        values = [float(100 + i) for i in range(100)]
        stats = compute_price_statistics(values)

        assert stats.current_price == 199.0
        assert stats.min_30d == 170.0
        assert stats.max_30d == 199.0
        assert stats.avg_30d == 184.5
        assert stats.change_30d_pct == pytest.approx(17.06)
        assert stats.min_90d == 110.0
        assert stats.avg_90d == 154.5
        assert stats.change_90d_pct == pytest.approx(80.91)
        assert stats.volatility > 0

    def test_empty(self):
        stats = compute_price_statistics([])

        assert stats.current_price is None
        assert all(v is None for v in stats.to_dict().values())

    def test_single_point_has_no_change(self):
        stats = compute_price_statistics([42.0])

        assert stats.current_price == 42.0
        assert stats.change_30d_pct is None
        assert stats.volatility == 0.0
