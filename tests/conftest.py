"""Pytest configuration and fixtures."""

from __future__ import annotations

from datetime import datetime, timezone

import numpy as np
import pytest

from valoris.domain import PriceSeries
from valoris.scoring.config import ScoringConfig, get_scoring_config


@pytest.fixture(autouse=True)
def _reset_scoring_config():
    """Each test sees scoring config freshly built from the environment."""
    get_scoring_config.cache_clear()
    yield
    get_scoring_config.cache_clear()


@pytest.fixture
def config() -> ScoringConfig:
    """Default scoring configuration."""
    return ScoringConfig()


@pytest.fixture
def flat_prices() -> list[float]:
    """Near-flat price history."""
    return [100.0, 102.0, 101.0, 103.0, 102.0, 101.0, 100.0]


@pytest.fixture
def erratic_prices() -> list[float]:
    """Wildly swinging price history."""
    return [100.0, 150.0, 80.0, 200.0, 60.0, 180.0, 90.0]


@pytest.fixture
def random_walk() -> list[float]:
    """Seeded 120-day random walk around 50 EUR."""
    np.random.seed(42)
    returns = np.random.normal(0.001, 0.02, 120)
    return list(50.0 * np.cumprod(1 + returns))


@pytest.fixture
def rising_series() -> PriceSeries:
    """60 days of steady appreciation."""
    start = datetime(2024, 1, 1, tzinfo=timezone.utc)
    return PriceSeries.from_values([100.0 + i for i in range(60)], start=start)
