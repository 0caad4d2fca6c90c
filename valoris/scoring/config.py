"""Scoring configuration with thresholds and weights.

All thresholds are loaded from environment (``SCORING_*``) with the
defaults the dashboard has always used.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from valoris.core.exceptions import ConfigurationError


WEIGHT_TOLERANCE = 1e-6


class ScoringSettings(BaseSettings):
    """Scoring settings from environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Dimension weights (must sum to 1.0)
    scoring_weight_volatility: float = Field(default=0.25, ge=0, le=1, description="D1 weight")
    scoring_weight_growth: float = Field(default=0.25, ge=0, le=1, description="D2 weight")
    scoring_weight_scarcity: float = Field(default=0.20, ge=0, le=1, description="D3 weight")
    scoring_weight_sentiment: float = Field(default=0.15, ge=0, le=1, description="D4 weight")
    scoring_weight_macro: float = Field(default=0.15, ge=0, le=1, description="D5 weight")

    # Growth curve
    scoring_growth_scale: float = Field(
        default=40.0, gt=0, description="Return (%) at which growth reaches ~88"
    )

    # Technical indicators
    scoring_rsi_period: int = Field(default=14, ge=2, le=100, description="RSI lookback")
    scoring_rsi_oversold: float = Field(default=30.0, ge=0, le=100, description="RSI oversold level")
    scoring_rsi_weak: float = Field(default=40.0, ge=0, le=100, description="RSI weak level")
    scoring_rsi_overbought: float = Field(default=70.0, ge=0, le=100, description="RSI overbought level")
    scoring_volume_spike_ratio: float = Field(default=2.0, gt=0, description="Volume spike ratio")
    scoring_volume_low_ratio: float = Field(default=0.5, gt=0, description="Low volume ratio")

    # Rebound ensemble
    scoring_rebond_technical_weight: float = Field(
        default=0.7, ge=0, le=1, description="Technical share when an ML score is present"
    )
    scoring_rebond_ml_weight: float = Field(
        default=0.3, ge=0, le=1, description="ML share when an ML score is present"
    )

    # Anomaly detection
    scoring_outlier_z_threshold: float = Field(
        default=2.0, gt=0, description="Standard deviations before a price is an outlier"
    )
    scoring_outlier_min_points: int = Field(
        default=5, ge=3, description="Minimum points for outlier detection"
    )
    scoring_outlier_window: int = Field(
        default=5, ge=2, description="Neighbours on each side a price is judged against"
    )
    scoring_suspicious_change_ratio: float = Field(
        default=0.5, gt=0, description="Relative move flagged as suspicious (50%)"
    )
    scoring_pump_ratio_threshold: float = Field(
        default=1.0, gt=0, description="max/mean - 1 above which a peak is a pump"
    )
    scoring_pump_recency_points: int = Field(
        default=3, ge=0, description="Peak must be older than this many points"
    )
    scoring_pump_window: int = Field(default=30, ge=7, description="Pump detection window")
    scoring_pump_min_points: int = Field(default=7, ge=2, description="Minimum points for pump detection")

    # Hybrid recommendation
    scoring_risk_low_threshold: float = Field(default=70.0, ge=0, le=100, description="D1 for low risk")
    scoring_risk_moderate_threshold: float = Field(
        default=40.0, ge=0, le=100, description="D1 for moderate risk"
    )
    scoring_momentum_threshold_pct: float = Field(
        default=10.0, gt=0, description="Price change (%) counted as momentum"
    )


@dataclass
class ScoringConfig:
    """Complete scoring configuration.

    Built from settings, or constructed directly in tests and batch jobs.
    """

    # Weights (must sum to 1.0)
    weight_volatility: float = 0.25
    weight_growth: float = 0.25
    weight_scarcity: float = 0.20
    weight_sentiment: float = 0.15
    weight_macro: float = 0.15

    # Growth
    growth_scale: float = 40.0

    # Technicals
    rsi_period: int = 14
    rsi_oversold: float = 30.0
    rsi_weak: float = 40.0
    rsi_overbought: float = 70.0
    volume_spike_ratio: float = 2.0
    volume_low_ratio: float = 0.5

    # Rebound ensemble
    rebond_technical_weight: float = 0.7
    rebond_ml_weight: float = 0.3

    # Anomalies
    outlier_z_threshold: float = 2.0
    outlier_min_points: int = 5
    outlier_window: int = 5
    suspicious_change_ratio: float = 0.5
    pump_ratio_threshold: float = 1.0
    pump_recency_points: int = 3
    pump_window: int = 30
    pump_min_points: int = 7

    # Hybrid recommendation
    risk_low_threshold: float = 70.0
    risk_moderate_threshold: float = 40.0
    momentum_threshold_pct: float = 10.0

    @classmethod
    def from_settings(cls, settings: ScoringSettings | None = None) -> ScoringConfig:
        """Create config from settings."""
        if settings is None:
            settings = ScoringSettings()

        config = cls(
            **{f.name: getattr(settings, f"scoring_{f.name}") for f in fields(cls)}
        )
        config.validate()
        return config

    @property
    def weights(self) -> dict[str, float]:
        return {
            "d1": self.weight_volatility,
            "d2": self.weight_growth,
            "d3": self.weight_scarcity,
            "d4": self.weight_sentiment,
            "d5": self.weight_macro,
        }

    def validate(self) -> None:
        """Raise ConfigurationError on weights not summing to 1 or misordered RSI levels."""
        total = sum(self.weights.values())
        if abs(total - 1.0) > WEIGHT_TOLERANCE:
            raise ConfigurationError(
                f"Dimension weights must sum to 1.0, got {total:.4f}",
                details={"weights": self.weights},
            )
        rebond_total = self.rebond_technical_weight + self.rebond_ml_weight
        if abs(rebond_total - 1.0) > WEIGHT_TOLERANCE:
            raise ConfigurationError(
                f"Rebound weights must sum to 1.0, got {rebond_total:.4f}",
                details={
                    "rebond_technical_weight": self.rebond_technical_weight,
                    "rebond_ml_weight": self.rebond_ml_weight,
                },
            )
        if self.rsi_oversold > self.rsi_weak:
            raise ConfigurationError(
                "RSI oversold level must not exceed the weak level",
                details={"rsi_oversold": self.rsi_oversold, "rsi_weak": self.rsi_weak},
            )

    def with_overrides(self, **overrides) -> ScoringConfig:
        """Return a new, validated config with the given fields replaced."""
        overrides = {k: v for k, v in overrides.items() if v is not None}
        if not overrides:
            return self
        unknown = set(overrides) - {f.name for f in fields(self)}
        if unknown:
            raise ConfigurationError(
                f"Unknown scoring option(s): {', '.join(sorted(unknown))}"
            )
        config = replace(self, **overrides)
        config.validate()
        return config


@lru_cache(maxsize=1)
def get_scoring_config() -> ScoringConfig:
    """Get cached scoring configuration from settings."""
    return ScoringConfig.from_settings()
