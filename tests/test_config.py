"""Tests for settings, scoring configuration and log formatting.

Tests verify:
- Scoring thresholds load from SCORING_* environment variables
- Inconsistent dimension or rebound weights and RSI levels are rejected
- Overrides are validated
- Log records carry the card being scored
- setup_logging installs the configured formatter
"""

from __future__ import annotations

import json
import logging
from unittest.mock import patch

import pytest
from pydantic import ValidationError as PydanticValidationError

from valoris.core.config import Settings
from valoris.core.exceptions import ConfigurationError
from valoris.core.logging import (
    LoggerAdapter,
    StructuredFormatter,
    TextFormatter,
    card_id_var,
    get_logger,
    setup_logging,
)
from valoris.scoring.config import ScoringConfig, ScoringSettings, get_scoring_config


def _record(message: str = "scored") -> logging.LogRecord:
    return logging.LogRecord(
        name="valoris.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=message,
        args=(),
        exc_info=None,
    )


class TestScoringConfig:
    """Tests for ScoringConfig."""

    def test_defaults(self):
        config = ScoringConfig()

        assert config.weights == {"d1": 0.25, "d2": 0.25, "d3": 0.20, "d4": 0.15, "d5": 0.15}
        assert config.rsi_period == 14
        assert config.outlier_z_threshold == 2.0
        config.validate()

    def test_from_settings_matches_defaults(self):
        assert ScoringConfig.from_settings(ScoringSettings()) == ScoringConfig()

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("SCORING_RSI_OVERSOLD", "25")
        monkeypatch.setenv("SCORING_GROWTH_SCALE", "60")

        config = get_scoring_config()

        assert config.rsi_oversold == 25.0
        assert config.growth_scale == 60.0

    def test_environment_weights_must_sum_to_one(self, monkeypatch):
        monkeypatch.setenv("SCORING_WEIGHT_MACRO", "0.5")

        with pytest.raises(ConfigurationError) as exc_info:
            get_scoring_config()

        assert exc_info.value.to_dict()["error"] == "CONFIGURATION_ERROR"
        assert "weights" in exc_info.value.details

    def test_settings_field_bounds(self):
        with pytest.raises(PydanticValidationError):
            ScoringSettings(scoring_weight_volatility=1.5)

    def test_rebond_weights_must_sum_to_one(self, config):
        with pytest.raises(ConfigurationError) as exc_info:
            config.with_overrides(rebond_ml_weight=0.5)

        assert exc_info.value.details["rebond_ml_weight"] == 0.5

    def test_environment_rebond_weights(self, monkeypatch):
        monkeypatch.setenv("SCORING_REBOND_ML_WEIGHT", "0.5")

        with pytest.raises(ConfigurationError):
            get_scoring_config()

    def test_environment_rebond_weights_balanced(self, monkeypatch):
        monkeypatch.setenv("SCORING_REBOND_TECHNICAL_WEIGHT", "0.6")
        monkeypatch.setenv("SCORING_REBOND_ML_WEIGHT", "0.4")

        config = get_scoring_config()

        assert config.rebond_ml_weight == 0.4

    def test_rsi_levels_ordered(self, config):
        with pytest.raises(ConfigurationError):
            config.with_overrides(rsi_oversold=50.0)

    def test_with_overrides(self, config):
        updated = config.with_overrides(momentum_threshold_pct=5.0, growth_scale=None)

        assert updated.momentum_threshold_pct == 5.0
        assert updated.growth_scale == config.growth_scale
        assert config.momentum_threshold_pct == 10.0

    def test_with_no_overrides_returns_self(self, config):
        assert config.with_overrides() is config

    def test_unknown_override(self, config):
        with pytest.raises(ConfigurationError):
            config.with_overrides(rsi_length=21)

    def test_cached(self):
        assert get_scoring_config() is get_scoring_config()


class TestSettings:
    """Tests for application settings."""

    def test_log_level_normalized(self):
        assert Settings(log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level(self):
        with pytest.raises(PydanticValidationError):
            Settings(log_level="verbose")

    def test_invalid_log_format(self):
        with pytest.raises(PydanticValidationError):
            Settings(log_format="xml")

    def test_environment_flags(self):
        assert Settings(environment="development").is_development
        assert Settings().is_production


class TestLogFormatting:
    """Tests for log formatters and card id propagation."""

    def test_structured_includes_card_id(self):
        token = card_id_var.set("sv1-25")
        try:
            payload = json.loads(StructuredFormatter().format(_record()))
        finally:
            card_id_var.reset(token)

        assert payload["card_id"] == "sv1-25"
        assert payload["message"] == "scored"
        assert payload["level"] == "INFO"

    def test_structured_without_card_id(self):
        payload = json.loads(StructuredFormatter().format(_record()))
        assert "card_id" not in payload

    def test_structured_debug_location(self):
        with patch("valoris.core.logging.settings") as mock_settings:
            mock_settings.debug = True
            payload = json.loads(StructuredFormatter().format(_record()))

        assert payload["location"]["line"] == 1

    def test_text_formatter(self):
        token = card_id_var.set("base1-4")
        try:
            line = TextFormatter().format(_record("hello"))
        finally:
            card_id_var.reset(token)

        assert "[base1-4]" in line
        assert line.endswith("valoris.test: hello")

    def test_get_logger_prefix(self):
        assert get_logger("scoring.test").name == "valoris.scoring.test"

    def test_adapter_extra_fields(self):
        adapter = LoggerAdapter(get_logger("test"), {"batch": 3})
        token = card_id_var.set("neo1-9")
        try:
            _, kwargs = adapter.process("msg", {})
        finally:
            card_id_var.reset(token)

        assert kwargs["extra"]["extra_fields"] == {"card_id": "neo1-9", "batch": 3}


class TestSetupLogging:
    """Tests for root logger configuration."""

    @pytest.fixture(autouse=True)
    def _restore_root(self):
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        yield
        for handler in root.handlers[:]:
            root.removeHandler(handler)
        for handler in handlers:
            root.addHandler(handler)
        root.setLevel(level)

    @pytest.mark.parametrize(
        "log_format,formatter",
        [("text", TextFormatter), ("json", StructuredFormatter)],
    )
    def test_formatter_follows_settings(self, log_format, formatter):
        with patch("valoris.core.logging.settings") as mock_settings:
            mock_settings.log_level = "INFO"
            mock_settings.log_format = log_format
            setup_logging()

        root = logging.getLogger()
        assert root.level == logging.INFO
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, formatter)
