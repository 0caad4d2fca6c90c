"""End-to-end tests for the card scoring service."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from valoris.core.logging import card_id_var
from valoris.domain import PricePoint, PSAPopulation
from valoris.schemas import CardAnalysis, CardScoringInput
from valoris.scoring.service import CardScoringService, get_card_scoring_service


START = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _history(values: list[float]) -> list[PricePoint]:
    return [PricePoint(date=START + timedelta(days=i), value=v) for i, v in enumerate(values)]


def _input(values: list[float], **overrides) -> CardScoringInput:
    data = {
        "card_id": "base1-4",
        "card_name": "Charizard",
        "set_id": "base1",
        "rarity": "Rare Holo",
        "price_history": _history(values),
    }
    data.update(overrides)
    return CardScoringInput(**data)


class _CardIdCapture(logging.Handler):
    def __init__(self):
        super().__init__()
        self.card_ids: list = []

    def emit(self, record):
        self.card_ids.append(card_id_var.get())


class TestCardScoringService:
    """Tests for CardScoringService.analyze."""

    def test_full_analysis(self):
        result = CardScoringService().analyze(_input([100.0 + i for i in range(60)]))

        assert isinstance(result, CardAnalysis)
        assert result.card_id == "base1-4"
        assert result.is_vintage is True
        assert result.scarcity_rating == "Very Rare"
        assert result.price_points_used == 60
        assert result.outliers_removed == []
        assert result.suspicious_last_change is False
        assert 0 <= result.speculation.total <= 100
        assert result.speculation.d3.sub_metrics["rarity_score"] == 40.0
        assert result.price_statistics.current_price == 159.0
        assert result.recommendation.risk_level in {"Low", "Moderate", "High"}

    def test_history_order_does_not_matter(self):
        values = [100.0 + (i % 7) for i in range(40)]
        shuffled = list(reversed(_history(values)))

        ordered = CardScoringService().analyze(_input(values))
        reversed_input = CardScoringService().analyze(_input([], price_history=shuffled))

        assert ordered.speculation.total == reversed_input.speculation.total

    def test_outliers_are_dropped(self):
        result = CardScoringService().analyze(_input([100, 102, 101, 103, 500, 102, 101]))

        assert result.outliers_removed == [500.0]
        assert result.price_points_used == 6
        assert result.price_statistics.max_30d == 103.0

    def test_suspicious_last_move_is_kept(self, caplog):
        values = [100.0] * 10 + [300.0]
        with caplog.at_level(logging.WARNING, logger="valoris.scoring.service"):
            result = CardScoringService().analyze(_input(values))

        assert result.suspicious_last_change is True
        assert result.outliers_removed == []
        assert result.price_statistics.current_price == 300.0
        assert any("Suspicious" in r.getMessage() for r in caplog.records)

    def test_receded_pump_is_reported(self):
        """Pump detection sees the spike even though scoring drops it."""
        result = CardScoringService().analyze(_input([10, 10, 10, 10, 60, 12, 11, 10, 10, 10]))

        assert result.outliers_removed == [60.0]
        assert result.pump.has_pump is True
        assert result.pump.pump_magnitude_pct == 292
        assert result.pump.days_since_peak == 5

    def test_compounding_trend_keeps_latest_prices(self):
        values = [100 * 1.05**i for i in range(60)]
        result = CardScoringService().analyze(_input(values))

        assert result.outliers_removed == []
        assert result.price_points_used == 60
        assert result.price_statistics.current_price == pytest.approx(100 * 1.05**59, abs=0.01)
        assert result.recommendation.votes.breakdown["momentum"] == 1

    def test_mixed_naive_and_aware_history(self):
        history = [
            PricePoint(date=START, value=100.0),
            PricePoint(date=datetime(2024, 1, 3), value=102.0),
            PricePoint(date=START + timedelta(days=1), value=101.0),
        ]
        result = CardScoringService().analyze(_input([], price_history=history))

        assert result.price_points_used == 3
        assert result.price_statistics.current_price == 102.0

    def test_negative_volumes_rejected(self):
        with pytest.raises(ValidationError):
            _input([100.0, 101.0], current_volume=5, historical_volumes=[-1, -2])

    def test_explicit_population_and_vintage_flag(self):
        population = PSAPopulation(
            card_name="Charizard",
            set_name="base1",
            psa10=20000,
            total_graded=100000,
            psa10_percentage=20.0,
        )
        result = CardScoringService().analyze(
            _input([50.0, 51.0, 52.0], psa_population=population, is_vintage=False)
        )

        assert result.is_vintage is False
        assert result.scarcity_rating == "Mass Produced"
        assert result.speculation.d3.value == 95.0

    def test_external_signals(self):
        result = CardScoringService().analyze(
            _input(
                [100.0 + i for i in range(30)],
                ai_verdict="Achat fort",
                ai_scores={"volatility": 50, "growth": 50, "scarcity": 50, "sentiment": 50, "macro": 50},
                ml_score=80.0,
            )
        )

        assert result.recommendation.votes.breakdown["verdict"] == 2
        # base 50 + ai 25 + price 10, plus 15 unless the rebound lands exactly on 50
        assert result.recommendation.confidence >= 85
        assert result.rebond.ml_contribution == 80.0
        assert result.rebond.signals.ml == "bullish"

    def test_empty_history(self):
        result = CardScoringService().analyze(_input([]))

        assert result.price_points_used == 0
        assert result.price_statistics.current_price is None
        assert result.technicals.rsi14 == 50.0

    def test_logs_carry_card_id(self):
        capture = _CardIdCapture()
        logger = logging.getLogger("valoris.scoring.service")
        logger.addHandler(capture)
        previous = logger.level
        logger.setLevel(logging.INFO)
        try:
            CardScoringService().analyze(_input([100.0, 101.0, 102.0]))
        finally:
            logger.removeHandler(capture)
            logger.setLevel(previous)

        assert capture.card_ids
        assert set(capture.card_ids) == {"base1-4"}
        assert card_id_var.get() is None

    def test_custom_config(self, config):
        d3_only = config.with_overrides(
            weight_volatility=0.0,
            weight_growth=0.0,
            weight_scarcity=1.0,
            weight_sentiment=0.0,
            weight_macro=0.0,
        )
        result = CardScoringService(config=d3_only).analyze(_input([100.0, 101.0]))

        assert result.speculation.total == pytest.approx(result.speculation.d3.value)


class TestServiceSingleton:
    def test_singleton(self):
        assert get_card_scoring_service() is get_card_scoring_service()
