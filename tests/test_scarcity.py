"""Tests for D3 scarcity scoring."""

from __future__ import annotations

import pytest

from valoris.domain import PSAPopulation
from valoris.scoring.scarcity import (
    EstimatedPopulationProvider,
    ScarcityRating,
    compute_scarcity_score,
    estimate_set_year,
    get_rarity_score,
    get_scarcity_score,
    is_vintage_set,
)


def _population(psa10: int, percentage: float) -> PSAPopulation:
    return PSAPopulation(
        card_name="Test",
        set_name="test",
        psa10=psa10,
        total_graded=1000,
        psa10_percentage=percentage,
    )


class TestComputeScarcityScore:
    """Tests for the population bands."""

    @pytest.mark.parametrize(
        "psa10,expected_score,expected_rating",
        [
            (50, 5.0, ScarcityRating.ULTRA_RARE),
            (300, 15.0, ScarcityRating.VERY_RARE),
            (1500, 30.0, ScarcityRating.RARE),
            (5000, 60.0, ScarcityRating.COMMON),
            (20000, 85.0, ScarcityRating.MASS_PRODUCED),
        ],
    )
    def test_population_bands(self, psa10, expected_score, expected_rating):
        """Neutral PSA 10 share (10%) leaves the band score unchanged."""
        result = compute_scarcity_score(_population(psa10, 10.0))

        assert result.d3_score == expected_score
        assert result.scarcity_rating == expected_rating

    def test_band_edge_is_exclusive(self):
        assert compute_scarcity_score(_population(100, 10.0)).scarcity_rating == ScarcityRating.VERY_RARE

    def test_easy_gem_penalty(self):
        assert compute_scarcity_score(_population(5000, 35.0)).d3_score == 80.0
        assert compute_scarcity_score(_population(5000, 20.0)).d3_score == 70.0

    def test_hard_grade_bonus(self):
        assert compute_scarcity_score(_population(5000, 2.0)).d3_score == 50.0

    def test_vintage_reduction(self):
        assert compute_scarcity_score(_population(5000, 10.0), is_vintage=True).d3_score == 40.0

    def test_clamped_at_zero(self):
        """Negative intermediate sums clamp to 0."""
        result = compute_scarcity_score(_population(50, 1.0), is_vintage=True)
        assert result.d3_score == 0.0

    def test_clamped_at_hundred(self):
        assert compute_scarcity_score(_population(50000, 90.0)).d3_score == 100.0


class TestEstimatedPopulationProvider:
    """Tests for population lookup and estimation."""

    def test_known_card(self):
        pop = EstimatedPopulationProvider().get_population("Charizard", "base1")

        assert pop.psa10 == 121
        assert pop.psa9 == 2500
        assert pop.psa8 == 1250
        assert pop.psa7 == 750
        assert pop.total_graded == 15000
        assert pop.psa10_percentage == pytest.approx(121 / 15000 * 100)

    def test_modern_estimate(self):
        pop = EstimatedPopulationProvider().get_population("Sprigatito", "sv1")

        assert pop.total_graded == 10000
        assert pop.psa10 == 1500
        assert pop.psa10_percentage == pytest.approx(15.0)

    def test_vintage_estimate(self):
        pop = EstimatedPopulationProvider().get_population("Typhlosion", "neo1")

        assert pop.total_graded == 5000
        assert pop.psa10 == 50
        assert pop.psa10_percentage == pytest.approx(1.0)

    def test_rarity_and_japanese_reductions(self):
        pop = EstimatedPopulationProvider().get_population("Mew", "sv4a-jp", rarity="Special Art rare")

        # 10000 * 0.5 = 5000, then * 0.7
        assert pop.total_graded == 3500
        assert pop.psa10 == 525

    def test_rarity_match_is_case_sensitive(self):
        pop = EstimatedPopulationProvider().get_population("Mew", "sv4", rarity="Rare Holo")
        assert pop.total_graded == 10000

    def test_custom_table(self):
        provider = EstimatedPopulationProvider({"mew-promo": {"psa10": 10, "psa9": 20, "total_graded": 40}})
        assert provider.get_population("Mew", "promo").psa10 == 10


class TestGetScarcityScore:
    """Tests for get_scarcity_score."""

    def test_charizard_base1(self):
        result = get_scarcity_score("Charizard", "base1", is_vintage=True)

        assert result.scarcity_rating == ScarcityRating.VERY_RARE
        # 15 - 10 (hard grade) - 20 (vintage)
        assert result.d3_score == 0.0

    def test_modern_mass_produced(self):
        result = get_scarcity_score("Charizard", "swsh")

        assert result.scarcity_rating == ScarcityRating.MASS_PRODUCED
        # 15000 / 60000 = 25% -> +10
        assert result.d3_score == 95.0

    def test_injected_provider(self):
        class FixedProvider:
            def get_population(self, card_name, set_id, rarity=None):
                return _population(42, 10.0)

        result = get_scarcity_score("Anything", "x", provider=FixedProvider())
        assert result.scarcity_rating == ScarcityRating.ULTRA_RARE

    def test_to_dimension(self):
        dim = get_scarcity_score("Charizard", "swsh").to_dimension(rarity_score=68.0)

        assert dim.value == 95.0
        assert dim.sub_metrics["rarity_score"] == 68.0
        assert dim.sub_metrics["psa10"] == 15000


class TestRarityScore:
    """Tests for get_rarity_score."""

    def test_unknown(self):
        assert get_rarity_score(None) == 30.0
        assert get_rarity_score("") == 30.0
        assert get_rarity_score("Promo") == 30.0

    def test_exact_match(self):
        assert get_rarity_score("Rare Holo") == 40.0
        assert get_rarity_score("Special Art Rare") == 70.0

    def test_gold_star(self):
        assert get_rarity_score("Rare Holo Star") == 90.0

    def test_vstar_is_not_gold_star(self):
        assert get_rarity_score("rare holo vstar") == 55.0

    def test_partial_matches(self):
        assert get_rarity_score("Rare Shining") == 85.0
        assert get_rarity_score("Rare Holo EX") == 80.0
        assert get_rarity_score("rare secret gold") == 75.0
        assert get_rarity_score("holo rare") == 40.0


class TestSetYear:
    """Tests for estimate_set_year and is_vintage_set."""

    @pytest.mark.parametrize(
        "set_id,year",
        [
            ("sv3pt5", 2023),
            ("swsh12", 2020),
            ("sm115", 2017),
            ("xy12", 2014),
            ("ex16", 2003),
            ("base1", 1999),
            ("base4", 2000),
            ("base6", 2001),
            ("neo4", 2000),
            ("gym2", 2000),
            ("cel25", 2021),
            ("unknown", None),
        ],
    )
    def test_years(self, set_id, year):
        assert estimate_set_year(set_id) == year

    def test_vintage(self):
        assert is_vintage_set("base1")
        assert is_vintage_set("neo2")
        assert not is_vintage_set("ex1")
        assert not is_vintage_set("sv1")
        assert not is_vintage_set("mystery")
