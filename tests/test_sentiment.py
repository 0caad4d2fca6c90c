"""Tests for D4 sentiment scoring."""

from __future__ import annotations

import pytest

from valoris.domain import SocialMentions
from valoris.scoring.sentiment import (
    calculate_d4_score,
    get_buyer_seller_ratio_score,
    get_hype_index_score,
    get_influencer_hype_score,
    get_inherent_popularity_bonus,
    get_social_buzz_score,
)


class TestSocialBuzz:
    """Tests for the weighted mention bands."""

    @pytest.mark.parametrize(
        "mentions,expected",
        [
            ({}, 10.0),
            ({"reddit": 10}, 25.0),
            ({"youtube": 40}, 50.0),
            ({"twitter": 500}, 75.0),
            ({"reddit": 1000}, 100.0),
        ],
    )
    def test_bands(self, mentions, expected):
        assert get_social_buzz_score(SocialMentions(**mentions)) == expected

    def test_platform_weights(self):
        """Eight YouTube mentions outweigh ten on Discord."""
        assert SocialMentions(youtube=8).weighted_total() == pytest.approx(12.0)
        assert SocialMentions(discord=10).weighted_total() == pytest.approx(8.0)


class TestBuyerSellerRatio:
    """Tests for order-book pressure."""

    @pytest.mark.parametrize(
        "buy,sell,expected",
        [
            (1, 4, 10.0),
            (3, 4, 30.0),
            (1, 1, 50.0),
            (3, 1, 75.0),
            (5, 1, 100.0),
        ],
    )
    def test_bands(self, buy, sell, expected):
        assert get_buyer_seller_ratio_score(buy, sell) == expected

    def test_no_sellers(self):
        assert get_buyer_seller_ratio_score(3, 0) == 100.0
        assert get_buyer_seller_ratio_score(0, 0) == 50.0


class TestHypeIndex:
    @pytest.mark.parametrize(
        "change,expected",
        [(-50, 10.0), (-20, 30.0), (0, 30.0), (50, 60.0), (200, 85.0), (300, 100.0)],
    )
    def test_bands(self, change, expected):
        assert get_hype_index_score(change) == expected


class TestPopularity:
    """Tests for the popularity and influencer components."""

    def test_tiers(self):
        assert get_inherent_popularity_bonus("Charizard ex") == 30.0
        assert get_inherent_popularity_bonus("Lugia V") == 20.0
        assert get_inherent_popularity_bonus("Snorlax") == 10.0
        assert get_inherent_popularity_bonus("Bidoof") == 0.0

    def test_influencer_rarity(self):
        assert get_influencer_hype_score("Special Art Rare") == 30.0
        assert get_influencer_hype_score("Common") == 0.0
        assert get_influencer_hype_score(None) == 0.0

    def test_influencer_grades(self):
        assert get_influencer_hype_score(None, is_graded=True, graded_score=8) == 20.0
        assert get_influencer_hype_score(None, is_graded=True, graded_score=9.5) == 30.0
        assert get_influencer_hype_score(None, is_graded=True, graded_score=10) == 40.0

    def test_influencer_capped(self):
        assert get_influencer_hype_score("Rare Rainbow", is_graded=True, graded_score=10) == 50.0


class TestCalculateD4Score:
    """Tests for calculate_d4_score."""

    def test_defaults(self):
        """No signals: buzz 10, ratio 50, hype 30, popularity 30."""
        result = calculate_d4_score()

        assert result.social_buzz_score == 10.0
        assert result.buyer_seller_score == 50.0
        assert result.hype_index_score == 30.0
        assert result.d4_total == 29.0

    def test_hyped_card(self):
        result = calculate_d4_score(
            social_mentions={"reddit": 100, "twitter": 100},
            buy_orders=10,
            sell_orders=2,
            search_volume_change=150,
            pokemon_name="Charizard",
            rarity="Special Art Rare",
            is_graded=True,
            graded_score=10,
        )

        assert result.social_buzz_score == 75.0
        assert result.buyer_seller_score == 100.0
        assert result.hype_index_score == 85.0
        assert result.influencer_score == 50.0
        # 22.5 + 25 + 21.25 + 20 = 88.75
        assert result.d4_total == 89.0

    def test_mapping_with_missing_platforms(self):
        from_mapping = calculate_d4_score(social_mentions={"youtube": 40})
        from_model = calculate_d4_score(social_mentions=SocialMentions(youtube=40))

        assert from_mapping.d4_total == from_model.d4_total

    def test_total_is_integer_and_bounded(self):
        result = calculate_d4_score(buy_orders=0, sell_orders=5, search_volume_change=-90)

        assert 0 <= result.d4_total <= 100
        assert result.d4_total == int(result.d4_total)

    def test_to_dimension(self):
        dim = calculate_d4_score(pokemon_name="Pikachu").to_dimension()

        assert dim.value == calculate_d4_score(pokemon_name="Pikachu").d4_total
        assert dim.sub_metrics["popularity_bonus"] == 30.0
