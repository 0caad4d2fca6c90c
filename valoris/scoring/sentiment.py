"""D4 sentiment scoring.

Combines social buzz, order-book pressure, search hype and the inherent
popularity of the Pokémon into one sentiment score. High sentiment reads
as speculative pressure.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from valoris.core.technical_utils import clamp, round_half_up
from valoris.domain.market import SocialMentions
from valoris.domain.scores import DimensionScore


# (weighted mentions upper bound, score)
BUZZ_BANDS: tuple[tuple[float, float], ...] = (
    (10, 10.0),
    (50, 25.0),
    (200, 50.0),
    (1000, 75.0),
)
BUZZ_VIRAL_SCORE = 100.0

# (buy/sell ratio upper bound, score)
ORDER_RATIO_BANDS: tuple[tuple[float, float], ...] = (
    (0.5, 10.0),
    (1.0, 30.0),
    (2.0, 50.0),
    (5.0, 75.0),
)
ORDER_RATIO_FOMO_SCORE = 100.0
NO_SELLERS_WITH_BUYERS_SCORE = 100.0
NO_ORDERS_SCORE = 50.0

# (search volume change % upper bound, score)
HYPE_BANDS: tuple[tuple[float, float], ...] = (
    (-20, 10.0),
    (20, 30.0),
    (100, 60.0),
    (300, 85.0),
)
HYPE_VIRAL_SCORE = 100.0

POPULARITY_TIERS: tuple[tuple[tuple[str, ...], float], ...] = (
    (("charizard", "pikachu", "mewtwo", "mew", "gengar", "umbreon", "rayquaza"), 30.0),
    (("eevee", "dragonite", "blastoise", "venusaur", "lugia", "ho-oh", "garchomp", "lucario"), 20.0),
    (("gyarados", "arcanine", "lapras", "snorlax", "espeon", "tyranitar", "salamence"), 10.0),
)

HYPE_RARITIES = ("secret", "rainbow", "ultra", "special art", "illustration rare")
HYPE_RARITY_BONUS = 30.0
GRADED_BONUS = 20.0
GEM_MINT_GRADE = 10
GEM_MINT_BONUS = 20.0
MINT_GRADE = 9
MINT_BONUS = 10.0
INFLUENCER_CAP = 50.0

BASE_POPULARITY = 30.0

BUZZ_WEIGHT = 0.30
ORDER_RATIO_WEIGHT = 0.25
HYPE_WEIGHT = 0.25
POPULARITY_WEIGHT = 0.20


@dataclass
class SentimentScore:
    """D4 components and total."""

    social_buzz_score: float
    buyer_seller_score: float
    hype_index_score: float
    popularity_bonus: float
    influencer_score: float
    d4_total: float

    def to_dict(self) -> dict:
        return {
            "social_buzz_score": self.social_buzz_score,
            "buyer_seller_score": self.buyer_seller_score,
            "hype_index_score": self.hype_index_score,
            "popularity_bonus": self.popularity_bonus,
            "influencer_score": self.influencer_score,
            "d4_total": self.d4_total,
        }

    def to_dimension(self) -> DimensionScore:
        return DimensionScore(
            value=self.d4_total,
            sub_metrics={
                "social_buzz": self.social_buzz_score,
                "buyer_seller": self.buyer_seller_score,
                "hype_index": self.hype_index_score,
                "popularity_bonus": self.popularity_bonus,
                "influencer": self.influencer_score,
            },
        )


def _band(value: float, bands: tuple[tuple[float, float], ...], top: float) -> float:
    for upper, score in bands:
        if value < upper:
            return score
    return top


def get_social_buzz_score(mentions: SocialMentions) -> float:
    """Band the platform-weighted mention count."""
    return _band(mentions.weighted_total(), BUZZ_BANDS, BUZZ_VIRAL_SCORE)


def get_buyer_seller_ratio_score(buy_orders: float, sell_orders: float) -> float:
    """Band buyer pressure; an empty ask side is full pressure if anyone bids."""
    if sell_orders == 0:
        return NO_SELLERS_WITH_BUYERS_SCORE if buy_orders > 0 else NO_ORDERS_SCORE
    return _band(buy_orders / sell_orders, ORDER_RATIO_BANDS, ORDER_RATIO_FOMO_SCORE)


def get_hype_index_score(search_volume_change: float) -> float:
    """Band the week-over-week search volume change (%)."""
    return _band(search_volume_change, HYPE_BANDS, HYPE_VIRAL_SCORE)


def get_inherent_popularity_bonus(pokemon_name: str) -> float:
    """Bonus for Pokémon that draw collectors regardless of the card."""
    name = pokemon_name.lower()
    for names, bonus in POPULARITY_TIERS:
        if any(p in name for p in names):
            return bonus
    return 0.0


def get_influencer_hype_score(
    rarity: str | None,
    is_graded: bool = False,
    graded_score: float = 0,
) -> float:
    """Attention from content creators: flashy rarities and high grades."""
    score = 0.0

    if rarity and any(r in rarity.lower() for r in HYPE_RARITIES):
        score += HYPE_RARITY_BONUS

    if is_graded:
        score += GRADED_BONUS
        if graded_score >= GEM_MINT_GRADE:
            score += GEM_MINT_BONUS
        elif graded_score >= MINT_GRADE:
            score += MINT_BONUS

    return min(INFLUENCER_CAP, score)


def calculate_d4_score(
    social_mentions: SocialMentions | Mapping[str, int] | None = None,
    buy_orders: float = 1,
    sell_orders: float = 1,
    search_volume_change: float = 0,
    pokemon_name: str = "",
    rarity: str | None = None,
    is_graded: bool = False,
    graded_score: float = 0,
) -> SentimentScore:
    """
    Compute the D4 sentiment score.

    d4 = 0.3 * buzz + 0.25 * order ratio + 0.25 * hype + 0.2 * popularity,
    where popularity = min(100, 30 + name bonus + influencer score).

    Args:
        social_mentions: Mentions per platform (missing platforms count 0)
        buy_orders: Open buy orders
        sell_orders: Open sell orders
        search_volume_change: Search volume change (%)
        pokemon_name: Pokémon featured on the card
        rarity: Printed rarity label
        is_graded: Whether the card is graded
        graded_score: Grade (e.g. 9, 9.5, 10)

    Returns:
        SentimentScore with every component and the rounded total
    """
    if social_mentions is None:
        mentions = SocialMentions()
    elif isinstance(social_mentions, SocialMentions):
        mentions = social_mentions
    else:
        mentions = SocialMentions.model_validate(dict(social_mentions))

    buzz = get_social_buzz_score(mentions)
    ratio = get_buyer_seller_ratio_score(buy_orders, sell_orders)
    hype = get_hype_index_score(search_volume_change)
    popularity_bonus = get_inherent_popularity_bonus(pokemon_name)
    influencer = get_influencer_hype_score(rarity, is_graded, graded_score)

    combined_popularity = min(100.0, BASE_POPULARITY + popularity_bonus + influencer)

    total = round_half_up(
        BUZZ_WEIGHT * buzz
        + ORDER_RATIO_WEIGHT * ratio
        + HYPE_WEIGHT * hype
        + POPULARITY_WEIGHT * combined_popularity
    )

    return SentimentScore(
        social_buzz_score=buzz,
        buyer_seller_score=ratio,
        hype_index_score=hype,
        popularity_bonus=popularity_bonus,
        influencer_score=influencer,
        d4_total=clamp(total),
    )
