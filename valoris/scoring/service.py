"""Card scoring service.

Runs the full scoring pipeline for one card:
- Price quality gate (outliers, suspicious last move, pump)
- Dimensions D1..D5 and the speculation score
- Technical indicators and the rebound score
- Price statistics and the hybrid recommendation

Pure and synchronous: inputs must be fully resolved before calling.
"""

from __future__ import annotations

from typing import Optional

from valoris.core.logging import card_id_var, get_logger
from valoris.core.technical_utils import round_half_up
from valoris.domain.price import PriceSeries
from valoris.schemas.scoring import CardAnalysis, CardScoringInput
from valoris.validation.prices import (
    detect_local_outliers,
    detect_pump,
    is_suspicious_price_change,
)

from .config import ScoringConfig, get_scoring_config
from .growth import compute_growth_dimension
from .macro import get_macro_score_from_snapshot
from .recommendation import compute_hybrid_recommendation, parse_verdict
from .risk import compute_price_statistics
from .scarcity import (
    PopulationProvider,
    compute_scarcity_score,
    get_rarity_score,
    get_scarcity_score,
    is_vintage_set,
)
from .sentiment import calculate_d4_score
from .speculation import compute_speculation_score
from .technicals import calculate_rebond_score, calculate_technical_indicators
from .volatility import compute_volatility_dimension


logger = get_logger("scoring.service")


class CardScoringService:
    """Scores cards with a fixed configuration and population source."""

    def __init__(
        self,
        config: Optional[ScoringConfig] = None,
        population_provider: Optional[PopulationProvider] = None,
    ):
        self.config = config or get_scoring_config()
        self.population_provider = population_provider

    def analyze(self, data: CardScoringInput) -> CardAnalysis:
        """Score one card. Every record logged meanwhile carries its id."""
        token = card_id_var.set(data.card_id)
        try:
            return self._analyze(data)
        finally:
            card_id_var.reset(token)

    def _clean_prices(self, values: list[float]) -> tuple[list[float], list[float]]:
        flagged = detect_local_outliers(values, self.config)
        if not flagged:
            return values, []

        outliers = [values[i] for i in flagged]
        logger.warning(f"Dropping {len(outliers)} outlier price(s): {outliers}")
        rejected = set(flagged)
        return [v for i, v in enumerate(values) if i not in rejected], outliers

    def _analyze(self, data: CardScoringInput) -> CardAnalysis:
        config = self.config

        raw = PriceSeries(points=list(data.price_history)).values()
        values, outliers = self._clean_prices(raw)

        suspicious = len(raw) >= 2 and is_suspicious_price_change(raw[-2], raw[-1], config)
        if suspicious:
            logger.warning(f"Suspicious last price move: {raw[-2]} -> {raw[-1]}")

        pump = detect_pump(raw, config)
        is_vintage = data.is_vintage if data.is_vintage is not None else is_vintage_set(data.set_id)

        # Dimensions
        d1 = compute_volatility_dimension(values)
        d2 = compute_growth_dimension(values, data.btc_prices, is_vintage, config)

        if data.psa_population is not None:
            scarcity = compute_scarcity_score(data.psa_population, is_vintage)
        else:
            scarcity = get_scarcity_score(
                data.card_name,
                data.set_id,
                data.rarity,
                is_vintage,
                provider=self.population_provider,
            )
        d3 = scarcity.to_dimension(get_rarity_score(data.rarity))

        sentiment = calculate_d4_score(
            data.social_mentions,
            buy_orders=data.buy_orders,
            sell_orders=data.sell_orders,
            search_volume_change=data.search_volume_change,
            pokemon_name=data.pokemon_name or data.card_name,
            rarity=data.rarity,
            is_graded=data.is_graded,
            graded_score=data.graded_score,
        )
        d4 = sentiment.to_dimension()

        d5 = get_macro_score_from_snapshot(data.macro).to_dimension()

        speculation = compute_speculation_score(d1, d2, d3, d4, d5, config)

        # Technicals
        indicators = calculate_technical_indicators(
            values,
            current_volume=data.current_volume,
            historical_volumes=data.historical_volumes,
            ml_score=data.ml_score,
            config=config,
        )
        rebond = calculate_rebond_score(indicators, config)

        stats = compute_price_statistics(values)

        hybrid = compute_hybrid_recommendation(
            speculation_score=round_half_up(speculation.total),
            d1_value=d1.value,
            price_change_pct=stats.change_30d_pct or 0.0,
            rebond_score=rebond.score,
            verdict=parse_verdict(data.ai_verdict),
            ai_scores=data.ai_scores.model_dump() if data.ai_scores else None,
            price=stats.current_price or 0.0,
            config=config,
        )

        logger.info(
            f"Scored {data.card_name}: speculation={speculation.total:.1f} "
            f"({speculation.rating.value}), rebond={rebond.score:.0f}, "
            f"recommendation={hybrid.recommendation.value}"
        )

        return CardAnalysis(
            card_id=data.card_id,
            card_name=data.card_name,
            is_vintage=is_vintage,
            scarcity_rating=scarcity.scarcity_rating.value,
            speculation=speculation.to_dict(),
            technicals=indicators.to_dict(),
            rebond=rebond.to_dict(),
            recommendation=hybrid.to_dict(),
            price_statistics=stats.to_dict(),
            pump=pump.to_dict(),
            price_points_used=len(values),
            outliers_removed=outliers,
            suspicious_last_change=suspicious,
        )


# Singleton service instance
_service: Optional[CardScoringService] = None


def get_card_scoring_service() -> CardScoringService:
    """Get singleton card scoring service."""
    global _service
    if _service is None:
        _service = CardScoringService()
    return _service
