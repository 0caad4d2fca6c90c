"""Valoris: speculation scoring engine for Pokémon trading cards.

Usage:
    from valoris import CardScoringInput, get_card_scoring_service

    analysis = get_card_scoring_service().analyze(
        CardScoringInput(card_id="base1-4", card_name="Charizard", set_id="base1")
    )
"""

from valoris.core.technical_utils import macd, rsi
from valoris.validation import (
    detect_price_outliers,
    is_suspicious_price_change,
    safe_validate_price,
    validate_price,
)
from valoris.scoring import (
    calculate_d4_score,
    calculate_growth_score,
    calculate_rebond_score,
    calculate_technical_indicators,
    calculate_volatility_score,
    get_macro_score,
    get_scarcity_score,
)
from valoris.scoring.service import CardScoringService, get_card_scoring_service
from valoris.schemas import CardAnalysis, CardScoringInput

__version__ = "1.0.0"

__all__ = [
    "CardAnalysis",
    "CardScoringInput",
    "CardScoringService",
    "get_card_scoring_service",
    "calculate_d4_score",
    "calculate_growth_score",
    "calculate_rebond_score",
    "calculate_technical_indicators",
    "calculate_volatility_score",
    "detect_price_outliers",
    "get_macro_score",
    "get_scarcity_score",
    "is_suspicious_price_change",
    "macd",
    "rsi",
    "safe_validate_price",
    "validate_price",
]
