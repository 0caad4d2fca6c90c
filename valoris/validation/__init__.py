"""Price validation and anomaly detection."""

from .prices import (
    CardCondition,
    CardVariant,
    Currency,
    PriceBatch,
    PriceHistoryEntry,
    PriceRecord,
    PriceSource,
    PriceValidationResult,
    PumpDetection,
    detect_local_outliers,
    detect_price_outliers,
    detect_pump,
    is_suspicious_price_change,
    safe_validate_price,
    validate_batch_prices,
    validate_price,
    validate_price_history,
)


__all__ = [
    "CardCondition",
    "CardVariant",
    "Currency",
    "PriceBatch",
    "PriceHistoryEntry",
    "PriceRecord",
    "PriceSource",
    "PriceValidationResult",
    "PumpDetection",
    "detect_local_outliers",
    "detect_price_outliers",
    "detect_pump",
    "is_suspicious_price_change",
    "safe_validate_price",
    "validate_batch_prices",
    "validate_price",
    "validate_price_history",
]
