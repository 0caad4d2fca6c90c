"""Price record validation and anomaly detection.

Records are validated before they enter a price history; anomaly checks run
on the history before it feeds a scorer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Mapping, Sequence
from uuid import UUID

import pydantic
from pydantic import BaseModel, Field, field_validator

from valoris.core.exceptions import PriceValidationError
from valoris.core.logging import get_logger
from valoris.core.technical_utils import mean, round_half_up, std
from valoris.scoring.config import ScoringConfig, get_scoring_config


logger = get_logger("validation.prices")

MAX_PRICE = 1_000_000
MIN_BATCH_SIZE = 1
MAX_BATCH_SIZE = 1000


class Currency(str, Enum):
    """Accepted price currencies."""

    EUR = "EUR"
    USD = "USD"


class PriceSource(str, Enum):
    """Marketplace a price was observed on."""

    CARDMARKET = "cardmarket"
    TCGPLAYER = "tcgplayer"
    EBAY = "ebay"
    MANUAL = "manual"


class CardCondition(str, Enum):
    MINT = "mint"
    NEAR_MINT = "near_mint"
    EXCELLENT = "excellent"
    GOOD = "good"
    PLAYED = "played"
    POOR = "poor"


class CardVariant(str, Enum):
    REGULAR = "regular"
    REVERSE_HOLO = "reverse_holo"
    FIRST_EDITION = "first_edition"
    FIRST_EDITION_ALT = "1st_edition"


class PriceRecord(BaseModel):
    """A single validated price observation."""

    value: float = Field(..., gt=0, le=MAX_PRICE, allow_inf_nan=False, description="Price")
    currency: Currency = Field(..., description="Price currency")
    date: datetime = Field(..., description="Observation timestamp (ISO-8601)")

    model_config = {"frozen": True}

    @field_validator("value", mode="before")
    @classmethod
    def _reject_non_numeric(cls, v: Any) -> Any:
        # Strings and booleans would otherwise be coerced to floats
        if isinstance(v, (str, bool)):
            raise ValueError("Price must be a number")
        return v


class PriceHistoryEntry(BaseModel):
    """Price observation attached to a card and a marketplace."""

    card_id: UUID = Field(..., description="Card identifier")
    source: PriceSource = Field(..., description="Marketplace")
    price: PriceRecord
    condition: CardCondition | None = None
    variant: CardVariant | None = None
    timestamp: datetime = Field(..., description="When the entry was recorded")


class PriceBatch(BaseModel):
    """Batch of price history entries for bulk ingestion."""

    prices: list[PriceHistoryEntry] = Field(
        ..., min_length=MIN_BATCH_SIZE, max_length=MAX_BATCH_SIZE
    )


@dataclass
class PriceValidationResult:
    """Non-throwing validation outcome."""

    success: bool
    data: PriceRecord | None = None
    errors: list[dict[str, str]] = field(default_factory=list)


@dataclass
class PumpDetection:
    """Outcome of pump detection on a recent price window."""

    has_pump: bool = False
    pump_magnitude_pct: float | None = None
    days_since_peak: int | None = None

    def to_dict(self) -> dict:
        return {
            "has_pump": self.has_pump,
            "pump_magnitude_pct": self.pump_magnitude_pct,
            "days_since_peak": self.days_since_peak,
        }


def _format_errors(exc: pydantic.ValidationError) -> list[dict[str, str]]:
    return [
        {
            "field": ".".join(str(part) for part in err["loc"]) or "record",
            "message": err["msg"],
        }
        for err in exc.errors()
    ]


def _validate(model: type[BaseModel], record: Any) -> BaseModel:
    if isinstance(record, model):
        return record
    try:
        if isinstance(record, BaseModel):
            record = record.model_dump()
        return model.model_validate(record)
    except pydantic.ValidationError as e:
        errors = _format_errors(e)
        logger.debug(f"Rejected {model.__name__}: {errors}")
        raise PriceValidationError(
            f"Invalid {model.__name__}: {errors[0]['field']}: {errors[0]['message']}",
            details={"errors": errors},
        ) from e


def validate_price(record: Mapping[str, Any] | PriceRecord) -> PriceRecord:
    """
    Validate a raw price record.

    Args:
        record: Mapping with ``value``, ``currency`` and ``date``

    Returns:
        The validated PriceRecord

    Raises:
        PriceValidationError: With the offending fields in ``details["errors"]``
    """
    return _validate(PriceRecord, record)


def safe_validate_price(record: Mapping[str, Any] | PriceRecord) -> PriceValidationResult:
    """Validate a price record without raising."""
    try:
        return PriceValidationResult(success=True, data=validate_price(record))
    except PriceValidationError as e:
        return PriceValidationResult(success=False, errors=e.errors)


def validate_price_history(entry: Mapping[str, Any] | PriceHistoryEntry) -> PriceHistoryEntry:
    """Validate a card price history entry, raising PriceValidationError."""
    return _validate(PriceHistoryEntry, entry)


def validate_batch_prices(
    entries: Sequence[Mapping[str, Any] | PriceHistoryEntry],
) -> list[PriceHistoryEntry]:
    """Validate a batch of 1 to 1000 price history entries."""
    batch = _validate(PriceBatch, {"prices": list(entries)})
    return batch.prices


def detect_price_outliers(
    prices: Sequence[float],
    config: ScoringConfig | None = None,
) -> list[float]:
    """
    Flag prices far from the mean of the list.

    A value is an outlier when its absolute deviation from the mean exceeds
    ``outlier_z_threshold`` population standard deviations.

    Returns:
        Outlier values in input order; empty below ``outlier_min_points``
    """
    config = config or get_scoring_config()

    if len(prices) < config.outlier_min_points:
        return []

    avg = mean(prices)
    sigma = std(prices)
    if sigma == 0:
        return []

    limit = config.outlier_z_threshold * sigma
    return [p for p in prices if abs(p - avg) > limit]


def detect_local_outliers(
    prices: Sequence[float],
    config: ScoringConfig | None = None,
) -> list[int]:
    """
    Flag isolated spikes against their neighbours.

    Each price is compared with the prices up to ``outlier_window`` positions
    on either side of it, using the same z rule as detect_price_outliers. A
    steady trend never stands out from its own neighbourhood. The latest price
    has no later neighbours to confirm a spike and is never flagged.

    Returns:
        Indices of the flagged prices, ascending
    """
    config = config or get_scoring_config()

    values = [float(p) for p in prices]
    flagged = []
    for i in range(len(values) - 1):
        window = values[max(0, i - config.outlier_window) : i + config.outlier_window + 1]
        if len(window) < config.outlier_min_points:
            continue
        sigma = std(window)
        if sigma > 0 and abs(values[i] - mean(window)) > config.outlier_z_threshold * sigma:
            flagged.append(i)
    return flagged


def is_suspicious_price_change(
    old_price: float,
    new_price: float,
    config: ScoringConfig | None = None,
) -> bool:
    """
    Check whether a new observation moved too far from the previous one.

    A zero previous price is suspicious unless the new price is zero too.
    """
    config = config or get_scoring_config()

    if old_price == 0:
        return new_price != 0

    change = abs(new_price - old_price) / abs(old_price)
    return change > config.suspicious_change_ratio


def detect_pump(
    prices: Sequence[float],
    config: ScoringConfig | None = None,
) -> PumpDetection:
    """
    Detect a spike that has since receded.

    Looks at the last ``pump_window`` prices. A pump is a maximum more than
    ``1 + pump_ratio_threshold`` times the window mean that happened before
    the last ``pump_recency_points`` observations.
    """
    config = config or get_scoring_config()

    window = list(prices[-config.pump_window:])
    if len(window) < config.pump_min_points:
        return PumpDetection()

    avg = mean(window)
    if avg <= 0:
        return PumpDetection()

    peak = max(window)
    peak_index = window.index(peak)
    magnitude = peak / avg - 1

    if magnitude > config.pump_ratio_threshold and peak_index < len(window) - config.pump_recency_points:
        return PumpDetection(
            has_pump=True,
            pump_magnitude_pct=round_half_up(magnitude * 100),
            days_since_peak=len(window) - 1 - peak_index,
        )

    return PumpDetection()
