"""Price domain models.

Type-safe representations of card price history.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Iterator, Sequence

import pandas as pd
from pydantic import BaseModel, Field, computed_field, field_validator, model_validator


class PricePoint(BaseModel):
    """Single dated price observation.

    Values are expected to be positive at ingestion, but the scoring code
    tolerates zero or negative values.
    """

    date: datetime = Field(..., description="Observation timestamp")
    value: float = Field(..., description="Price in currency units")

    model_config = {
        "from_attributes": True,
        "frozen": True,
    }

    @field_validator("date")
    @classmethod
    def _assume_utc(cls, v: datetime) -> datetime:
        # Naive timestamps are UTC so mixed histories stay comparable
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v


class PriceSeries(BaseModel):
    """Chronological price history for one card."""

    points: list[PricePoint] = Field(default_factory=list, description="Price points (ascending)")
    currency: str = Field(default="EUR", description="Price currency")

    model_config = {
        "from_attributes": True,
    }

    @model_validator(mode="after")
    def _sort_points(self) -> "PriceSeries":
        self.points.sort(key=lambda p: p.date)
        return self

    def __len__(self) -> int:
        """Number of price points."""
        return len(self.points)

    def __iter__(self) -> Iterator[PricePoint]:
        """Iterate over price points."""
        return iter(self.points)

    def __getitem__(self, index: int) -> PricePoint:
        """Get price point by index."""
        return self.points[index]

    def values(self) -> list[float]:
        """Bare price values in chronological order."""
        return [p.value for p in self.points]

    def dates(self) -> list[datetime]:
        return [p.date for p in self.points]

    @computed_field
    @property
    def latest_value(self) -> float | None:
        """Most recent price."""
        return self.points[-1].value if self.points else None

    def last(self, n: int) -> "PriceSeries":
        """Most recent ``n`` points as a new series."""
        sliced = self.points[-n:] if len(self.points) > n else self.points
        return PriceSeries(points=list(sliced), currency=self.currency)

    def to_series(self) -> pd.Series:
        """Convert to a pandas Series indexed by date."""
        if not self.points:
            return pd.Series(dtype=float, name="price")
        return pd.Series(
            self.values(),
            index=pd.DatetimeIndex(self.dates(), name="date"),
            name="price",
        )

    @classmethod
    def from_values(
        cls,
        values: Sequence[float],
        start: datetime | None = None,
        currency: str = "EUR",
    ) -> "PriceSeries":
        """Build a daily series from bare values.

        Args:
            values: Prices in chronological order
            start: Date of the first value (defaults to ``len(values)`` days ago)
            currency: Price currency
        """
        if start is None:
            start = datetime.now(timezone.utc) - timedelta(days=len(values))
        points = [
            PricePoint(date=start + timedelta(days=i), value=float(v))
            for i, v in enumerate(values)
        ]
        return cls(points=points, currency=currency)

    @classmethod
    def from_dataframe(cls, df: pd.DataFrame, currency: str = "EUR") -> "PriceSeries":
        """Create a PriceSeries from a DataFrame.

        Accepts either a DatetimeIndex with a ``price``/``value``/``Close``
        column, or explicit ``date`` and price columns. Rows that cannot be
        parsed are skipped.
        """
        if df is None or df.empty:
            return cls(points=[], currency=currency)

        value_col = next(
            (c for c in ("price", "value", "Close", "close") if c in df.columns), None
        )
        if value_col is None:
            raise ValueError("DataFrame must have a price, value or close column")

        dates = df["date"] if "date" in df.columns else df.index

        points = []
        for raw_date, raw_value in zip(dates, df[value_col]):
            try:
                ts = pd.Timestamp(raw_date)
                if pd.isna(ts) or pd.isna(raw_value):
                    continue
                points.append(PricePoint(date=ts.to_pydatetime(), value=float(raw_value)))
            except (ValueError, TypeError):
                # Skip invalid rows
                continue

        return cls(points=points, currency=currency)


def price_values(prices: PriceSeries | Sequence[PricePoint] | Sequence[float]) -> list[float]:
    """Bare values from a series, a list of points or a list of numbers."""
    if isinstance(prices, PriceSeries):
        return prices.values()
    return [p.value if isinstance(p, PricePoint) else float(p) for p in prices]
