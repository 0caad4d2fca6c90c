"""Score value types shared by the dimension scorers."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class DimensionScore:
    """One speculation dimension (D1..D5) with its diagnostics.

    The value is always clamped to [0, 100], whatever the intermediate
    arithmetic produced.
    """

    value: float
    sub_metrics: dict[str, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.value = max(0.0, min(100.0, float(self.value)))

    def to_dict(self) -> dict:
        return {
            "value": round(self.value, 2),
            "sub_metrics": {
                k: round(v, 4) if isinstance(v, float) else v
                for k, v in self.sub_metrics.items()
            },
        }
