"""
Data models for the group-discount pricing engine.

Uses dataclasses for structured, type-safe data representation.
Parameters are frozen: the engine never mutates them.
"""
import math
from dataclasses import dataclass, asdict
from typing import Any, Mapping, Optional


# Admin form defaults for a new TEAM item
DEFAULT_BASE_PRICE = 10000
DEFAULT_MIN_PRICE = 7000
DEFAULT_STEP_PERCENT = 1
DEFAULT_STEP_EVERY = 10
DEFAULT_MAX_DISCOUNT_PERCENT = 30

PRICING_COLUMNS = (
    'base_price',
    'min_price',
    'discount_step_percent',
    'discount_step_every',
    'max_discount_percent',
)


def _number(value: Any, default: float) -> float:
    """Read a stored numeric cell; blanks and NaN fall back to the default."""
    if value is None:
        return float(default)
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return float(default)
    number = float(value)
    if math.isnan(number):
        return float(default)
    return number


@dataclass
class TraceStep:
    """A single step in a pricing explanation."""
    step: str
    description: str
    value: Optional[str] = None


@dataclass(frozen=True)
class PricingParameters:
    """Pricing configuration of a group-buy item."""
    base_price: float
    min_price: float
    discount_step_percent: float
    discount_step_every: int
    max_discount_percent: float

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> 'PricingParameters':
        """Build parameters from a stored team item row (snake_case columns)."""
        return cls(
            base_price=_number(row.get('base_price'), DEFAULT_BASE_PRICE),
            min_price=_number(row.get('min_price'), DEFAULT_MIN_PRICE),
            discount_step_percent=_number(row.get('discount_step_percent'), DEFAULT_STEP_PERCENT),
            discount_step_every=int(_number(row.get('discount_step_every'), DEFAULT_STEP_EVERY)),
            max_discount_percent=_number(row.get('max_discount_percent'), DEFAULT_MAX_DISCOUNT_PERCENT),
        )

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> 'PricingParameters':
        """Build parameters from a camelCase client payload."""
        return cls(
            base_price=_number(payload.get('basePrice'), 0),
            min_price=_number(payload.get('minPrice'), 0),
            discount_step_percent=_number(payload.get('discountStepPercent'), 0),
            discount_step_every=int(_number(payload.get('discountStepEvery'), 1)),
            max_discount_percent=_number(payload.get('maxDiscountPercent'), 0),
        )

    def to_row(self) -> dict:
        """Convert to the stored column layout."""
        return asdict(self)


@dataclass(frozen=True)
class PriceSnapshot:
    """Result of a single pricing evaluation."""
    current_price: int
    discount_percent: float

    def to_dict(self) -> dict:
        return {
            "currentPrice": self.current_price,
            "discountPercent": self.discount_percent,
        }


@dataclass(frozen=True)
class ProgressSnapshot(PriceSnapshot):
    """Price snapshot plus progress toward the next discount step."""
    to_next_step: int
    progress_percent: int
    participant_count: int = 0
    parameters: Optional[PricingParameters] = None

    def to_dict(self) -> dict:
        """Camel-cased payload for the detail view."""
        data = super().to_dict()
        data.update({
            "toNextStep": self.to_next_step,
            "progressPercent": self.progress_percent,
            "participantCount": self.participant_count,
        })
        if self.parameters is not None:
            data.update({
                "basePrice": self.parameters.base_price,
                "minPrice": self.parameters.min_price,
                "discountStepPercent": self.parameters.discount_step_percent,
                "discountStepEvery": self.parameters.discount_step_every,
                "maxDiscountPercent": self.parameters.max_discount_percent,
            })
        return data

