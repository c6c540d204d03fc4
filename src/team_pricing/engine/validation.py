"""
Write-time validation of team item pricing parameters.

The evaluator clamps bad values at read time; this module rejects them
when an admin saves an item so the clamps only ever catch legacy rows.
"""
import math
from dataclasses import dataclass, field
from typing import Any, Mapping

from .models import PRICING_COLUMNS, PricingParameters
from .pricing_engine import MIN_STEP_PERCENT, MAX_STEP_PERCENT


@dataclass
class ValidationResult:
    """Result of pricing validation."""
    valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


def validate_pricing_row(row: Mapping[str, Any]) -> ValidationResult:
    """Validate raw (possibly non-numeric) pricing columns."""
    result = ValidationResult(valid=True)

    for column in PRICING_COLUMNS:
        value = row.get(column)
        if value is None or value == '':
            continue
        try:
            number = float(value)
        except (TypeError, ValueError):
            result.errors.append(f"{column} must be a number")
            result.valid = False
            continue
        if not math.isfinite(number):
            result.errors.append(f"{column} must be a finite number")
            result.valid = False

    if not result.valid:
        return result

    step_every = row.get('discount_step_every')
    if step_every not in (None, '') and float(step_every) != int(float(step_every)):
        result.errors.append("discount_step_every must be a whole number")
        result.valid = False
        return result

    return validate_pricing_parameters(PricingParameters.from_row(row))


def validate_pricing_parameters(params: PricingParameters) -> ValidationResult:
    """Validate pricing parameters before saving."""
    result = ValidationResult(valid=True)

    # inf/NaN slip past every comparison below
    for column, value in params.to_row().items():
        if not math.isfinite(value):
            result.errors.append(f"{column} must be a finite number")
    if result.errors:
        result.valid = False
        return result

    if params.base_price < 0:
        result.errors.append("base_price must not be negative")
        result.valid = False

    if params.min_price < 0:
        result.errors.append("min_price must not be negative")
        result.valid = False

    if params.min_price > params.base_price:
        result.errors.append("min_price must not exceed base_price")
        result.valid = False

    if params.discount_step_every < 1:
        result.errors.append("discount_step_every must be at least 1")
        result.valid = False

    if params.max_discount_percent < 0:
        result.errors.append("max_discount_percent must not be negative")
        result.valid = False

    if not MIN_STEP_PERCENT <= params.discount_step_percent <= MAX_STEP_PERCENT:
        result.warnings.append(
            f"discount_step_percent {params.discount_step_percent:g} will be clamped "
            f"to [{MIN_STEP_PERCENT}, {MAX_STEP_PERCENT}]"
        )

    if params.max_discount_percent > 100:
        result.warnings.append("max_discount_percent above 100 is limited by min_price only")

    # Floor reached before the cap: the remaining steps have no effect
    if result.valid and params.base_price > 0:
        floor_percent = 100 * (1 - params.min_price / params.base_price)
        if floor_percent < params.max_discount_percent:
            result.warnings.append(
                f"min_price is reached at {floor_percent:g}% discount, "
                f"before max_discount_percent {params.max_discount_percent:g}%"
            )

    return result

