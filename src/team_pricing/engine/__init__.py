"""Engine subpackage - pure group-discount pricing logic."""
from .models import PricingParameters, PriceSnapshot, ProgressSnapshot, TraceStep
from .pricing_engine import (
    compute_discount_percent,
    evaluate_price,
    compute_discounted_price,
    compute_price_snapshot,
    compute_pricing_progress,
    explain_pricing,
    price_from_payload,
    progress_from_payload,
)
from .validation import ValidationResult, validate_pricing_parameters, validate_pricing_row

__all__ = [
    'PricingParameters', 'PriceSnapshot', 'ProgressSnapshot', 'TraceStep',
    'compute_discount_percent', 'evaluate_price', 'compute_discounted_price',
    'compute_price_snapshot', 'compute_pricing_progress', 'explain_pricing',
    'price_from_payload', 'progress_from_payload',
    'ValidationResult', 'validate_pricing_parameters', 'validate_pricing_row',
]
