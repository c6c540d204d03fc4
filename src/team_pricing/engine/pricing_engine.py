"""
Group Discount Pricing Engine - step discounts driven by participant count.

Every N participants unlock one discount step worth a fixed percentage.
The cumulative discount is capped, and the resulting price never drops
below the item's floor.

All functions are pure: they read their arguments and allocate a fresh
result. Misconfigured parameters are coerced rather than rejected so a
bad item still renders a sane price:
- discount_step_every <= 0 is treated as 1
- discount_step_percent is clamped to [1, 3]
- discount_percent is clamped to [0, max_discount_percent]

min_price > base_price is passed through untouched; write-time checks
live in validation.py.
"""
import math
from typing import Any, Mapping

from .models import PricingParameters, PriceSnapshot, ProgressSnapshot, TraceStep


MIN_STEP_PERCENT = 1
MAX_STEP_PERCENT = 3


def clamp(value: float, lower: float, upper: float) -> float:
    """Clamp value into [lower, upper] (lower wins if the bounds cross)."""
    return max(lower, min(upper, value))


def round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    if value < 0:
        return -math.floor(-value + 0.5)
    return math.floor(value + 0.5)


def effective_step_every(params: PricingParameters) -> int:
    return max(1, int(params.discount_step_every))


def effective_step_percent(params: PricingParameters) -> float:
    return clamp(params.discount_step_percent, MIN_STEP_PERCENT, MAX_STEP_PERCENT)


def compute_discount_percent(params: PricingParameters, participant_count: int) -> float:
    """
    Discount percentage unlocked by the given participant count.

    A count exactly on a step boundary counts as a full step.
    """
    steps = participant_count // effective_step_every(params)
    raw_discount = steps * effective_step_percent(params)
    return clamp(raw_discount, 0, params.max_discount_percent)


def evaluate_price(base_price: float, min_price: float, discount_percent: float) -> int:
    """
    Apply a discount percentage to the base price, then enforce the floor.

    Rounding happens once, after the multiplication.
    """
    discounted = round_half_away(base_price * (1 - discount_percent / 100))
    return int(max(math.ceil(min_price), discounted))


def compute_price_snapshot(params: PricingParameters, participant_count: int) -> PriceSnapshot:
    """Price and discount for a participant count."""
    discount_percent = compute_discount_percent(params, participant_count)
    current_price = evaluate_price(params.base_price, params.min_price, discount_percent)
    return PriceSnapshot(current_price=current_price, discount_percent=discount_percent)


def compute_discounted_price(params: PricingParameters, participants: int) -> int:
    """Final price only (the API route's view of the engine)."""
    return compute_price_snapshot(params, participants).current_price


def compute_pricing_progress(params: PricingParameters, participant_count: int) -> ProgressSnapshot:
    """
    Price snapshot plus progress toward the next discount step.

    Built on the same primitives as compute_price_snapshot, so both
    agree on current_price and discount_percent for identical inputs.
    to_next_step is 0 once the discount cap is reached.
    """
    snapshot = compute_price_snapshot(params, participant_count)
    step_every = effective_step_every(params)
    remainder = participant_count % step_every

    if snapshot.discount_percent >= params.max_discount_percent:
        to_next_step = 0
    else:
        to_next_step = step_every - remainder

    progress_percent = int(clamp(round_half_away(100 * remainder / step_every), 0, 100))

    return ProgressSnapshot(
        current_price=snapshot.current_price,
        discount_percent=snapshot.discount_percent,
        to_next_step=to_next_step,
        progress_percent=progress_percent,
        participant_count=participant_count,
        parameters=params,
    )


def _participants_from_payload(payload: Mapping[str, Any]) -> int:
    # participantCount is canonical; participants is the older key
    count = payload.get('participantCount')
    if count is None:
        count = payload.get('participants')
    return int(count or 0)


def price_from_payload(payload: Mapping[str, Any]) -> int:
    """compute_discounted_price for a camelCase payload."""
    params = PricingParameters.from_payload(payload)
    return compute_discounted_price(params, _participants_from_payload(payload))


def progress_from_payload(payload: Mapping[str, Any]) -> ProgressSnapshot:
    """compute_pricing_progress for a camelCase payload."""
    params = PricingParameters.from_payload(payload)
    return compute_pricing_progress(params, _participants_from_payload(payload))


def explain_pricing(params: PricingParameters, participant_count: int) -> list[TraceStep]:
    """
    Explain one evaluation step by step.

    Returns the trace as a list of TraceStep; coercions applied to
    misconfigured parameters are called out explicitly.
    """
    trace = []
    step_every = effective_step_every(params)
    step_percent = effective_step_percent(params)

    trace.append(TraceStep("Participants", "Current participant count", str(participant_count)))

    if step_every != params.discount_step_every:
        trace.append(TraceStep(
            "Step Size",
            f"Configured step size {params.discount_step_every} coerced",
            str(step_every),
        ))
    else:
        trace.append(TraceStep("Step Size", "Participants per discount step", str(step_every)))

    if step_percent != params.discount_step_percent:
        trace.append(TraceStep(
            "Step Percent",
            f"Configured {params.discount_step_percent:g}% per step clamped to [{MIN_STEP_PERCENT}, {MAX_STEP_PERCENT}]",
            f"{step_percent:g}%",
        ))
    else:
        trace.append(TraceStep("Step Percent", "Discount per step", f"{step_percent:g}%"))

    steps = participant_count // step_every
    raw_discount = steps * step_percent
    trace.append(TraceStep("Steps Unlocked", f"{steps} step(s) × {step_percent:g}%", f"{raw_discount:g}%"))

    discount_percent = compute_discount_percent(params, participant_count)
    if discount_percent != raw_discount:
        trace.append(TraceStep(
            "Discount Cap",
            f"Raw discount capped at max {params.max_discount_percent:g}%",
            f"{discount_percent:g}%",
        ))

    discounted = round_half_away(params.base_price * (1 - discount_percent / 100))
    trace.append(TraceStep(
        "Discounted Price",
        f"{params.base_price:g} × (1 - {discount_percent:g}%)",
        str(discounted),
    ))

    current_price = evaluate_price(params.base_price, params.min_price, discount_percent)
    if current_price != discounted:
        trace.append(TraceStep("Price Floor", f"Raised to min price {params.min_price:g}", str(current_price)))

    trace.append(TraceStep("Final Price", "Price charged per participant", str(current_price)))
    return trace


def format_trace(trace: list[TraceStep]) -> str:
    """Get human-readable trace as formatted text."""
    lines = []
    for t in trace:
        if t.value:
            lines.append(f"→ {t.step}: {t.description} = {t.value}")
        else:
            lines.append(f"→ {t.step}: {t.description}")
    return "\n".join(lines)
