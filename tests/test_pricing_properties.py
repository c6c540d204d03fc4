"""Property-based tests for the group-discount pricing engine.

For any parameters, the engine must:
  1. keep the price within [min_price, base_price] when min <= base
  2. never decrease the discount as participants join
  3. never exceed the discount cap
  4. treat out-of-range step settings like their clamped values
  5. agree between the simple and the progress-projecting variants
"""

from hypothesis import given, settings
from hypothesis import strategies as st

from team_pricing.engine.models import PricingParameters
from team_pricing.engine.pricing_engine import (
    compute_discount_percent,
    compute_discounted_price,
    compute_price_snapshot,
    compute_pricing_progress,
)


@st.composite
def pricing_parameters(draw):
    base = draw(st.integers(min_value=0, max_value=1_000_000))
    minimum = draw(st.integers(min_value=0, max_value=base))
    return PricingParameters(
        base_price=base,
        min_price=minimum,
        discount_step_percent=draw(st.floats(min_value=-10, max_value=20, allow_nan=False)),
        discount_step_every=draw(st.integers(min_value=-5, max_value=50)),
        max_discount_percent=draw(st.floats(min_value=0, max_value=100, allow_nan=False)),
    )


counts = st.integers(min_value=0, max_value=5000)


@given(pricing_parameters(), counts)
@settings(max_examples=300)
def test_price_within_floor_and_base(params, participants):
    price = compute_discounted_price(params, participants)
    assert isinstance(price, int)
    assert params.min_price <= price <= params.base_price


@given(pricing_parameters(), counts, st.integers(min_value=0, max_value=500))
def test_discount_non_decreasing(params, participants, more):
    before = compute_discount_percent(params, participants)
    after = compute_discount_percent(params, participants + more)
    assert before <= after


@given(pricing_parameters(), counts, st.integers(min_value=0, max_value=500))
def test_price_non_increasing(params, participants, more):
    assert compute_discounted_price(params, participants + more) <= compute_discounted_price(params, participants)


@given(pricing_parameters(), counts)
def test_discount_bounded_by_cap(params, participants):
    assert 0 <= compute_discount_percent(params, participants) <= params.max_discount_percent


@given(pricing_parameters(), counts)
def test_step_percent_above_three_behaves_like_three(params, participants):
    ten = PricingParameters(params.base_price, params.min_price, 10,
                            params.discount_step_every, params.max_discount_percent)
    three = PricingParameters(params.base_price, params.min_price, 3,
                              params.discount_step_every, params.max_discount_percent)
    assert compute_price_snapshot(ten, participants) == compute_price_snapshot(three, participants)


@given(pricing_parameters(), counts)
def test_step_every_zero_behaves_like_one(params, participants):
    zero = PricingParameters(params.base_price, params.min_price, params.discount_step_percent,
                             0, params.max_discount_percent)
    one = PricingParameters(params.base_price, params.min_price, params.discount_step_percent,
                            1, params.max_discount_percent)
    assert compute_price_snapshot(zero, participants) == compute_price_snapshot(one, participants)


@given(pricing_parameters(), counts)
def test_repeated_calls_identical(params, participants):
    assert compute_pricing_progress(params, participants) == compute_pricing_progress(params, participants)


@given(pricing_parameters(), counts)
def test_simple_and_progress_variants_agree(params, participants):
    progress = compute_pricing_progress(params, participants)
    assert progress.current_price == compute_discounted_price(params, participants)
    assert progress.discount_percent == compute_discount_percent(params, participants)


@given(pricing_parameters(), counts)
def test_progress_fields_in_range(params, participants):
    progress = compute_pricing_progress(params, participants)
    step_every = max(1, params.discount_step_every)
    assert 0 <= progress.progress_percent <= 100
    assert 0 <= progress.to_next_step <= step_every
    if progress.discount_percent >= params.max_discount_percent:
        assert progress.to_next_step == 0
