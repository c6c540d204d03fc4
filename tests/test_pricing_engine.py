"""
Pricing engine regression tests.

Scenarios use the admin form defaults (10000 base, 7000 floor, 1% every
10 participants, 30% cap) and should fail if the step policy changes.
"""
import pytest

from team_pricing.engine.models import PricingParameters
from team_pricing.engine.pricing_engine import (
    compute_discount_percent,
    compute_discounted_price,
    compute_price_snapshot,
    compute_pricing_progress,
    evaluate_price,
    explain_pricing,
    format_trace,
    price_from_payload,
    progress_from_payload,
    round_half_away,
)


GOLDEN_CASES = [
    # (participants, expected_price, expected_discount)
    (0, 10000, 0),
    (9, 10000, 0),
    (10, 9900, 1),
    (19, 9900, 1),
    (250, 7500, 25),
    (310, 7000, 30),
    (1000, 7000, 30),
]


@pytest.mark.parametrize("participants,expected_price,expected_discount", GOLDEN_CASES,
                         ids=lambda v: str(v))
def test_golden_case(default_params, participants, expected_price, expected_discount):
    """Test that pricing matches the expected golden case."""
    snapshot = compute_price_snapshot(default_params, participants)

    assert snapshot.discount_percent == expected_discount, \
        f"Discount mismatch at {participants}: expected {expected_discount}%, got {snapshot.discount_percent}%"
    assert snapshot.current_price == expected_price, \
        f"Price mismatch at {participants}: expected {expected_price}, got {snapshot.current_price}"
    assert isinstance(snapshot.current_price, int)


def test_discounted_price_matches_snapshot(default_params):
    assert compute_discounted_price(default_params, 250) == 7500


def test_step_boundary_counts_as_full_step(default_params):
    assert compute_discount_percent(default_params, 9) == 0
    assert compute_discount_percent(default_params, 10) == 1
    assert compute_discount_percent(default_params, 20) == 2


def test_step_percent_clamped_to_three(default_params):
    """A 10% step behaves like a 3% step."""
    aggressive = PricingParameters(10000, 7000, 10, 10, 30)
    assert compute_discount_percent(aggressive, 10) == 3
    assert compute_discounted_price(aggressive, 10) == 9700


def test_step_percent_raised_to_one():
    timid = PricingParameters(10000, 0, 0.2, 10, 30)
    assert compute_discount_percent(timid, 10) == 1


@pytest.mark.parametrize("step_every", [0, -5])
def test_step_every_floored_to_one(step_every):
    params = PricingParameters(10000, 0, 1, step_every, 30)
    assert compute_discount_percent(params, 1) == 1
    assert compute_discount_percent(params, 7) == 7


def test_discount_capped_before_floor():
    """Cap binds first when the floor is far away."""
    params = PricingParameters(10000, 1000, 3, 1, 10)
    snapshot = compute_price_snapshot(params, 100)
    assert snapshot.discount_percent == 10
    assert snapshot.current_price == 9000


def test_floor_binds_before_cap():
    params = PricingParameters(10000, 9500, 1, 1, 30)
    snapshot = compute_price_snapshot(params, 20)
    assert snapshot.discount_percent == 20
    assert snapshot.current_price == 9500


def test_min_above_base_passes_through():
    """A floor above the base price wins; the engine does not correct it."""
    params = PricingParameters(10000, 12000, 1, 10, 30)
    assert compute_discounted_price(params, 0) == 12000
    assert compute_discounted_price(params, 100) == 12000


def test_rounding_is_half_away_from_zero():
    # 150 * 0.99 = 148.5; banker's rounding would give 148
    assert evaluate_price(150, 0, 1) == 149
    assert round_half_away(2.5) == 3
    assert round_half_away(-2.5) == -3
    assert round_half_away(2.4) == 2


def test_zero_cap_never_discounts():
    params = PricingParameters(10000, 0, 3, 1, 0)
    assert compute_discounted_price(params, 500) == 10000


class TestProgress:

    def test_start_of_step(self, default_params):
        progress = compute_pricing_progress(default_params, 10)
        assert progress.to_next_step == 10
        assert progress.progress_percent == 0

    def test_mid_step(self, default_params):
        progress = compute_pricing_progress(default_params, 15)
        assert progress.to_next_step == 5
        assert progress.progress_percent == 50
        assert progress.current_price == 9900
        assert progress.discount_percent == 1

    def test_no_participants(self, default_params):
        progress = compute_pricing_progress(default_params, 0)
        assert progress.to_next_step == 10
        assert progress.progress_percent == 0
        assert progress.current_price == 10000

    def test_cap_reached_reports_no_next_step(self, default_params):
        progress = compute_pricing_progress(default_params, 305)
        assert progress.discount_percent == 30
        assert progress.to_next_step == 0

    def test_progress_rounds(self):
        params = PricingParameters(9000, 0, 1, 3, 30)
        assert compute_pricing_progress(params, 1).progress_percent == 33
        assert compute_pricing_progress(params, 2).progress_percent == 67

    def test_to_dict_uses_camel_case(self, default_params):
        data = compute_pricing_progress(default_params, 15).to_dict()
        assert data["currentPrice"] == 9900
        assert data["discountPercent"] == 1
        assert data["toNextStep"] == 5
        assert data["progressPercent"] == 50
        assert data["participantCount"] == 15
        assert data["basePrice"] == 10000


class TestPayloads:

    PAYLOAD = {
        "basePrice": 10000,
        "minPrice": 7000,
        "discountStepPercent": 1,
        "discountStepEvery": 10,
        "maxDiscountPercent": 30,
    }

    def test_participants_key(self):
        assert price_from_payload({**self.PAYLOAD, "participants": 250}) == 7500

    def test_participant_count_key(self):
        progress = progress_from_payload({**self.PAYLOAD, "participantCount": 250})
        assert progress.current_price == 7500
        assert progress.participant_count == 250

    def test_participant_count_takes_precedence(self):
        payload = {**self.PAYLOAD, "participantCount": 10, "participants": 250}
        assert price_from_payload(payload) == 9900

    def test_missing_count_is_zero(self):
        assert price_from_payload(self.PAYLOAD) == 10000


class TestExplain:

    def test_trace_ends_with_final_price(self, default_params):
        trace = explain_pricing(default_params, 250)
        assert trace[-1].step == "Final Price"
        assert trace[-1].value == "7500"

    def test_trace_reports_cap(self, default_params):
        steps = [t.step for t in explain_pricing(default_params, 310)]
        assert "Discount Cap" in steps

    def test_trace_reports_floor(self):
        params = PricingParameters(10000, 9500, 1, 1, 30)
        steps = [t.step for t in explain_pricing(params, 20)]
        assert "Price Floor" in steps

    def test_trace_reports_coercions(self):
        params = PricingParameters(10000, 0, 10, 0, 30)
        text = format_trace(explain_pricing(params, 5))
        assert "coerced" in text
        assert "clamped" in text
