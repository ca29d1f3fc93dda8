"""
Line-item totals and base cost aggregation.

Negative or malformed numbers are clamped to 0 rather than rejected, and
every sum is rounded half away from zero.
"""

import pytest

from reelquote.pricing.line_items import (
    aggregate_base_costs,
    line_total,
    round_currency,
    sum_oop,
    to_number,
)
from reelquote.pricing.types import CrewLine, GearLine, OOPCosts


def test_line_total_multiplies_qty_days_rate():
    assert line_total(2, 0.5, 400_000) == 400_000


def test_line_total_clamps_negative_qty():
    assert line_total(-5, 1, 1_000_000) == 0


@pytest.mark.parametrize("days, rate", [(-1, 100), (1, -100), (None, 100), ("abc", 100)])
def test_line_total_bad_inputs_are_zero(days, rate):
    assert line_total(1, days, rate) == 0


def test_to_number_rejects_non_finite():
    assert to_number(float("nan")) == 0
    assert to_number(float("inf")) == 0
    assert to_number(True) == 0
    assert to_number("12.5") == 12.5


def test_round_currency_half_away_from_zero():
    assert round_currency(2.675) == 2.68
    assert round_currency(1.005) == 1.01
    assert round_currency(0.125) == 0.13
    assert round_currency(-0.125) == -0.13


def test_sum_oop_missing_fields_are_zero():
    assert sum_oop(OOPCosts(transport=150_000, fnb=50_000)) == 200_000
    assert sum_oop(OOPCosts()) == 0
    assert sum_oop(None) == 0


def test_sum_oop_clamps_negative_expense():
    assert sum_oop(OOPCosts(transport=-10, fnb=20, misc=5)) == 25


def test_aggregate_scenario_base_costs():
    crew = [
        CrewLine(role="Lead", qty=1, days=1, rate_per_day=1_000_000),
        CrewLine(role="Support", qty=2, days=0.5, rate_per_day=400_000),
    ]
    gear = [GearLine(name="Kit", qty=1, days=1, rate_per_day=250_000)]
    base = aggregate_base_costs(crew, gear, OOPCosts(transport=150_000, fnb=50_000))

    assert base.base_crew == 1_400_000
    assert base.base_gear == 250_000
    assert base.base_oop == 200_000
    assert base.base_cost == 1_850_000


def test_aggregate_empty_inputs_are_zero():
    base = aggregate_base_costs([], [])
    assert base.base_cost == 0
    assert base.base_crew == 0
    assert base.base_gear == 0
    assert base.base_oop == 0


def test_aggregate_uses_existing_line_totals():
    crew = [CrewLine(role="Editor", qty=1, days=1, rate_per_day=100, line_total=150)]
    assert aggregate_base_costs(crew, []).base_crew == 150


# --- Very large amounts ---

def test_line_total_handles_amounts_beyond_28_digits():
    assert line_total(1e10, 1e10, 1e10) == 1e30


def test_line_total_overflow_to_inf_is_zero():
    assert line_total(1e200, 1e200, 1) == 0


def test_round_currency_large_and_non_finite():
    assert round_currency(1e300) == 1e300
    assert round_currency(float("inf")) == 0
    assert round_currency(float("nan")) == 0
