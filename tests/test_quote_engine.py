"""
Quote assembly: base cost -> multipliers -> contingency -> grand total ->
optional client price and nett profit.
"""

import copy

import pytest

from reelquote.pricing import (
    InvalidComplexityInput,
    PricingError,
    QuoteInput,
    UnknownProjectType,
    calculate_quote,
)


def _quote(payload, registry):
    return calculate_quote(QuoteInput.from_dict(payload), registry)


# --- End-to-end scenario ---

def test_scenario_totals(quote_payload, registry):
    quote = _quote(quote_payload, registry)

    assert quote.base_crew == 1_400_000
    assert quote.base_gear == 250_000
    assert quote.base_oop == 200_000
    assert quote.base_cost == 1_850_000
    assert quote.complexity.weighted_score == pytest.approx(19.2)
    assert quote.complexity.multiplier == 1.05
    assert quote.skill_multiplier == 1.0
    assert quote.subtotal == 1_942_500
    assert quote.contingency_pct == 0.05
    assert quote.contingency == 97_125
    assert quote.grand_total == 2_039_625
    assert quote.client_price == 2_243_587.5
    assert quote.nett_profit == 203_962.5


def test_scenario_line_totals_in_breakdown(quote_payload, registry):
    quote = _quote(quote_payload, registry)
    assert [line.line_total for line in quote.development] == [1_000_000, 400_000]
    assert [line.line_total for line in quote.production] == [250_000]

    data = quote.to_dict()
    assert data["breakdown"]["development"][1] == {
        "role": "Support", "qty": 2, "days": 0.5, "rate_per_day": 400_000, "line_total": 400_000,
    }


def test_grand_total_identity(quote_payload, registry):
    quote = _quote(quote_payload, registry)
    assert quote.grand_total == round(quote.subtotal + quote.contingency, 2)
    assert quote.nett_profit == round(quote.client_price - quote.grand_total, 2)


def test_skill_level_scales_subtotal(quote_payload, registry):
    quote_payload["business"]["skill_level"] = "pro"
    quote = _quote(quote_payload, registry)
    assert quote.skill_multiplier == 1.15
    assert quote.subtotal == 2_233_875

    quote_payload["business"]["skill_level"] = "beginner"
    assert _quote(quote_payload, registry).skill_multiplier == 0.95


def test_explicit_contingency(quote_payload, registry):
    quote_payload["contingency_pct"] = 0.1
    quote = _quote(quote_payload, registry)
    assert quote.contingency == 194_250
    assert quote.grand_total == 2_136_750


# --- Omission law ---

def test_no_business_omits_client_price(quote_payload, registry):
    del quote_payload["business"]
    quote = _quote(quote_payload, registry)

    assert quote.skill_multiplier == 1.0
    assert quote.client_price is None
    assert quote.nett_profit is None

    data = quote.to_dict()
    assert "client_price" not in data
    assert "nett_profit" not in data
    assert "profit_margin_pct" not in data


def test_zero_margin_is_not_omitted(quote_payload, registry):
    quote_payload["business"]["profit_margin_pct"] = 0
    quote = _quote(quote_payload, registry)
    assert quote.client_price == quote.grand_total
    assert quote.nett_profit == 0
    assert "client_price" in quote.to_dict()


# --- Complexity override ---

def test_precomputed_complexity_is_used_as_is(quote_payload, registry):
    quote_payload["complexity"].update({"weighted_score": 30, "multiplier": 1.2})
    quote = _quote(quote_payload, registry)
    assert quote.complexity.weighted_score == 30
    assert quote.complexity.multiplier == 1.2
    assert quote.subtotal == 2_220_000


def test_falsy_override_recomputes(quote_payload, registry):
    quote_payload["complexity"].update({"weighted_score": 30, "multiplier": 0})
    quote = _quote(quote_payload, registry)
    assert quote.complexity.multiplier == 1.05


def test_override_still_requires_ten_answers(quote_payload, registry):
    quote_payload["complexity"] = {"answers": [1, 2], "weighted_score": 30, "multiplier": 1.2}
    with pytest.raises(InvalidComplexityInput):
        _quote(quote_payload, registry)


# --- Structural errors ---

def test_unknown_project_type(quote_payload, registry):
    quote_payload["project_type"] = "wedding"
    with pytest.raises(UnknownProjectType) as exc:
        _quote(quote_payload, registry)
    assert exc.value.field == "project_type"
    assert exc.value.to_dict()["error"] == "Validation failed"


def test_short_answers(quote_payload, registry):
    quote_payload["complexity"]["answers"] = [3] * 9
    with pytest.raises(InvalidComplexityInput):
        _quote(quote_payload, registry)


# --- Edge cases ---

def test_empty_quote_is_all_zero(registry):
    quote = _quote({
        "project_type": "social",
        "complexity": {"answers": [0] * 10},
    }, registry)
    assert quote.base_cost == 0
    assert quote.subtotal == 0
    assert quote.grand_total == 0
    assert quote.complexity.multiplier == 0.9


def test_negative_quantities_are_clamped(quote_payload, registry):
    quote_payload["crew"][0]["qty"] = -5
    quote = _quote(quote_payload, registry)
    assert quote.development[0].line_total == 0
    assert quote.base_crew == 400_000


def test_inputs_are_not_mutated(quote_payload, registry):
    before = copy.deepcopy(quote_payload)
    quote_input = QuoteInput.from_dict(quote_payload)
    calculate_quote(quote_input, registry)
    assert quote_payload == before
    assert quote_input.crew[0].line_total is None


def test_same_input_same_output(quote_payload, registry):
    assert _quote(quote_payload, registry) == _quote(quote_payload, registry)


def test_unknown_skill_level_is_structured_error(quote_payload):
    quote_payload["business"]["skill_level"] = "expert"
    with pytest.raises(PricingError) as exc:
        QuoteInput.from_dict(quote_payload)
    assert exc.value.field == "business.skill_level"
    assert exc.value.to_dict()["error"] == "Validation failed"
