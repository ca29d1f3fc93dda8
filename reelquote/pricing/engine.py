"""
Quote assembler.

Combines all pipeline stages into a QuoteOutput.
base cost × complexity multiplier × skill multiplier → subtotal
→ contingency → grand total → optional client price / nett profit.

Every figure is rounded to 2 decimals as soon as it is computed, so stored
totals can be reproduced exactly from their inputs.
"""

from .complexity import calculate_complexity_multiplier
from .constants import COMPLEXITY_QUESTION_COUNT, DEFAULT_CONTINGENCY_PCT, SKILL_MULTIPLIERS
from .errors import InvalidComplexityInput
from .line_items import (
    aggregate_base_costs,
    normalise_crew_line,
    normalise_gear_line,
    round_currency,
)
from .templates import TemplateRegistry
from .types import ComplexityInput, ComplexityResult, QuoteInput, QuoteOutput


def resolve_complexity(project_type, complexity: ComplexityInput,
                       registry: TemplateRegistry) -> ComplexityResult:
    """
    Use the caller's precomputed score/multiplier when both are truthy,
    otherwise score the answers against the template weights.

    The precomputed pair is trusted as-is, without re-checking it against the
    answers; replaying an archived quote depends on this.
    """
    answers = complexity.answers
    if answers is None or len(answers) != COMPLEXITY_QUESTION_COUNT:
        count = 0 if answers is None else len(answers)
        raise InvalidComplexityInput(
            f"Complexity answers must contain exactly {COMPLEXITY_QUESTION_COUNT} "
            f"values, got {count}.",
            field="complexity.answers",
        )

    if complexity.weighted_score and complexity.multiplier:
        return ComplexityResult(
            weighted_score=complexity.weighted_score,
            multiplier=complexity.multiplier,
        )

    weights = registry.get_template(project_type).complexity_weights
    return calculate_complexity_multiplier(weights, answers)


def resolve_skill_multiplier(business) -> float:
    if business is None or not business.skill_level:
        return 1.0
    return SKILL_MULTIPLIERS[business.skill_level]


def calculate_quote(quote_input: QuoteInput, registry: TemplateRegistry) -> QuoteOutput:
    """
    Run the full pricing pipeline.

    Raises UnknownProjectType or InvalidComplexityInput for structurally
    invalid input. Arithmetic edge cases (no lines, zero cost) never raise.
    """
    template = registry.get_template(quote_input.project_type)

    development = tuple(normalise_crew_line(line) for line in quote_input.crew)
    production = tuple(normalise_gear_line(line) for line in quote_input.gear)
    base = aggregate_base_costs(development, production, quote_input.oop)

    complexity = resolve_complexity(template.type, quote_input.complexity, registry)
    skill_multiplier = resolve_skill_multiplier(quote_input.business)

    subtotal = round_currency(base.base_cost * complexity.multiplier * skill_multiplier)

    contingency_pct = quote_input.contingency_pct
    if contingency_pct is None:
        contingency_pct = DEFAULT_CONTINGENCY_PCT
    contingency = round_currency(subtotal * contingency_pct)
    grand_total = round_currency(subtotal + contingency)

    profit_margin_pct = None
    client_price = None
    nett_profit = None
    if quote_input.business is not None and quote_input.business.profit_margin_pct is not None:
        profit_margin_pct = quote_input.business.profit_margin_pct
        client_price = round_currency(grand_total * (1 + profit_margin_pct))
        nett_profit = round_currency(client_price - grand_total)

    return QuoteOutput(
        project_type=template.type,
        base_crew=base.base_crew,
        base_gear=base.base_gear,
        base_oop=base.base_oop,
        base_cost=base.base_cost,
        complexity=ComplexityResult(
            weighted_score=round_currency(complexity.weighted_score),
            multiplier=round_currency(complexity.multiplier),
        ),
        skill_multiplier=round_currency(skill_multiplier),
        subtotal=subtotal,
        contingency_pct=contingency_pct,
        contingency=contingency,
        grand_total=grand_total,
        development=development,
        production=production,
        profit_margin_pct=profit_margin_pct,
        client_price=client_price,
        nett_profit=nett_profit,
    )
