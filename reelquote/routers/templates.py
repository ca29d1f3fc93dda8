"""
Template defaults and server-side rule evaluation for the quote form.
"""

from fastapi import APIRouter, Depends

from ..dependencies import get_registry, pricing_http_error
from ..pricing import CrewLine, GearLine, PricingError, TemplateRegistry, apply_rules
from ..pricing.constants import COMPLEXITY_LABELS
from ..schemas import RuleApplyRequest, RuleApplyResponse

router = APIRouter(prefix="/templates", tags=["templates"])


@router.get("")
def list_templates(registry: TemplateRegistry = Depends(get_registry)):
    return [template.to_dict() for template in registry.values()]


@router.get("/{project_type}")
def get_template(project_type: str, registry: TemplateRegistry = Depends(get_registry)):
    try:
        template = registry.get_template(project_type)
    except PricingError as e:
        raise pricing_http_error(e, not_found_on_unknown_type=True)
    data = template.to_dict()
    # Question labels paired with this type's weights, in answer order
    data["complexity_questions"] = [
        {"label": label, "weight": weight}
        for label, weight in zip(COMPLEXITY_LABELS, template.complexity_weights)
    ]
    return data


@router.post("/{project_type}/rules/apply", response_model=RuleApplyResponse)
def apply_template_rules(
    project_type: str,
    payload: RuleApplyRequest,
    registry: TemplateRegistry = Depends(get_registry),
):
    """
    Run the project type's rules against the current form state.

    Pass the returned `applied` list back on the next call so day
    adjustments are not stacked on repeated evaluation.
    """
    data = payload.model_dump()
    try:
        result = apply_rules(
            project_type,
            crew=[CrewLine.from_dict(line) for line in data["crew"]],
            gear=[GearLine.from_dict(line) for line in data["gear"]],
            flags=data["flags"],
            outputs=data["outputs"],
            registry=registry,
            applied=payload.applied,
        )
    except PricingError as e:
        raise pricing_http_error(e, not_found_on_unknown_type=True)

    return {
        "crew": [line.to_dict() for line in result.crew],
        "gear": [line.to_dict() for line in result.gear],
        "changed": result.changed,
        "applied": sorted(result.applied),
    }
