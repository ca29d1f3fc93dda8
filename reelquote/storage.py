"""
Project persistence: save a priced quote and read it back.

The pricing pipeline never touches the database; routers hand this module the
request payload and the QuoteOutput it produced.
"""

import logging
import math
from typing import Optional

from sqlalchemy.orm import Session

from . import models
from .pricing.complexity import clamp_answer
from .pricing.types import QuoteOutput

logger = logging.getLogger(__name__)


def _stored_answer(value) -> int:
    """Answers are stored as whole ratings, 0-5."""
    return int(math.floor(clamp_answer(value) + 0.5))


def insert_project_with_details(db: Session, payload: dict, quote: QuoteOutput) -> str:
    """
    Persist one project with its crew/gear lines in a single transaction.

    Args:
        payload: ProjectCreateRequest.model_dump() with inputs, basic info, meta.
        quote: QuoteOutput computed from the same payload.

    Returns:
        The new project id (UUID string).
    """
    basic = payload.get("basic") or {}
    meta = payload.get("meta") or {}
    oop = payload.get("oop") or {}
    business = payload.get("business") or {}
    skill_level = business.get("skill_level")

    project = models.Project(
        type=quote.project_type,
        title=meta.get("project_title"),
        client_name=meta.get("client_name"),
        duration_min=basic.get("duration_min"),
        delivery_days=basic.get("delivery_days"),
        flags=dict(basic.get("flags") or {}),
        outputs=dict(basic.get("outputs") or {}),
        brief=basic.get("brief"),
        oop_transport=oop.get("transport"),
        oop_fnb=oop.get("fnb"),
        oop_misc=oop.get("misc"),
        complexity_answers=[_stored_answer(a) for a in payload["complexity"]["answers"]],
        weighted_score=quote.complexity.weighted_score,
        complexity_multiplier=quote.complexity.multiplier,
        income_goal=business.get("income_goal"),
        living_cost=business.get("living_cost"),
        skill_level=getattr(skill_level, "value", skill_level),
        profit_margin_pct=quote.profit_margin_pct,
        base_crew=quote.base_crew,
        base_gear=quote.base_gear,
        base_oop=quote.base_oop,
        base_cost=quote.base_cost,
        skill_multiplier=quote.skill_multiplier,
        subtotal=quote.subtotal,
        contingency_pct=quote.contingency_pct,
        contingency=quote.contingency,
        grand_total=quote.grand_total,
        client_price=quote.client_price,
        nett_profit=quote.nett_profit,
    )

    for index, line in enumerate(quote.development):
        project.crew_lines.append(models.ProjectCrewLine(
            sort_order=index,
            role=line.role,
            qty=line.qty,
            days=line.days,
            rate_per_day=line.rate_per_day,
            line_total=line.line_total,
        ))
    for index, line in enumerate(quote.production):
        project.gear_lines.append(models.ProjectGearLine(
            sort_order=index,
            name=line.name,
            qty=line.qty,
            days=line.days,
            rate_per_day=line.rate_per_day,
            line_total=line.line_total,
        ))

    try:
        db.add(project)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(project)

    logger.info("Saved project %s (%s) grand_total=%.2f", project.id, project.type, project.grand_total)
    return project.id


def fetch_project_by_id(db: Session, project_id: str) -> Optional[models.Project]:
    return db.query(models.Project).filter(models.Project.id == project_id).first()


def list_projects(db: Session, limit: int = 50) -> list:
    """Most recent projects first."""
    return (
        db.query(models.Project)
        .order_by(models.Project.created_at.desc())
        .limit(limit)
        .all()
    )


# --- Record → dict mapping ---

def _omit_none(data: dict) -> dict:
    return {k: v for k, v in data.items() if v is not None}


def _pricing_dict(project: models.Project) -> dict:
    return _omit_none({
        "base_crew": project.base_crew,
        "base_gear": project.base_gear,
        "base_oop": project.base_oop,
        "base_cost": project.base_cost,
        "skill_multiplier": project.skill_multiplier,
        "subtotal": project.subtotal,
        "contingency_pct": project.contingency_pct,
        "contingency": project.contingency,
        "grand_total": project.grand_total,
        "profit_margin_pct": project.profit_margin_pct,
        "client_price": project.client_price,
        "nett_profit": project.nett_profit,
    })


def _crew_dict(line: models.ProjectCrewLine) -> dict:
    return {
        "role": line.role,
        "qty": line.qty,
        "days": line.days,
        "rate_per_day": line.rate_per_day,
        "line_total": line.line_total,
    }


def _gear_dict(line: models.ProjectGearLine) -> dict:
    return {
        "name": line.name,
        "qty": line.qty,
        "days": line.days,
        "rate_per_day": line.rate_per_day,
        "line_total": line.line_total,
    }


def project_to_dict(project: models.Project, details: bool = True) -> dict:
    """Shape a stored project for the API. `details=False` gives the list item."""
    data = {
        "id": project.id,
        "type": project.type,
        "meta": _omit_none({
            "project_title": project.title,
            "client_name": project.client_name,
            "created_at": project.created_at.isoformat() if project.created_at else None,
        }),
        "basic": _omit_none({
            "duration_min": project.duration_min,
            "delivery_days": project.delivery_days,
            "flags": project.flags or {},
            "outputs": project.outputs or {},
            "brief": project.brief,
        }),
        "pricing": _pricing_dict(project),
        "created_at": project.created_at,
        "updated_at": project.updated_at,
    }
    if not details:
        return data

    business = _omit_none({
        "income_goal": project.income_goal,
        "living_cost": project.living_cost,
        "skill_level": project.skill_level,
        "profit_margin_pct": project.profit_margin_pct,
    })
    data.update({
        "crew": [_crew_dict(line) for line in project.crew_lines],
        "gear": [_gear_dict(line) for line in project.gear_lines],
        "oop": _omit_none({
            "transport": project.oop_transport,
            "fnb": project.oop_fnb,
            "misc": project.oop_misc,
        }),
        "complexity": {
            "answers": list(project.complexity_answers or []),
            "weighted_score": project.weighted_score,
            "multiplier": project.complexity_multiplier,
        },
        "business": business or None,
    })
    return data


def project_to_quote_dict(project: models.Project) -> dict:
    """Rebuild the QuoteOutput dict (as produced at save time) for PDF export."""
    data = {
        "project_type": project.type,
        "complexity": {
            "weighted_score": project.weighted_score,
            "multiplier": project.complexity_multiplier,
        },
        "breakdown": {
            "development": [_crew_dict(line) for line in project.crew_lines],
            "production": [_gear_dict(line) for line in project.gear_lines],
        },
    }
    data.update(_pricing_dict(project))
    return data
