"""
Data model for the pricing pipeline.

All records are frozen dataclasses: a QuoteOutput is created fresh on every
preview and never mutated afterwards. `to_dict()` produces the JSON contract
shared by the API, storage and the PDF generator. Optional figures that were
never computed are omitted from the dict, not emitted as 0.
"""

import enum
from dataclasses import dataclass, field
from typing import Mapping, Optional, Union

from .errors import PricingError


class ProjectType(str, enum.Enum):
    COMPANY_PROFILE = "company_profile"
    ADS = "ads"
    FASHION = "fashion"
    EVENT = "event"
    SOCIAL = "social"
    ANIMATION = "animation"


class SkillLevel(str, enum.Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    PRO = "pro"


# --- Line items ---

@dataclass(frozen=True)
class CrewLine:
    role: str
    qty: float
    days: float
    rate_per_day: float
    line_total: Optional[float] = None

    def to_dict(self) -> dict:
        data = {
            "role": self.role,
            "qty": self.qty,
            "days": self.days,
            "rate_per_day": self.rate_per_day,
        }
        if self.line_total is not None:
            data["line_total"] = self.line_total
        return data

    @classmethod
    def from_dict(cls, data: Mapping) -> "CrewLine":
        return cls(
            role=str(data.get("role", "")),
            qty=data.get("qty", 0),
            days=data.get("days", 0),
            rate_per_day=data.get("rate_per_day", 0),
        )


@dataclass(frozen=True)
class GearLine:
    name: str
    qty: float
    days: float
    rate_per_day: float
    line_total: Optional[float] = None

    def to_dict(self) -> dict:
        data = {
            "name": self.name,
            "qty": self.qty,
            "days": self.days,
            "rate_per_day": self.rate_per_day,
        }
        if self.line_total is not None:
            data["line_total"] = self.line_total
        return data

    @classmethod
    def from_dict(cls, data: Mapping) -> "GearLine":
        return cls(
            name=str(data.get("name", "")),
            qty=data.get("qty", 0),
            days=data.get("days", 0),
            rate_per_day=data.get("rate_per_day", 0),
        )


@dataclass(frozen=True)
class OOPCosts:
    """Out-of-pocket expenses. Every field is optional and defaults to 0."""
    transport: Optional[float] = None
    fnb: Optional[float] = None
    misc: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Optional[Mapping]) -> "OOPCosts":
        data = data or {}
        return cls(
            transport=data.get("transport"),
            fnb=data.get("fnb"),
            misc=data.get("misc"),
        )


# --- Inputs ---

@dataclass(frozen=True)
class ComplexityInput:
    """
    Ten 0-5 ratings, plus an optional precomputed score/multiplier pair.

    When both weighted_score and multiplier are truthy the assembler uses
    them as-is instead of scoring the answers (replay of archived quotes).
    """
    answers: tuple
    weighted_score: Optional[float] = None
    multiplier: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Mapping) -> "ComplexityInput":
        return cls(
            answers=tuple(data.get("answers") or ()),
            weighted_score=data.get("weighted_score"),
            multiplier=data.get("multiplier"),
        )


@dataclass(frozen=True)
class BusinessConstraints:
    income_goal: Optional[float] = None
    living_cost: Optional[float] = None
    skill_level: Optional[SkillLevel] = None
    profit_margin_pct: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Optional[Mapping]) -> Optional["BusinessConstraints"]:
        if not data:
            return None
        skill = data.get("skill_level")
        try:
            skill_level = SkillLevel(skill) if skill else None
        except ValueError:
            raise PricingError(
                f"Unknown skill level: {skill}. "
                f"Expected one of: {[level.value for level in SkillLevel]}",
                field="business.skill_level",
            ) from None
        return cls(
            income_goal=data.get("income_goal"),
            living_cost=data.get("living_cost"),
            skill_level=skill_level,
            profit_margin_pct=data.get("profit_margin_pct"),
        )


@dataclass(frozen=True)
class QuoteInput:
    project_type: str
    crew: tuple
    gear: tuple
    complexity: ComplexityInput
    oop: Optional[OOPCosts] = None
    business: Optional[BusinessConstraints] = None
    contingency_pct: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Mapping) -> "QuoteInput":
        """Build from a snake_case dict (request payload or stored record)."""
        project_type = data.get("project_type")
        if isinstance(project_type, enum.Enum):
            project_type = project_type.value
        return cls(
            project_type=project_type,
            crew=tuple(CrewLine.from_dict(line) for line in data.get("crew") or []),
            gear=tuple(GearLine.from_dict(line) for line in data.get("gear") or []),
            complexity=ComplexityInput.from_dict(data.get("complexity") or {}),
            oop=OOPCosts.from_dict(data.get("oop")),
            business=BusinessConstraints.from_dict(data.get("business")),
            contingency_pct=data.get("contingency_pct"),
        )


# --- Outputs ---

@dataclass(frozen=True)
class BaseCosts:
    base_crew: float
    base_gear: float
    base_oop: float
    base_cost: float


@dataclass(frozen=True)
class ComplexityResult:
    weighted_score: float
    multiplier: float

    def to_dict(self) -> dict:
        return {"weighted_score": self.weighted_score, "multiplier": self.multiplier}


@dataclass(frozen=True)
class QuoteOutput:
    project_type: str
    base_crew: float
    base_gear: float
    base_oop: float
    base_cost: float
    complexity: ComplexityResult
    skill_multiplier: float
    subtotal: float
    contingency_pct: float
    contingency: float
    grand_total: float
    development: tuple = ()
    production: tuple = ()
    profit_margin_pct: Optional[float] = None
    client_price: Optional[float] = None
    nett_profit: Optional[float] = None

    def to_dict(self) -> dict:
        data = {
            "project_type": self.project_type,
            "base_crew": self.base_crew,
            "base_gear": self.base_gear,
            "base_oop": self.base_oop,
            "base_cost": self.base_cost,
            "complexity": self.complexity.to_dict(),
            "skill_multiplier": self.skill_multiplier,
            "subtotal": self.subtotal,
            "contingency_pct": self.contingency_pct,
            "contingency": self.contingency,
            "grand_total": self.grand_total,
            "breakdown": {
                "development": [line.to_dict() for line in self.development],
                "production": [line.to_dict() for line in self.production],
            },
        }
        # Absent margin is not the same as a zero margin, so omit rather than zero.
        for key in ("profit_margin_pct", "client_price", "nett_profit"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        return data


# --- Templates and rules ---

@dataclass(frozen=True)
class RuleTrigger:
    flags: Mapping = field(default_factory=dict)
    outputs: Mapping = field(default_factory=dict)
    # Any logistics key makes the trigger unmatchable; None means not referenced.
    logistics: Optional[Mapping] = None


@dataclass(frozen=True)
class AddCrew:
    lines: tuple


@dataclass(frozen=True)
class AdjustCrewDays:
    role: str
    days: float


@dataclass(frozen=True)
class AddGear:
    lines: tuple


RuleAction = Union[AddCrew, AdjustCrewDays, AddGear]


@dataclass(frozen=True)
class Rule:
    name: str
    trigger: RuleTrigger
    actions: tuple


@dataclass(frozen=True)
class TemplateConfig:
    type: str
    label: str
    contingency_pct: float
    skill_defaults: Mapping
    crew: tuple
    gear: tuple
    complexity_weights: tuple
    rules: tuple = ()

    def to_dict(self) -> dict:
        return {
            "type": self.type,
            "label": self.label,
            "contingency_pct": self.contingency_pct,
            "skill_defaults": {str(getattr(k, "value", k)): v for k, v in self.skill_defaults.items()},
            "crew": [line.to_dict() for line in self.crew],
            "gear": [line.to_dict() for line in self.gear],
            "complexity_weights": list(self.complexity_weights),
            "rules": [rule.name for rule in self.rules],
        }
