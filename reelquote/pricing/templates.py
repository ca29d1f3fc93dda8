"""
Template registry: maps project_type strings to TemplateConfig.

The registry is an immutable object handed to the pipeline at call time;
nothing in the pipeline reads module-level state. Raw template data is
validated when the registry is built, so a malformed template (e.g. a weight
vector that isn't 10 long) fails at startup, never mid-quote.
"""

from collections.abc import Mapping
from types import MappingProxyType
from typing import Iterable

from .complexity import validate_weights
from .constants import DEFAULT_CONTINGENCY_PCT, FLAG_KEYS, OUTPUT_KEYS, SKILL_MULTIPLIERS
from .errors import TemplateConfigError, UnknownProjectType
from .types import (
    AddCrew,
    AddGear,
    AdjustCrewDays,
    CrewLine,
    GearLine,
    Rule,
    RuleTrigger,
    TemplateConfig,
)


TEMPLATE_DATA = {
    "company_profile": {
        "label": "Company Profile",
        "crew": [
            {"role": "Director/DOP", "qty": 1, "days": 1, "rate_per_day": 5_000_000},
            {"role": "Photographer", "qty": 1, "days": 1, "rate_per_day": 2_500_000},
            {"role": "Assistant Camera", "qty": 2, "days": 1, "rate_per_day": 1_000_000},
            {"role": "Gaffer", "qty": 1, "days": 1, "rate_per_day": 3_000_000},
            {"role": "Editor", "qty": 1, "days": 1, "rate_per_day": 3_000_000},
        ],
        "gear": [
            {"name": "Camera Kit", "qty": 1, "days": 1, "rate_per_day": 500_000},
            {"name": "Lens Kit", "qty": 1, "days": 1, "rate_per_day": 300_000},
            {"name": "Drone", "qty": 1, "days": 1, "rate_per_day": 1_500_000},
            {"name": "Audio Kit", "qty": 1, "days": 1, "rate_per_day": 500_000},
            {"name": "Lighting Kit", "qty": 1, "days": 1, "rate_per_day": 2_000_000},
        ],
        "complexity_weights": [0.12, 0.1, 0.1, 0.08, 0.1, 0.15, 0.1, 0.1, 0.05, 0.1],
        "rules": [
            {
                "name": "Add Animator when animations requested",
                "trigger": {"flags": {"animations": True}},
                "action": {
                    "add_crew": [
                        {"role": "Animator", "qty": 1, "days": 1, "rate_per_day": 2_500_000},
                    ],
                },
            },
        ],
    },
    "ads": {
        "label": "Ads / Commercial",
        "crew": [
            {"role": "Director", "qty": 1, "days": 1, "rate_per_day": 6_000_000},
            {"role": "Producer", "qty": 1, "days": 1, "rate_per_day": 3_500_000},
            {"role": "1st Assistant Director", "qty": 1, "days": 1, "rate_per_day": 2_000_000},
            {"role": "DOP", "qty": 1, "days": 1, "rate_per_day": 4_000_000},
            {"role": "Camera Assistant", "qty": 2, "days": 1, "rate_per_day": 1_200_000},
            {"role": "Gaffer", "qty": 1, "days": 1, "rate_per_day": 3_500_000},
            {"role": "Editor", "qty": 1, "days": 1, "rate_per_day": 3_500_000},
        ],
        "gear": [
            {"name": "Cinema Camera Package", "qty": 1, "days": 1, "rate_per_day": 1_500_000},
            {"name": "Lens Set", "qty": 1, "days": 1, "rate_per_day": 750_000},
            {"name": "Lighting Package", "qty": 1, "days": 1, "rate_per_day": 2_500_000},
            {"name": "Grip & Rigging", "qty": 1, "days": 1, "rate_per_day": 1_000_000},
            {"name": "Audio Package", "qty": 1, "days": 1, "rate_per_day": 600_000},
        ],
        "complexity_weights": [0.1, 0.14, 0.12, 0.1, 0.08, 0.16, 0.1, 0.08, 0.06, 0.06],
        "rules": [
            {
                "name": "Extra editor day for multiple outputs",
                "trigger": {"outputs": {"cut15": True, "cut30": True}},
                "action": {"adjust_crew_days": [{"role": "Editor", "days": 0.5}]},
            },
        ],
    },
    "fashion": {
        "label": "Fashion",
        "crew": [
            {"role": "Creative Director", "qty": 1, "days": 1, "rate_per_day": 5_500_000},
            {"role": "Director/DOP", "qty": 1, "days": 1, "rate_per_day": 4_500_000},
            {"role": "Stylist", "qty": 1, "days": 1, "rate_per_day": 3_000_000},
            {"role": "Camera Assistant", "qty": 1, "days": 1, "rate_per_day": 1_200_000},
            {"role": "Gaffer", "qty": 1, "days": 1, "rate_per_day": 3_000_000},
            {"role": "Editor/Colorist", "qty": 1, "days": 1, "rate_per_day": 3_500_000},
        ],
        "gear": [
            {"name": "Camera + Prime Lens Kit", "qty": 1, "days": 1, "rate_per_day": 900_000},
            {"name": "Stabiliser", "qty": 1, "days": 1, "rate_per_day": 600_000},
            {"name": "Lighting Fashion Kit", "qty": 1, "days": 1, "rate_per_day": 2_200_000},
            {"name": "Backdrop & Props", "qty": 1, "days": 1, "rate_per_day": 800_000},
        ],
        "complexity_weights": [0.11, 0.12, 0.11, 0.08, 0.09, 0.13, 0.1, 0.1, 0.08, 0.08],
        "rules": [
            {
                "name": "Add Makeup Artist for high complexity",
                "trigger": {"flags": {"sfx": True}},
                "action": {
                    "add_crew": [
                        {"role": "Makeup Artist", "qty": 1, "days": 1, "rate_per_day": 2_000_000},
                    ],
                },
            },
        ],
    },
    "event": {
        "label": "Event Coverage",
        "crew": [
            {"role": "Lead Videographer", "qty": 1, "days": 1, "rate_per_day": 3_500_000},
            {"role": "Second Shooter", "qty": 1, "days": 1, "rate_per_day": 2_500_000},
            {"role": "Drone Operator", "qty": 1, "days": 1, "rate_per_day": 2_000_000},
            {"role": "Field Producer", "qty": 1, "days": 1, "rate_per_day": 2_500_000},
            {"role": "Editor", "qty": 1, "days": 1, "rate_per_day": 3_000_000},
        ],
        "gear": [
            {"name": "Camera Kit A", "qty": 1, "days": 1, "rate_per_day": 600_000},
            {"name": "Camera Kit B", "qty": 1, "days": 1, "rate_per_day": 500_000},
            {"name": "Audio Wireless Kit", "qty": 1, "days": 1, "rate_per_day": 450_000},
            {"name": "Stabiliser", "qty": 1, "days": 1, "rate_per_day": 400_000},
            {"name": "Portable Lighting", "qty": 1, "days": 1, "rate_per_day": 300_000},
        ],
        "complexity_weights": [0.08, 0.09, 0.13, 0.1, 0.08, 0.1, 0.09, 0.09, 0.12, 0.12],
        "rules": [
            {
                # Logistics state is not tracked, so this rule never fires.
                "name": "Add livestream tech for high logistics",
                "trigger": {"logistics": {"livestream": True}},
                "action": {
                    "add_crew": [
                        {"role": "Livestream Technician", "qty": 1, "days": 1, "rate_per_day": 2_200_000},
                    ],
                },
            },
        ],
    },
    "social": {
        "label": "Social Media (YT/TikTok/Reels)",
        "crew": [
            {"role": "Content Director", "qty": 1, "days": 1, "rate_per_day": 3_000_000},
            {"role": "Videographer", "qty": 1, "days": 1, "rate_per_day": 2_500_000},
            {"role": "Editor/Motion", "qty": 1, "days": 1, "rate_per_day": 2_500_000},
            {"role": "Production Assistant", "qty": 1, "days": 1, "rate_per_day": 900_000},
        ],
        "gear": [
            {"name": "Mirrorless Camera", "qty": 1, "days": 1, "rate_per_day": 400_000},
            {"name": "Prime Lens Set", "qty": 1, "days": 1, "rate_per_day": 300_000},
            {"name": "Audio Kit", "qty": 1, "days": 1, "rate_per_day": 250_000},
            {"name": "Portable Lighting", "qty": 1, "days": 1, "rate_per_day": 250_000},
        ],
        "complexity_weights": [0.1, 0.11, 0.12, 0.08, 0.12, 0.1, 0.09, 0.08, 0.1, 0.1],
        "rules": [
            {
                "name": "Extra edit time for multiple deliverables",
                "trigger": {"outputs": {"cut15": True, "cut30": True, "cut60": True}},
                "action": {"adjust_crew_days": [{"role": "Editor/Motion", "days": 0.5}]},
            },
        ],
    },
    "animation": {
        "label": "Animation / Motion",
        "crew": [
            {"role": "Creative Director", "qty": 1, "days": 1, "rate_per_day": 4_500_000},
            {"role": "Producer", "qty": 1, "days": 1, "rate_per_day": 3_000_000},
            {"role": "Storyboard Artist", "qty": 1, "days": 1, "rate_per_day": 2_500_000},
            {"role": "Animator/Motion Designer", "qty": 1, "days": 1, "rate_per_day": 4_000_000},
            {"role": "Illustrator", "qty": 1, "days": 1, "rate_per_day": 3_000_000},
            {"role": "Sound Designer", "qty": 1, "days": 1, "rate_per_day": 2_000_000},
        ],
        "gear": [
            {"name": "Animation Workstation", "qty": 1, "days": 1, "rate_per_day": 500_000},
            {"name": "Software Licenses", "qty": 1, "days": 1, "rate_per_day": 400_000},
            {"name": "Voiceover Booth", "qty": 1, "days": 1, "rate_per_day": 700_000},
        ],
        "complexity_weights": [0.08, 0.14, 0.12, 0.1, 0.1, 0.11, 0.09, 0.08, 0.09, 0.09],
        "rules": [
            {
                "name": "Add Voiceover talent when requested",
                "trigger": {"flags": {"voiceover": True}},
                "action": {
                    "add_crew": [
                        {"role": "Voice Over Talent", "qty": 1, "days": 1, "rate_per_day": 2_000_000},
                    ],
                },
            },
            {
                "name": "Add FX specialist for SFX",
                "trigger": {"flags": {"sfx": True}},
                "action": {
                    "add_crew": [
                        {"role": "VFX Specialist", "qty": 1, "days": 1, "rate_per_day": 3_000_000},
                    ],
                },
            },
        ],
    },
}


def parse_rule(raw: dict) -> Rule:
    """Turn a loosely-typed rule dict into a Rule with tagged actions."""
    trigger = raw.get("trigger") or {}
    action = raw.get("action") or {}
    known = {"add_crew", "adjust_crew_days", "add_gear"}
    unknown = set(action) - known
    if unknown:
        raise TemplateConfigError(
            f"Rule '{raw.get('name', '?')}' has unknown action(s): {sorted(unknown)}",
            field="rules.action",
        )
    for section, allowed in (("flags", FLAG_KEYS), ("outputs", OUTPUT_KEYS)):
        stray = set(trigger.get(section) or {}) - set(allowed)
        if stray:
            raise TemplateConfigError(
                f"Rule '{raw.get('name', '?')}' triggers on unknown {section}: {sorted(stray)}",
                field=f"rules.trigger.{section}",
            )

    actions = []
    if action.get("add_crew"):
        actions.append(AddCrew(lines=tuple(CrewLine.from_dict(line) for line in action["add_crew"])))
    for adjustment in action.get("adjust_crew_days") or []:
        actions.append(AdjustCrewDays(role=adjustment["role"], days=float(adjustment["days"])))
    if action.get("add_gear"):
        actions.append(AddGear(lines=tuple(GearLine.from_dict(line) for line in action["add_gear"])))

    return Rule(
        name=raw.get("name", ""),
        trigger=RuleTrigger(
            flags=MappingProxyType(dict(trigger.get("flags") or {})),
            outputs=MappingProxyType(dict(trigger.get("outputs") or {})),
            logistics=(
                MappingProxyType(dict(trigger["logistics"] or {}))
                if "logistics" in trigger else None
            ),
        ),
        actions=tuple(actions),
    )


def build_template(project_type: str, raw: dict) -> TemplateConfig:
    """Validate and freeze one template. Raises TemplateConfigError."""
    return TemplateConfig(
        type=project_type,
        label=raw.get("label", project_type.replace("_", " ").title()),
        contingency_pct=raw.get("contingency_pct", DEFAULT_CONTINGENCY_PCT),
        skill_defaults=MappingProxyType(dict(raw.get("skill_defaults") or SKILL_MULTIPLIERS)),
        crew=tuple(CrewLine.from_dict(line) for line in raw.get("crew", [])),
        gear=tuple(GearLine.from_dict(line) for line in raw.get("gear", [])),
        complexity_weights=validate_weights(raw.get("complexity_weights", []), project_type),
        rules=tuple(parse_rule(rule) for rule in raw.get("rules", [])),
    )


class TemplateRegistry(Mapping):
    """Read-only project_type -> TemplateConfig mapping."""

    def __init__(self, templates: Iterable[TemplateConfig]):
        self._templates = MappingProxyType({t.type: t for t in templates})

    @classmethod
    def from_data(cls, data: dict) -> "TemplateRegistry":
        return cls(build_template(project_type, raw) for project_type, raw in data.items())

    def __getitem__(self, project_type) -> TemplateConfig:
        key = getattr(project_type, "value", project_type)
        if key not in self._templates:
            raise UnknownProjectType(
                f"No template registered for project type: {key}. "
                f"Available: {list(self._templates.keys())}",
                field="project_type",
            )
        return self._templates[key]

    def __iter__(self):
        return iter(self._templates)

    def __len__(self) -> int:
        return len(self._templates)

    def __contains__(self, project_type) -> bool:
        return getattr(project_type, "value", project_type) in self._templates

    def get(self, project_type, default=None):
        if project_type in self:
            return self[project_type]
        return default

    def get_template(self, project_type) -> TemplateConfig:
        """Same as registry[project_type]; raises UnknownProjectType."""
        return self[project_type]

    def list_project_types(self) -> list[str]:
        return list(self._templates.keys())


def build_default_registry() -> TemplateRegistry:
    """Registry of the built-in project types."""
    return TemplateRegistry.from_data(TEMPLATE_DATA)
