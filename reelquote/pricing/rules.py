"""
Template rule engine.

Runs before quote assembly whenever feature flags or output selections
change. Each matching rule can add crew lines, add gear lines, or shift a crew
line's days. Rules never remove lines.

Re-running the engine on its own output is a no-op: added lines are skipped
when a line with the same role/name already exists, and day adjustments are
skipped for rules listed in `applied` from the previous pass.
"""

import logging
from dataclasses import dataclass, replace
from typing import Iterable, Mapping, Optional

from .templates import TemplateRegistry
from .types import AddCrew, AddGear, AdjustCrewDays, Rule

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RuleResult:
    crew: tuple
    gear: tuple
    changed: bool
    applied: frozenset = frozenset()


def trigger_matches(rule: Rule, flags: Mapping, outputs: Mapping) -> bool:
    """Every flag and output key must equal the current state (as booleans)."""
    trigger = rule.trigger
    for key, expected in trigger.flags.items():
        if bool(flags.get(key)) != bool(expected):
            return False
    for key, expected in trigger.outputs.items():
        if bool(outputs.get(key)) != bool(expected):
            return False
    # Logistics state is not tracked; a trigger on it is treated as unmet.
    if trigger.logistics is not None:
        return False
    return True


def _has_role(crew: list, role: str) -> bool:
    role = role.lower()
    return any(line.role.lower() == role for line in crew)


def _has_gear(gear: list, name: str) -> bool:
    name = name.lower()
    return any(line.name.lower() == name for line in gear)


def _adjust_days(crew: list, role: str, delta: float) -> bool:
    role = role.lower()
    for index, line in enumerate(crew):
        if line.role.lower() == role:
            days = max(0.0, (line.days or 0) + delta)
            if days != line.days:
                crew[index] = replace(line, days=days)
                return True
            return False
    return False


def apply_rules(project_type, crew: Iterable, gear: Iterable,
                flags: Optional[Mapping], outputs: Optional[Mapping],
                registry: TemplateRegistry,
                applied: Iterable[str] = ()) -> RuleResult:
    """
    Evaluate the project type's rules in declaration order.

    Args:
        project_type: key into the registry; None skips evaluation.
        crew, gear: current CrewLine / GearLine sequences.
        flags, outputs: current boolean selections.
        registry: TemplateRegistry supplying the rules.
        applied: rule names whose day adjustments were already made.
            Re-running on a previous result is only a no-op when that
            result's `applied` is passed back here; with the default, day
            adjustments are made again on every pass.

    Returns:
        RuleResult with the (possibly) updated lines, a `changed` flag so
        callers can skip redundant writes, and the names of matched rules
        whose day adjustments are done (pass these back as `applied`).
        Unchanged sequences are returned as given.
    """
    crew = tuple(crew)
    gear = tuple(gear)
    if not project_type:
        return RuleResult(crew=crew, gear=gear, changed=False)

    template = registry.get_template(project_type)
    flags = flags or {}
    outputs = outputs or {}
    already_applied = frozenset(applied)

    crew_lines = list(crew)
    gear_lines = list(gear)
    crew_changed = False
    gear_changed = False
    matched = set()

    for rule in template.rules:
        if not trigger_matches(rule, flags, outputs):
            continue
        adjustments = [a for a in rule.actions if isinstance(a, AdjustCrewDays)]
        # Day adjustments wait until every role they target exists, then run once.
        adjust_now = rule.name not in already_applied and all(
            _has_role(crew_lines, a.role) for a in adjustments
        )

        for action in rule.actions:
            if isinstance(action, AddCrew):
                for line in action.lines:
                    if not _has_role(crew_lines, line.role):
                        crew_lines.append(line)
                        crew_changed = True
            elif isinstance(action, AdjustCrewDays):
                if adjust_now and _adjust_days(crew_lines, action.role, action.days):
                    crew_changed = True
            elif isinstance(action, AddGear):
                for line in action.lines:
                    if not _has_gear(gear_lines, line.name):
                        gear_lines.append(line)
                        gear_changed = True
            else:
                raise TypeError(f"Unhandled rule action: {action!r}")

        if not adjustments or adjust_now or rule.name in already_applied:
            matched.add(rule.name)

    if crew_changed or gear_changed:
        logger.debug("Rules for %s changed lines: %s", project_type, sorted(matched))

    return RuleResult(
        crew=tuple(crew_lines) if crew_changed else crew,
        gear=tuple(gear_lines) if gear_changed else gear,
        changed=crew_changed or gear_changed,
        applied=frozenset(matched),
    )
