"""
Template registry: built-in project types and template validation.
"""

import pytest

from reelquote.pricing import ProjectType, TemplateConfigError, UnknownProjectType
from reelquote.pricing.templates import TEMPLATE_DATA, TemplateRegistry


def test_registry_has_every_project_type(registry):
    assert sorted(registry.list_project_types()) == sorted(t.value for t in ProjectType)


def test_every_template_has_ten_weights(registry):
    for template in registry.values():
        assert len(template.complexity_weights) == 10


def test_lookup_by_enum(registry):
    assert registry[ProjectType.ADS].label == "Ads / Commercial"
    assert ProjectType.ADS in registry


def test_unknown_type_raises_and_get_defaults(registry):
    with pytest.raises(UnknownProjectType):
        registry.get_template("wedding")
    assert registry.get("wedding") is None
    assert "wedding" not in registry


def test_malformed_weights_fail_at_build():
    data = {"ads": dict(TEMPLATE_DATA["ads"], complexity_weights=[0.1] * 9)}
    with pytest.raises(TemplateConfigError):
        TemplateRegistry.from_data(data)


def test_unknown_rule_action_fails_at_build():
    data = {"ads": dict(TEMPLATE_DATA["ads"], rules=[
        {"name": "Bad", "trigger": {}, "action": {"remove_crew": []}},
    ])}
    with pytest.raises(TemplateConfigError):
        TemplateRegistry.from_data(data)


def test_registry_is_read_only(registry):
    with pytest.raises(TypeError):
        registry["ads"] = None


def test_template_to_dict(registry):
    data = registry["company_profile"].to_dict()
    assert data["type"] == "company_profile"
    assert data["contingency_pct"] == 0.05
    assert data["crew"][0]["role"] == "Director/DOP"
    assert "line_total" not in data["crew"][0]
    assert data["rules"] == ["Add Animator when animations requested"]


def test_unknown_trigger_key_fails_at_build():
    data = {"ads": dict(TEMPLATE_DATA["ads"], rules=[
        {"name": "Bad", "trigger": {"flags": {"drone": True}}, "action": {}},
    ])}
    with pytest.raises(TemplateConfigError) as exc:
        TemplateRegistry.from_data(data)
    assert exc.value.field == "rules.trigger.flags"
