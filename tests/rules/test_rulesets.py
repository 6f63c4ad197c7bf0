"""Tests for rule set loading and the packaged rule sets.

Tests cover:
- Packaged rule sets load completely, in category order
- Every operator referenced by a packaged rule is registered
- Trend rules use the time-ordered trend facts
- JSON and YAML files, unknown files after the known categories
- Load errors for missing directories and malformed files
- Extra rule sets override packaged rules by name
"""

import json
from collections.abc import Iterator

import pytest

from adaptive_coach.rules.conditions import AllCondition, AnyCondition, LeafCondition
from adaptive_coach.rules.engine import DuplicateRulePolicy, EngineState
from adaptive_coach.rules.errors import RuleSetLoadError
from adaptive_coach.rules.loader import (
    build_default_engine,
    load_rulesets_from_dir,
    packaged_rulesets_dir,
    read_ruleset,
    ruleset_files,
    ruleset_name,
)
from adaptive_coach.state.enums import EventType

RULE = {
    "name": "custom_warning",
    "conditions": {"all": [{"fact": "hour", "operator": "greaterThan", "value": 5}]},
    "event": {"type": "warning", "params": {"reason": "custom"}},
}


def _leaves(condition) -> Iterator[LeafCondition]:
    if isinstance(condition, (AllCondition, AnyCondition)):
        for child in condition.conditions:
            yield from _leaves(child)
    else:
        yield condition


# ============================================================================
# PACKAGED RULE SETS
# ============================================================================


def test_packaged_rulesets_load(engine):
    assert engine.state == EngineState.READY
    assert len(engine.rules) == 62
    assert engine.rules[0].name == "readiness_diffuse_severe_doms"
    assert engine.rules[-1].name == "warning_weekend_catch_up"


def test_packaged_rule_names_are_unique():
    names = [rule["name"] for document in load_rulesets_from_dir() for rule in document["rules"]]
    assert len(names) == len(set(names))


def test_packaged_rules_use_registered_operators(engine):
    registered = set(engine.operator_names)
    used = {leaf.operator for rule in engine.rules for leaf in _leaves(rule.conditions)}
    assert used <= registered


def test_packaged_trend_rules_read_time_ordered_facts(engine):
    """History series are newest first; trend rules must use the trend facts."""
    series_trends = [
        rule.name
        for rule in engine.rules
        for leaf in _leaves(rule.conditions)
        if leaf.operator == "trendDirection" and (leaf.path or "").startswith("$.recent")
    ]
    assert series_trends == []
    trend_facts = {
        leaf.path
        for rule in engine.rules
        for leaf in _leaves(rule.conditions)
        if leaf.fact == "history" and (leaf.path or "").endswith("Trend")
    }
    assert {"$.readinessTrend", "$.rpeTrend", "$.motivationTrend"} <= trend_facts


def test_packaged_files_follow_category_order():
    names = [ruleset_name(path) for path in ruleset_files(packaged_rulesets_dir())]
    assert names == ["readiness", "progression", "anti_pattern", "special_cases", "exercise_selection", "alerts"]


def test_packaged_progression_events_have_actions(engine):
    for rule in engine.rules:
        if rule.event.type == EventType.PROGRESSION:
            assert rule.event.params.action is not None, rule.name
            assert rule.event.params.priority is not None, rule.name


def test_packaged_readiness_modifiers_have_values(engine):
    for rule in engine.rules:
        if rule.event.type == EventType.READINESS_MODIFIER:
            assert rule.event.params.modifier is not None, rule.name


# ============================================================================
# FILES
# ============================================================================


def test_yaml_and_json_rulesets(tmp_path):
    (tmp_path / "readiness.rules.yaml").write_text(
        "rules:\n"
        "  - name: yaml_rule\n"
        "    conditions:\n"
        "      all:\n"
        "        - fact: hour\n"
        "          operator: lessThan\n"
        "          value: 12\n"
        "    event:\n"
        "      type: readiness_modifier\n"
        "      params:\n"
        "        modifier: 2\n",
        encoding="utf-8",
    )
    (tmp_path / "custom.rules.json").write_text(json.dumps({"rules": [RULE]}), encoding="utf-8")
    (tmp_path / "notes.txt").write_text("ignored", encoding="utf-8")

    documents = load_rulesets_from_dir(tmp_path)
    assert [doc["rules"][0]["name"] for doc in documents] == ["yaml_rule", "custom_warning"]


def test_missing_directory(tmp_path):
    with pytest.raises(RuleSetLoadError):
        load_rulesets_from_dir(tmp_path / "missing")


def test_malformed_json(tmp_path):
    path = tmp_path / "alerts.rules.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(RuleSetLoadError):
        read_ruleset(path)


def test_document_without_rules_list(tmp_path):
    path = tmp_path / "alerts.rules.json"
    path.write_text(json.dumps({"rules": {"name": "x"}}), encoding="utf-8")
    with pytest.raises(RuleSetLoadError):
        read_ruleset(path)


def test_build_engine_from_directory(tmp_path, clock):
    (tmp_path / "alerts.rules.json").write_text(json.dumps({"rules": [RULE]}), encoding="utf-8")
    engine = build_default_engine(directory=tmp_path, clock=clock)
    assert [rule.name for rule in engine.rules] == ["custom_warning"]
    assert engine.rules_loaded is True


def test_extra_rulesets_replace_by_name(clock):
    override = {
        "name": "alert_severe_pain",
        "conditions": {"all": [{"fact": "feedback", "path": "$.hadPain", "operator": "equal", "value": True}]},
        "event": {"type": "alert", "params": {"priority": 100, "reason": "override"}},
    }
    engine = build_default_engine(
        directory=packaged_rulesets_dir(),
        clock=clock,
        duplicate_policy=DuplicateRulePolicy.REPLACE,
        extra_rulesets=[{"rules": [override]}],
    )
    assert len(engine.rules) == 62
    replaced = next(rule for rule in engine.rules if rule.name == "alert_severe_pain")
    assert replaced.event.params.reason == "override"
