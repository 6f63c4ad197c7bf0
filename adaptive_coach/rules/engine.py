"""Forward-chaining rule evaluation engine.

Lifecycle:
    UNLOADED  predicate library registered, no rules
    LOADED    at least one rule or rule set added
    READY     load_all_rulesets() completed (the startup call)

``run`` is accepted in every state: an engine with zero rules returns an
empty, successful result. Rules are evaluated in registration order and every
satisfied rule emits its event. Evaluation errors are converted into a failed
``EngineResult`` at the ``run`` boundary and never raised to the caller.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from loguru import logger
from pydantic import ValidationError

from adaptive_coach.core.clock import Clock, local_now
from adaptive_coach.rules.conditions import AllCondition, AnyCondition, Condition, LeafCondition, Rule, RuleEvent, RuleSet
from adaptive_coach.rules.errors import RuleDefinitionError, UnknownOperatorError
from adaptive_coach.rules.operators import Operator, Predicate, default_operators

_PATH_TOKEN = re.compile(r"[^.\[\]]+")
_MISSING = object()


class EngineState(StrEnum):
    UNLOADED = "unloaded"
    LOADED = "loaded"
    READY = "ready"


class DuplicateRulePolicy(StrEnum):
    """What to do when a rule name is already registered."""

    REPLACE = "replace"  # swap in place, keeping the original position
    APPEND = "append"  # keep both; both fire
    REJECT = "reject"  # keep the first, skip the newcomer


@dataclass(frozen=True)
class EngineResult:
    success: bool
    events: list[RuleEvent] = field(default_factory=list)
    failure_events: list[RuleEvent] = field(default_factory=list)
    error: str | None = None


def resolve_path(value: Any, path: str) -> Any:
    """Walk ``$.a.b[0]`` / ``a.b.0`` into nested mappings and lists.

    Returns the module sentinel ``_MISSING`` when a segment does not exist.
    """
    selector = path[1:] if path.startswith("$") else path
    for token in _PATH_TOKEN.findall(selector):
        if isinstance(value, Mapping):
            if token not in value:
                return _MISSING
            value = value[token]
        elif isinstance(value, (list, tuple)) and token.isdigit():
            index = int(token)
            if index >= len(value):
                return _MISSING
            value = value[index]
        else:
            return _MISSING
    return value


class RulesEngine:
    """Holds the predicate registry and the ordered rule list."""

    def __init__(
        self,
        operators: Iterable[Operator] | None = None,
        duplicate_policy: DuplicateRulePolicy = DuplicateRulePolicy.REPLACE,
        clock: Clock = local_now,
    ):
        self.duplicate_policy = DuplicateRulePolicy(duplicate_policy)
        self.state = EngineState.UNLOADED
        self._operators: dict[str, Predicate] = {}
        self._rules: list[Rule] = []
        for operator in operators if operators is not None else default_operators(clock):
            self.add_operator(operator.name, operator.callback)

    @property
    def rules(self) -> tuple[Rule, ...]:
        return tuple(self._rules)

    @property
    def rules_loaded(self) -> bool:
        return self.state == EngineState.READY

    @property
    def operator_names(self) -> list[str]:
        return sorted(self._operators)

    def add_operator(self, name: str, callback: Predicate) -> None:
        self._operators[name] = callback

    def add_rule(self, rule: Rule | Mapping[str, Any]) -> bool:
        """Register one rule.

        Returns:
            False when the duplicate policy skipped the rule, True otherwise

        Raises:
            RuleDefinitionError: if the rule does not follow the rule grammar
        """
        if not isinstance(rule, Rule):
            name = rule.get("name") if isinstance(rule, Mapping) else None
            try:
                rule = Rule.model_validate(rule)
            except ValidationError as e:
                raise RuleDefinitionError(name, str(e)) from e

        existing = next((i for i, r in enumerate(self._rules) if r.name == rule.name), None)
        if existing is not None and self.duplicate_policy == DuplicateRulePolicy.REJECT:
            logger.warning("Duplicate rule skipped", rule=rule.name)
            return False
        if existing is not None and self.duplicate_policy == DuplicateRulePolicy.REPLACE:
            logger.debug("Duplicate rule replaced", rule=rule.name)
            self._rules[existing] = rule
        else:
            self._rules.append(rule)

        if self.state == EngineState.UNLOADED:
            self.state = EngineState.LOADED
        return True

    def load_ruleset(self, ruleset: RuleSet | Mapping[str, Any]) -> int:
        """Add every valid rule of a rule set; invalid rules are logged and skipped.

        Returns:
            Number of rules registered
        """
        if isinstance(ruleset, RuleSet):
            raw_rules: Iterable[Any] = ruleset.rules
        elif isinstance(ruleset, Mapping) and isinstance(ruleset.get("rules"), list):
            raw_rules = ruleset["rules"]
        else:
            logger.warning("Invalid ruleset provided")
            return 0

        loaded = 0
        for raw in raw_rules:
            try:
                if self.add_rule(raw):
                    loaded += 1
            except RuleDefinitionError as e:
                logger.error("Failed to add rule", rule=e.rule_name, error=str(e))
        return loaded

    def load_all_rulesets(self, rulesets: Iterable[RuleSet | Mapping[str, Any]]) -> int:
        total = sum(self.load_ruleset(ruleset) for ruleset in rulesets)
        self.state = EngineState.READY
        logger.info("Rule sets loaded", rules=len(self._rules), added=total)
        return total

    def run(self, facts: Mapping[str, Any]) -> EngineResult:
        """Evaluate every rule against ``facts``.

        Any exception raised while evaluating (unknown operator, a predicate
        failing) is logged and returned as ``success=False`` with no events.
        """
        events: list[RuleEvent] = []
        failure_events: list[RuleEvent] = []
        try:
            for rule in self._rules:
                if self._evaluate(rule.conditions, facts):
                    events.append(rule.event)
                else:
                    failure_events.append(rule.event)
        except Exception as e:
            logger.exception("Rules engine error", error=str(e))
            return EngineResult(success=False, error=str(e))

        logger.debug("Rules evaluated", rules=len(self._rules), fired=len(events))
        return EngineResult(success=True, events=events, failure_events=failure_events)

    def _evaluate(self, condition: Condition, facts: Mapping[str, Any]) -> bool:
        if isinstance(condition, AllCondition):
            return all(self._evaluate(child, facts) for child in condition.conditions)
        if isinstance(condition, AnyCondition):
            return any(self._evaluate(child, facts) for child in condition.conditions)
        return self._evaluate_leaf(condition, facts)

    def _evaluate_leaf(self, leaf: LeafCondition, facts: Mapping[str, Any]) -> bool:
        predicate = self._operators.get(leaf.operator)
        if predicate is None:
            raise UnknownOperatorError(leaf.operator)

        if leaf.fact not in facts:
            return False
        value = facts[leaf.fact]
        if leaf.path:
            value = resolve_path(value, leaf.path)
            if value is _MISSING:
                return False
        return bool(predicate(value, leaf.value))
