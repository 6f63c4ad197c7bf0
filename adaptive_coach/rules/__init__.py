"""Rule grammar, predicate library, evaluation engine and packaged rule sets."""

from adaptive_coach.rules.conditions import Rule, RuleEvent, RuleSet
from adaptive_coach.rules.engine import DuplicateRulePolicy, EngineResult, EngineState, RulesEngine
from adaptive_coach.rules.errors import RuleDefinitionError, RulesEngineError, RuleSetLoadError, UnknownOperatorError

__all__ = [
    "DuplicateRulePolicy",
    "EngineResult",
    "EngineState",
    "Rule",
    "RuleDefinitionError",
    "RuleEvent",
    "RuleSet",
    "RuleSetLoadError",
    "RulesEngine",
    "RulesEngineError",
    "UnknownOperatorError",
]
