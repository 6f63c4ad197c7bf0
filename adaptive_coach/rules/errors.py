"""Error types for the rules module.

Evaluation errors never reach the caller of ``RulesEngine.run``: they are
converted into a failed ``EngineResult``. Load-time errors are raised by the
loader and logged-and-skipped by ``RulesEngine.load_ruleset``.
"""


class RulesEngineError(RuntimeError):
    """Base class for rule engine failures."""


class RuleDefinitionError(RulesEngineError):
    """Raised when a rule document does not follow the rule grammar."""

    def __init__(self, name: str | None, detail: str):
        self.rule_name = name
        super().__init__(f"Invalid rule {name or '<unnamed>'}: {detail}")


class UnknownOperatorError(RulesEngineError):
    """Raised during evaluation when a condition names an unregistered operator."""

    def __init__(self, operator: str):
        self.operator = operator
        super().__init__(f"Unknown operator: {operator}")


class RuleSetLoadError(RulesEngineError):
    """Raised when a rule set file cannot be read or parsed."""
