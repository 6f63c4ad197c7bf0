"""Rule grammar.

A rule set file is ``{"rules": [Rule, ...]}``. A rule is::

    {
        "name": "pain_reported_decrease",
        "conditions": {"all": [
            {"fact": "feedback", "path": "$.pain", "operator": "equal", "value": true}
        ]},
        "event": {"type": "progression", "params": {"action": "decrease", "priority": 100}}
    }

Conditions are a tagged union: ``{"all": [...]}`` and ``{"any": [...]}`` groups
nest arbitrarily, leaves are ``{fact, operator, value, path?}``. The top level
of a rule must be a group. Models are frozen; a loaded rule is never mutated.
"""

from __future__ import annotations

from typing import Annotated, Any, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag

from adaptive_coach.state.enums import EventType, ProgressionAction


class GrammarModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class LeafCondition(GrammarModel):
    fact: str = Field(min_length=1)
    operator: str = Field(min_length=1)
    value: Any = None
    path: str | None = None


class AllCondition(GrammarModel):
    conditions: list[Condition] = Field(alias="all")


class AnyCondition(GrammarModel):
    conditions: list[Condition] = Field(alias="any")


def _condition_kind(value: Any) -> str | None:
    if isinstance(value, dict):
        if "all" in value:
            return "all"
        if "any" in value:
            return "any"
        return "leaf"
    if isinstance(value, AllCondition):
        return "all"
    if isinstance(value, AnyCondition):
        return "any"
    if isinstance(value, LeafCondition):
        return "leaf"
    return None


Condition = Annotated[
    Union[
        Annotated[AllCondition, Tag("all")],
        Annotated[AnyCondition, Tag("any")],
        Annotated[LeafCondition, Tag("leaf")],
    ],
    Discriminator(_condition_kind),
]

GroupCondition = Annotated[
    Union[Annotated[AllCondition, Tag("all")], Annotated[AnyCondition, Tag("any")]],
    Discriminator(_condition_kind),
]

AllCondition.model_rebuild()
AnyCondition.model_rebuild()


class EventParams(BaseModel):
    """Event payload. Unknown keys are kept as-is."""

    model_config = ConfigDict(frozen=True, extra="allow")

    modifier: float | None = None
    action: ProgressionAction | None = None
    reason: str | None = None
    priority: int | None = None
    recommendation: str | None = None
    category: str | None = None
    severity: str | None = None
    pattern: str | None = None
    targets: list[str] | None = None


class RuleEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: EventType
    params: EventParams = Field(default_factory=EventParams)


class Rule(GrammarModel):
    name: str = Field(min_length=1)
    conditions: GroupCondition
    event: RuleEvent


class RuleSet(BaseModel):
    model_config = ConfigDict(frozen=True)

    rules: list[Rule] = Field(default_factory=list)
