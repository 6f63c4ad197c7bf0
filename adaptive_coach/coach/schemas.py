"""Decision orchestrator output contracts.

Results always carry the base calculation. When the engine fails
(``success=False``) the event-derived lists are empty and the final values
equal the base values.
"""

from typing import Literal

from pydantic import BaseModel, Field

from adaptive_coach.rules.conditions import RuleEvent
from adaptive_coach.state.enums import ProgressionAction, ReadinessLevel


class Recommendation(BaseModel):
    text: str
    priority: int = 0
    category: str = "general"


class ReadinessModifier(BaseModel):
    value: float
    reason: str | None = None
    category: str | None = None


class AntiPatternDescriptor(BaseModel):
    type: str
    severity: str | None = None
    message: str = Field(description="Display label of the pattern")
    reason: str | None = None
    recommendation: str | None = None


class EvaluationResult(BaseModel):
    success: bool = True
    error: str | None = None
    events: list[RuleEvent] = Field(default_factory=list)


class ReadinessEvaluation(EvaluationResult):
    base_score: int = Field(ge=0, le=100)
    total_modifier: float = 0.0
    score: int = Field(ge=0, le=100)
    level: ReadinessLevel
    label: str
    color: str
    modifiers: list[ReadinessModifier] = Field(default_factory=list)
    alerts: list[RuleEvent] = Field(default_factory=list)
    warnings: list[RuleEvent] = Field(default_factory=list)
    recommendations: list[Recommendation] = Field(default_factory=list)


class ProgressionEvaluation(EvaluationResult):
    base_decision: ProgressionAction
    base_reason: str
    base_confidence: float
    decision: ProgressionAction
    reason: str
    source: Literal["rules", "base"] = Field(description="Whether a progression event or the base matrix decided")
    anti_patterns: list[AntiPatternDescriptor] = Field(default_factory=list)
    recommendations: list[Recommendation] = Field(default_factory=list)


class ExerciseRecommendations(EvaluationResult):
    exclude_exercises: list[RuleEvent] = Field(default_factory=list)
    modify_exercises: list[RuleEvent] = Field(default_factory=list)
    recommend_exercises: list[RuleEvent] = Field(default_factory=list)
    excluded_targets: list[str] = Field(default_factory=list, description="Union of exclusion targets, first-seen order")
    recommendations: list[Recommendation] = Field(default_factory=list)


class AntiPatternReport(EvaluationResult):
    patterns: list[AntiPatternDescriptor] = Field(default_factory=list)
    warnings: list[RuleEvent] = Field(default_factory=list)
    suggestions: list[Recommendation] = Field(default_factory=list)


# -----------------------------
# UI-facing views
# -----------------------------
class DisplayRecommendation(BaseModel):
    text: str
    category: str
    icon: str


class DisplayAntiPattern(AntiPatternDescriptor):
    icon: str


class Insight(BaseModel):
    type: Literal["decision", "warning", "tip"]
    text: str
    icon: str


class ReadinessView(BaseModel):
    score: int
    level: ReadinessLevel
    color: str
    label: str
    summary: str
    base_score: int
    total_modifier: float
    modifiers: list[ReadinessModifier] = Field(default_factory=list)
    recommendations: list[DisplayRecommendation] = Field(default_factory=list)
    alerts: list[str] = Field(default_factory=list)


class ProgressionView(BaseModel):
    decision: ProgressionAction
    label: str
    icon: str
    reason: str
    adjustment_factor: float
    anti_patterns: list[DisplayAntiPattern] = Field(default_factory=list)
    recommendations: list[Recommendation] = Field(default_factory=list)
    insights: list[Insight] = Field(default_factory=list)
    summary: str
    has_warnings: bool = False
    warning_count: int = 0
