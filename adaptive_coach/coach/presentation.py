"""Display metadata for orchestrator results: icons, labels, adjustment factors."""

from collections.abc import Sequence
from dataclasses import dataclass

from adaptive_coach.coach.schemas import AntiPatternDescriptor, DisplayAntiPattern, DisplayRecommendation, Recommendation
from adaptive_coach.metrics.constants import PROGRESSION_LABELS
from adaptive_coach.state.enums import ProgressionAction
from adaptive_coach.state.models import Feedback

CATEGORY_ICONS: dict[str, str] = {
    "energy": "⚡",
    "doms": "💪",
    "stress": "🧘",
    "motivation": "🎯",
    "hydration": "💧",
    "nutrition": "🍌",
    "menstrual": "🌸",
    "recovery": "🛌",
    "medical": "🩺",
    "general": "✅",
}

ANTI_PATTERN_ICONS: dict[str, str] = {
    "overtraining": "🔥",
    "undertraining": "😴",
    "inconsistency": "📅",
    "motivation_decline": "📉",
    "recurring_pain": "⚠️",
    "pain_ignored": "🚨",
    "high_rpe_streak": "🥵",
    "low_completion": "❌",
    "streak_broken": "💔",
}
DEFAULT_ANTI_PATTERN_ICON = "⚠️"
TIP_ICON = "💡"


@dataclass(frozen=True)
class ProgressionPresentation:
    label: str
    icon: str
    adjustment_factor: float  # multiplier applied to the next session's volume


PROGRESSION_PRESENTATION: dict[ProgressionAction, ProgressionPresentation] = {
    ProgressionAction.INCREASE: ProgressionPresentation(PROGRESSION_LABELS[ProgressionAction.INCREASE], "📈", 1.1),
    ProgressionAction.MAINTAIN: ProgressionPresentation(PROGRESSION_LABELS[ProgressionAction.MAINTAIN], "➡️", 1.0),
    ProgressionAction.DECREASE: ProgressionPresentation(PROGRESSION_LABELS[ProgressionAction.DECREASE], "📉", 0.9),
    ProgressionAction.REST: ProgressionPresentation(PROGRESSION_LABELS[ProgressionAction.REST], "🛌", 0.0),
}


def category_icon(category: str | None) -> str:
    return CATEGORY_ICONS.get(category or "general", CATEGORY_ICONS["general"])


def anti_pattern_icon(pattern: str | None) -> str:
    return ANTI_PATTERN_ICONS.get(pattern or "", DEFAULT_ANTI_PATTERN_ICON)


def default_reason(decision: ProgressionAction, feedback: Feedback | None) -> str:
    """Fallback explanation when neither a rule nor the matrix supplied one."""
    if feedback is None:
        return ""

    if decision == ProgressionAction.INCREASE:
        if feedback.could_do_more:
            return "Avresti potuto fare di più - sei pronto per il prossimo livello"
        return "Ottime prestazioni - puoi aumentare l'intensità"

    if decision == ProgressionAction.DECREASE:
        if feedback.pain:
            return "Dolore riportato - riduci l'intensità per sicurezza"
        if feedback.rpe is not None and feedback.rpe >= 9:
            return "Allenamento molto impegnativo - concediti più recupero"
        if feedback.completion is not None and feedback.completion < 60:
            return "Completamento basso - prova con meno volume"
        return "Considera di ridurre l'intensità"

    if decision == ProgressionAction.REST:
        return "Il corpo ha bisogno di recuperare - prenditi un giorno di riposo"

    return "Il livello attuale è appropriato per te"


def top_recommendations(recommendations: Sequence[Recommendation], limit: int = 5) -> list[DisplayRecommendation]:
    return [
        DisplayRecommendation(text=rec.text, category=rec.category, icon=category_icon(rec.category))
        for rec in recommendations[:limit]
    ]


def display_anti_patterns(patterns: Sequence[AntiPatternDescriptor]) -> list[DisplayAntiPattern]:
    return [DisplayAntiPattern(**pattern.model_dump(), icon=anti_pattern_icon(pattern.type)) for pattern in patterns]
