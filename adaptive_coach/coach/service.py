"""Async facade over the decision orchestrator for event-driven callers.

The computation is synchronous and in-memory; the async boundary exists for
callers that await everything (UI handlers, task queues). Calls share no
mutable state and may run concurrently.
"""

from collections.abc import Sequence

from loguru import logger

from adaptive_coach.coach.orchestrator import DecisionOrchestrator
from adaptive_coach.coach.presentation import (
    PROGRESSION_PRESENTATION,
    TIP_ICON,
    display_anti_patterns,
    top_recommendations,
)
from adaptive_coach.coach.schemas import (
    AntiPatternReport,
    ExerciseRecommendations,
    Insight,
    ProgressionEvaluation,
    ProgressionView,
    ReadinessEvaluation,
    ReadinessView,
)
from adaptive_coach.metrics.constants import READINESS_SUMMARIES
from adaptive_coach.state.models import Assessment, Feedback, Session, UserProfile

INSIGHT_TIPS = 3


class CoachingService:
    def __init__(self, orchestrator: DecisionOrchestrator, top_recommendations: int = 5):
        self.orchestrator = orchestrator
        self.top_recommendations = top_recommendations

    async def evaluate_readiness(
        self,
        profile: UserProfile | None,
        assessment: Assessment | None,
        sessions: Sequence[Session] = (),
    ) -> ReadinessEvaluation:
        return self.orchestrator.evaluate_readiness(profile, assessment, sessions)

    async def determine_progression(
        self,
        profile: UserProfile | None,
        assessment: Assessment | None,
        feedback: Feedback | None,
        sessions: Sequence[Session] = (),
    ) -> ProgressionEvaluation:
        return self.orchestrator.determine_progression(profile, assessment, feedback, sessions)

    async def get_exercise_recommendations(
        self,
        profile: UserProfile | None,
        assessment: Assessment | None,
        sessions: Sequence[Session] = (),
    ) -> ExerciseRecommendations:
        return self.orchestrator.get_exercise_recommendations(profile, assessment, sessions)

    async def detect_anti_patterns(
        self,
        profile: UserProfile | None,
        sessions: Sequence[Session] = (),
    ) -> AntiPatternReport:
        return self.orchestrator.detect_anti_patterns(profile, sessions)

    async def readiness_view(
        self,
        profile: UserProfile | None,
        assessment: Assessment | None,
        sessions: Sequence[Session] = (),
    ) -> ReadinessView:
        """Readiness summary for display: score, band, summary text, top tips."""
        evaluation = await self.evaluate_readiness(profile, assessment, sessions)
        return ReadinessView(
            score=evaluation.score,
            level=evaluation.level,
            color=evaluation.color,
            label=evaluation.label,
            summary=READINESS_SUMMARIES[evaluation.level],
            base_score=evaluation.base_score,
            total_modifier=evaluation.total_modifier,
            modifiers=evaluation.modifiers,
            recommendations=top_recommendations(evaluation.recommendations, self.top_recommendations),
            alerts=[event.params.recommendation or event.params.reason or "" for event in evaluation.alerts],
        )

    async def progression_view(
        self,
        profile: UserProfile | None,
        assessment: Assessment | None,
        feedback: Feedback | None,
        sessions: Sequence[Session] = (),
    ) -> ProgressionView:
        """Progression summary for display: action, adjustment factor and insights.

        Insights list the decision first, then one warning per anti-pattern,
        then the top tips.
        """
        evaluation = await self.determine_progression(profile, assessment, feedback, sessions)
        presentation = PROGRESSION_PRESENTATION[evaluation.decision]
        anti_patterns = display_anti_patterns(evaluation.anti_patterns)

        insights = [Insight(type="decision", text=evaluation.reason, icon=presentation.icon)]
        insights += [
            Insight(type="warning", text=pattern.recommendation, icon=pattern.icon)
            for pattern in anti_patterns
            if pattern.recommendation
        ]
        insights += [Insight(type="tip", text=rec.text, icon=TIP_ICON) for rec in evaluation.recommendations[:INSIGHT_TIPS]]

        logger.debug("Progression view built", decision=evaluation.decision.value, insights=len(insights))
        return ProgressionView(
            decision=evaluation.decision,
            label=presentation.label,
            icon=presentation.icon,
            reason=evaluation.reason,
            adjustment_factor=presentation.adjustment_factor,
            anti_patterns=anti_patterns,
            recommendations=evaluation.recommendations,
            insights=insights,
            summary=f"{presentation.label}: {evaluation.reason}",
            has_warnings=bool(anti_patterns),
            warning_count=len(anti_patterns),
        )
