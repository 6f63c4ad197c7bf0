"""Decision orchestrator.

Combines the base calculators with the rule engine's events:

- readiness: base score + sum of ``readiness_modifier`` events, clamped
- progression: highest-priority ``progression`` event, else the base matrix
- exercises / anti-patterns: filtered event lists plus recommendations

The orchestrator is a pure function of its inputs and the engine's loaded
rules. It owns no state beyond the injected engine and clock, and never
persists anything.
"""

from collections.abc import Iterable, Sequence

from loguru import logger

from adaptive_coach.coach.presentation import default_reason
from adaptive_coach.coach.schemas import (
    AntiPatternDescriptor,
    AntiPatternReport,
    ExerciseRecommendations,
    ProgressionEvaluation,
    ReadinessEvaluation,
    ReadinessModifier,
    Recommendation,
)
from adaptive_coach.core.clock import Clock, local_now
from adaptive_coach.facts.builder import prepare_facts
from adaptive_coach.metrics.calculations import (
    ProgressionDecision,
    ProgressionHistory,
    calculate_progression_decision,
    calculate_readiness_score,
    count_consecutive_high_rpe,
    get_readiness_level,
    round_half_up,
)
from adaptive_coach.metrics.constants import (
    ANTI_PATTERN_LABELS,
    HISTORY_LOOKBACK_DAYS,
    NEUTRAL_COMPLETION,
    NEUTRAL_RPE,
    READINESS_COLORS,
    READINESS_LABELS,
    SKIPPED_ASSESSMENT_SCORE,
)
from adaptive_coach.rules.conditions import RuleEvent
from adaptive_coach.rules.engine import EngineResult, RulesEngine
from adaptive_coach.state.enums import AntiPatternType, EventType
from adaptive_coach.state.models import Assessment, Feedback, Session, UserProfile


# -----------------------------
# Event helpers
# -----------------------------
def filter_events_by_type(events: Iterable[RuleEvent], event_type: EventType) -> list[RuleEvent]:
    return [event for event in events if event.type == event_type]


def get_highest_priority_event(events: Iterable[RuleEvent], event_type: EventType) -> RuleEvent | None:
    """Highest ``priority`` event of a type; ties go to the first seen."""
    highest: RuleEvent | None = None
    for event in filter_events_by_type(events, event_type):
        if highest is None or (event.params.priority or 0) > (highest.params.priority or 0):
            highest = event
    return highest


def aggregate_recommendations(events: Iterable[RuleEvent]) -> list[Recommendation]:
    """Recommendations of every event, by priority descending (stable)."""
    recommendations = [
        Recommendation(
            text=event.params.recommendation,
            priority=event.params.priority or 0,
            category=event.params.category or "general",
        )
        for event in events
        if event.params.recommendation
    ]
    return sorted(recommendations, key=lambda rec: rec.priority, reverse=True)


def describe_anti_patterns(events: Iterable[RuleEvent]) -> list[AntiPatternDescriptor]:
    descriptors = []
    for event in filter_events_by_type(events, EventType.ANTI_PATTERN):
        pattern = event.params.pattern or "unknown"
        try:
            message = ANTI_PATTERN_LABELS[AntiPatternType(pattern)]
        except ValueError:
            message = event.params.reason or pattern
        descriptors.append(
            AntiPatternDescriptor(
                type=pattern,
                severity=event.params.severity,
                message=message,
                reason=event.params.reason,
                recommendation=event.params.recommendation,
            )
        )
    return descriptors


def _clamp_score(value: float) -> int:
    return int(round_half_up(max(0.0, min(100.0, value))))


class DecisionOrchestrator:
    """Runs the engine over freshly derived facts and folds in the base calculators."""

    def __init__(
        self,
        engine: RulesEngine,
        clock: Clock = local_now,
        lookback_days: int = HISTORY_LOOKBACK_DAYS,
    ):
        self.engine = engine
        self.clock = clock
        self.lookback_days = lookback_days

    def _run(
        self,
        profile: UserProfile | None,
        assessment: Assessment | None = None,
        feedback: Feedback | None = None,
        sessions: Sequence[Session] = (),
    ) -> EngineResult:
        facts = prepare_facts(
            profile=profile,
            assessment=assessment,
            feedback=feedback,
            sessions=sessions,
            now=self.clock(),
            lookback_days=self.lookback_days,
        )
        return self.engine.run(facts)

    @staticmethod
    def score_assessment(assessment: Assessment | None, profile: UserProfile | None) -> tuple[int, Assessment | None]:
        """Base readiness score and the scored copy of the assessment.

        A missing or skipped assessment scores the neutral default.
        """
        if assessment is None:
            return SKIPPED_ASSESSMENT_SCORE, None
        if assessment.skipped:
            base = SKIPPED_ASSESSMENT_SCORE
        else:
            base = calculate_readiness_score(assessment, profile)
        return base, assessment.model_copy(update={"readiness_score": base})

    def evaluate_readiness(
        self,
        profile: UserProfile | None,
        assessment: Assessment | None,
        sessions: Sequence[Session] = (),
    ) -> ReadinessEvaluation:
        """Readiness score adjusted by the rule engine.

        Args:
            profile: User profile (gender drives the menstrual-phase weighting)
            assessment: Pre-workout assessment; None or skipped scores 70
            sessions: Recent session history

        Returns:
            ReadinessEvaluation with base and final score, level and events
        """
        base_score, scored = self.score_assessment(assessment, profile)
        result = self._run(profile, scored, sessions=sessions)

        modifier_events = filter_events_by_type(result.events, EventType.READINESS_MODIFIER)
        modifiers = [
            ReadinessModifier(value=event.params.modifier or 0, reason=event.params.reason, category=event.params.category)
            for event in modifier_events
        ]
        total_modifier = sum(modifier.value for modifier in modifiers)
        score = _clamp_score(base_score + total_modifier)
        level = get_readiness_level(score)

        logger.info(
            "Readiness evaluated",
            base_score=base_score,
            total_modifier=total_modifier,
            score=score,
            level=level.value,
            success=result.success,
        )
        return ReadinessEvaluation(
            success=result.success,
            error=result.error,
            events=result.events,
            base_score=base_score,
            total_modifier=total_modifier,
            score=score,
            level=level,
            label=READINESS_LABELS[level],
            color=READINESS_COLORS[level],
            modifiers=modifiers,
            alerts=filter_events_by_type(result.events, EventType.ALERT),
            warnings=filter_events_by_type(result.events, EventType.WARNING),
            recommendations=aggregate_recommendations(result.events),
        )

    @staticmethod
    def base_progression(feedback: Feedback | None, sessions: Sequence[Session]) -> ProgressionDecision:
        """Decision matrix on the feedback and history.

        A missing RPE or completion is replaced by a neutral value so that
        only pain or a high-RPE streak can move the decision off MAINTAIN.
        """
        history = ProgressionHistory(
            pain_reported=bool(feedback and feedback.pain),
            consecutive_high_rpe=count_consecutive_high_rpe(sessions),
            recent_sessions=tuple(sessions),
        )
        rpe = feedback.rpe if feedback and feedback.rpe is not None else NEUTRAL_RPE
        completion = feedback.completion if feedback and feedback.completion is not None else NEUTRAL_COMPLETION
        return calculate_progression_decision(rpe, completion, history)

    def determine_progression(
        self,
        profile: UserProfile | None,
        assessment: Assessment | None,
        feedback: Feedback | None,
        sessions: Sequence[Session] = (),
    ) -> ProgressionEvaluation:
        """Next-session progression: the highest-priority rule wins, the matrix is the fallback."""
        base = self.base_progression(feedback, sessions)
        _, scored = self.score_assessment(assessment, profile)
        result = self._run(profile, scored, feedback, sessions)

        event = get_highest_priority_event(result.events, EventType.PROGRESSION)
        if event is not None and event.params.action is not None:
            decision = event.params.action
            reason = event.params.reason or default_reason(decision, feedback)
            source = "rules"
        else:
            decision = base.action
            reason = base.reason
            source = "base"

        anti_patterns = describe_anti_patterns(result.events)
        logger.info(
            "Progression determined",
            decision=decision.value,
            source=source,
            base_decision=base.action.value,
            anti_patterns=len(anti_patterns),
            success=result.success,
        )
        return ProgressionEvaluation(
            success=result.success,
            error=result.error,
            events=result.events,
            base_decision=base.action,
            base_reason=base.reason,
            base_confidence=base.confidence,
            decision=decision,
            reason=reason,
            source=source,
            anti_patterns=anti_patterns,
            recommendations=aggregate_recommendations(result.events),
        )

    def get_exercise_recommendations(
        self,
        profile: UserProfile | None,
        assessment: Assessment | None,
        sessions: Sequence[Session] = (),
    ) -> ExerciseRecommendations:
        _, scored = self.score_assessment(assessment, profile)
        result = self._run(profile, scored, sessions=sessions)

        excluded = filter_events_by_type(result.events, EventType.EXCLUDE_EXERCISE)
        targets = list(dict.fromkeys(target for event in excluded for target in event.params.targets or []))
        logger.debug("Exercise recommendations", excluded=len(targets), success=result.success)
        return ExerciseRecommendations(
            success=result.success,
            error=result.error,
            events=result.events,
            exclude_exercises=excluded,
            modify_exercises=filter_events_by_type(result.events, EventType.MODIFY_EXERCISE),
            recommend_exercises=filter_events_by_type(result.events, EventType.RECOMMEND_EXERCISE),
            excluded_targets=targets,
            recommendations=aggregate_recommendations(result.events),
        )

    def detect_anti_patterns(
        self,
        profile: UserProfile | None,
        sessions: Sequence[Session] = (),
    ) -> AntiPatternReport:
        result = self._run(profile, sessions=sessions)
        patterns = describe_anti_patterns(result.events)
        if patterns:
            logger.warning("Anti-patterns detected", patterns=[p.type for p in patterns])
        return AntiPatternReport(
            success=result.success,
            error=result.error,
            events=result.events,
            patterns=patterns,
            warnings=filter_events_by_type(result.events, EventType.WARNING),
            suggestions=aggregate_recommendations(result.events),
        )
