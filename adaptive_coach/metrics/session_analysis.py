"""Per-session and cross-session analysis outside the rule engine.

- compare_workout_session: planned vs executed exercises per phase
- analyze_session_performance: readiness-vs-effort classification
- calculate_consistency_metrics: streaks and weekly frequency
- detect_session_patterns: quick heuristics over the last 7 sessions
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum

from adaptive_coach.core.clock import ensure_aware, resolve_now
from adaptive_coach.metrics.calculations import average, round_half_up
from adaptive_coach.state.models import ExerciseDetails, Session

PHASES = ("warmup", "workout", "cooldown")

PATTERN_MIN_SESSIONS = 5
PATTERN_WINDOW = 7
STREAK_MAX_GAP_DAYS = 2  # one rest day between sessions keeps the streak


# -----------------------------
# Planned vs executed
# -----------------------------
@dataclass
class PhaseComparison:
    planned: int = 0
    completed: int = 0
    skipped: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class SkippedExercise:
    phase: str
    name: str | None
    duration: float


@dataclass
class SessionComparison:
    total_planned_exercises: int = 0
    total_completed_exercises: int = 0
    total_skipped_exercises: int = 0
    total_planned_duration: float = 0
    total_actual_duration: float = 0
    completion_rate: int = 0
    duration_difference: float = 0
    phases: dict[str, PhaseComparison] = field(default_factory=lambda: {phase: PhaseComparison() for phase in PHASES})
    skipped_exercises: list[SkippedExercise] = field(default_factory=list)


def compare_workout_session(planned: ExerciseDetails, executed: ExerciseDetails) -> SessionComparison:
    """Compare the planned workout with what was actually done.

    Exercises are matched by name (or id) within each phase; durations are
    in seconds.
    """
    comparison = SessionComparison()

    for phase in PHASES:
        planned_exercises = getattr(planned, phase)
        completed_exercises = getattr(executed, phase)
        phase_result = comparison.phases[phase]

        phase_result.planned = len(planned_exercises)
        phase_result.completed = len(completed_exercises)
        comparison.total_planned_exercises += len(planned_exercises)
        comparison.total_completed_exercises += len(completed_exercises)
        comparison.total_planned_duration += sum(ex.duration for ex in planned_exercises)
        comparison.total_actual_duration += sum(ex.duration for ex in completed_exercises)

        completed_keys = {ex.key for ex in completed_exercises}
        for exercise in planned_exercises:
            if exercise.key in completed_keys:
                continue
            phase_result.skipped.append(exercise.key)
            comparison.skipped_exercises.append(SkippedExercise(phase, exercise.key, exercise.duration))
            comparison.total_skipped_exercises += 1

    if comparison.total_planned_exercises > 0:
        rate = comparison.total_completed_exercises / comparison.total_planned_exercises * 100
        comparison.completion_rate = int(round_half_up(rate))

    comparison.duration_difference = comparison.total_actual_duration - comparison.total_planned_duration
    return comparison


# -----------------------------
# Single session performance
# -----------------------------
class ReadinessVsPerformance(StrEnum):
    NORMAL = "normal"
    PUSHED_TOO_HARD = "pushed_too_hard"
    COULD_PUSH_MORE = "could_push_more"
    OPTIMAL = "optimal"


class EffortLevel(StrEnum):
    APPROPRIATE = "appropriate"
    TOO_EASY = "too_easy"
    TOO_HARD = "too_hard"
    OPTIMAL = "optimal"


@dataclass
class SessionPerformance:
    readiness_vs_performance: ReadinessVsPerformance = ReadinessVsPerformance.NORMAL
    effort_level: EffortLevel = EffortLevel.APPROPRIATE
    recommendations: list[str] = field(default_factory=list)
    alerts: list[str] = field(default_factory=list)


def analyze_session_performance(session: Session, comparison: SessionComparison | None = None) -> SessionPerformance:
    """Classify how effort matched readiness in one session.

    Sessions without both assessment and feedback get the neutral analysis.
    Missing values default to readiness 70, RPE 5, and completion taken from
    ``comparison`` (else 100).
    """
    analysis = SessionPerformance()
    pre, post = session.pre_workout, session.post_workout
    if pre is None or post is None:
        return analysis

    readiness = pre.readiness_score if pre.readiness_score is not None else 70
    rpe = post.rpe if post.rpe is not None else 5
    if post.completion is not None:
        completion = post.completion
    elif comparison is not None:
        completion = comparison.completion_rate
    else:
        completion = 100

    if readiness < 50 and rpe >= 7:
        analysis.readiness_vs_performance = ReadinessVsPerformance.PUSHED_TOO_HARD
        analysis.alerts.append("Hai spinto molto nonostante una bassa prontezza")
        analysis.recommendations.append("Prossima volta ascolta di più il tuo corpo")
    elif readiness > 80 and rpe <= 4 and completion == 100:
        analysis.readiness_vs_performance = ReadinessVsPerformance.COULD_PUSH_MORE
        analysis.recommendations.append("Eri in ottima forma, potresti aumentare l'intensità")
    elif readiness > 70 and rpe >= 8:
        analysis.readiness_vs_performance = ReadinessVsPerformance.OPTIMAL
        analysis.recommendations.append("Ottimo bilanciamento tra prontezza e sforzo!")

    if rpe <= 3 and completion >= 90:
        analysis.effort_level = EffortLevel.TOO_EASY
        analysis.recommendations.append("Considera di aumentare la difficoltà degli esercizi")
    elif rpe >= 9 and completion < 70:
        analysis.effort_level = EffortLevel.TOO_HARD
        analysis.recommendations.append("Riduci l'intensità per completare più esercizi")
        analysis.alerts.append("Completamento basso con sforzo massimo")
    elif 6 <= rpe <= 8 and completion >= 80:
        analysis.effort_level = EffortLevel.OPTIMAL

    if post.pain:
        analysis.alerts.append("Dolore riportato durante l'allenamento")
        analysis.recommendations.append("Monitora le zone doloranti e considera un riposo extra")

    if post.technique_confidence is not None and post.technique_confidence <= 2:
        analysis.recommendations.append("Rivedi la tecnica degli esercizi più difficili")

    return analysis


# -----------------------------
# Consistency
# -----------------------------
@dataclass(frozen=True)
class ConsistencyMetrics:
    total_sessions: int = 0
    current_streak: int = 0
    longest_streak: int = 0
    average_sessions_per_week: float = 0
    consistency: int = 0  # 0-100


def calculate_consistency_metrics(sessions: Sequence[Session], now: datetime | None = None) -> ConsistencyMetrics:
    """Streaks (one rest day allowed between sessions) and weekly frequency.

    consistency = frequency (up to 50, at 5/week) + current streak (up to 30,
    at 7) + longest streak (up to 20, at 14), capped at 100.
    """
    if not sessions:
        return ConsistencyMetrics()

    now = resolve_now(now)
    times = sorted(ensure_aware(s.completed_at, now.tzinfo) for s in sessions)
    total = len(times)

    longest = run = 1
    for previous, current in zip(times, times[1:]):
        if (current.date() - previous.date()).days <= STREAK_MAX_GAP_DAYS:
            run += 1
            longest = max(longest, run)
        else:
            run = 1

    days_since_last = (now - times[-1]).days
    current_streak = run if days_since_last <= STREAK_MAX_GAP_DAYS else 0

    if total >= 2:
        weeks = max(1.0, (times[-1] - times[0]).total_seconds() / (7 * 86_400))
        per_week = round_half_up(total / weeks, 1)
    else:
        per_week = float(total)

    score = round_half_up((per_week / 5) * 50 + (current_streak / 7) * 30 + (longest / 14) * 20)
    return ConsistencyMetrics(
        total_sessions=total,
        current_streak=current_streak,
        longest_streak=longest,
        average_sessions_per_week=per_week,
        consistency=int(min(100, score)),
    )


# -----------------------------
# Heuristic patterns
# -----------------------------
@dataclass(frozen=True)
class SessionPattern:
    type: str
    severity: str  # info, warning, alert, positive
    message: str
    recommendation: str


def detect_session_patterns(sessions: Sequence[Session]) -> list[SessionPattern]:
    """Simple count-based patterns over the 7 most recent sessions.

    Needs at least 5 sessions; returns an empty list otherwise.
    """
    if len(sessions) < PATTERN_MIN_SESSIONS:
        return []

    recent = sorted(sessions, key=lambda s: s.completed_at, reverse=True)[:PATTERN_WINDOW]
    feedbacks = [s.post_workout for s in recent if s.post_workout is not None]
    patterns: list[SessionPattern] = []

    high_rpe = sum(1 for f in feedbacks if f.rpe is not None and f.rpe >= 8)
    if high_rpe >= 3:
        patterns.append(
            SessionPattern(
                type="high_rpe_streak",
                severity="warning",
                message=f"{high_rpe} sessioni recenti con RPE alto",
                recommendation="Considera di ridurre l'intensità per permettere il recupero",
            )
        )

    low_completion = sum(1 for f in feedbacks if f.completion is not None and f.completion < 70)
    if low_completion >= 3:
        patterns.append(
            SessionPattern(
                type="low_completion",
                severity="warning",
                message="Completamento basso nelle sessioni recenti",
                recommendation="Gli allenamenti potrebbero essere troppo impegnativi",
            )
        )

    if sum(1 for f in feedbacks if f.pain) >= 2:
        patterns.append(
            SessionPattern(
                type="recurring_pain",
                severity="alert",
                message="Dolore riportato in più sessioni recenti",
                recommendation="Consulta un professionista se il dolore persiste",
            )
        )

    low_motivation = sum(1 for s in recent if s.pre_workout is not None and s.pre_workout.motivation <= 2)
    if low_motivation >= 3:
        patterns.append(
            SessionPattern(
                type="low_motivation",
                severity="info",
                message="Motivazione bassa nelle sessioni recenti",
                recommendation="Prova a variare gli allenamenti o gli orari",
            )
        )

    rpes = [f.rpe for f in feedbacks if f.rpe is not None]
    if len(rpes) >= 5 and average(rpes[:3]) < average(rpes[-3:]) - 1:
        patterns.append(
            SessionPattern(
                type="improving_efficiency",
                severity="positive",
                message="Stai diventando più efficiente!",
                recommendation="Ottimo progresso, continua così",
            )
        )

    return patterns
