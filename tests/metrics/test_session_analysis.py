"""Tests for per-session and cross-session analysis.

Tests cover:
- Planned vs executed comparison (skips, completion rate, duration delta)
- Readiness-vs-effort classification
- Consistency metrics (streaks, weekly frequency, score)
- Count-based session patterns
"""

from adaptive_coach.metrics.session_analysis import (
    EffortLevel,
    ReadinessVsPerformance,
    analyze_session_performance,
    calculate_consistency_metrics,
    compare_workout_session,
    detect_session_patterns,
)
from adaptive_coach.state.models import Assessment, ExerciseDetails, ExerciseEntry, Feedback, Session


def _session(now, readiness=None, rpe=None, completion=None, pain=False, technique_confidence=None) -> Session:
    return Session(
        completed_at=now,
        pre_workout=Assessment(readiness_score=readiness),
        post_workout=Feedback(rpe=rpe, completion=completion, pain=pain, technique_confidence=technique_confidence),
    )


# ============================================================================
# PLANNED VS EXECUTED
# ============================================================================


def test_compare_workout_session_counts_skips():
    planned = ExerciseDetails(
        warmup=[ExerciseEntry(name="jumping_jacks", duration=30), ExerciseEntry(name="arm_circles", duration=30)],
        workout=[ExerciseEntry(name="squat", duration=60)],
    )
    executed = ExerciseDetails(
        warmup=[ExerciseEntry(name="jumping_jacks", duration=30)],
        workout=[ExerciseEntry(name="squat", duration=50)],
    )

    comparison = compare_workout_session(planned, executed)

    assert comparison.total_planned_exercises == 3
    assert comparison.total_completed_exercises == 2
    assert comparison.total_skipped_exercises == 1
    assert comparison.completion_rate == 67
    assert comparison.duration_difference == -40
    assert comparison.phases["warmup"].skipped == ["arm_circles"]
    assert comparison.skipped_exercises[0].phase == "warmup"
    assert comparison.phases["cooldown"].planned == 0


def test_compare_matches_exercise_id_when_unnamed():
    planned = ExerciseDetails(workout=[ExerciseEntry(exercise_id="ex-1", duration=45)])
    executed = ExerciseDetails(workout=[ExerciseEntry(exercise_id="ex-1", duration=45)])
    comparison = compare_workout_session(planned, executed)
    assert comparison.total_skipped_exercises == 0
    assert comparison.completion_rate == 100


def test_compare_empty_plan_has_zero_rate():
    comparison = compare_workout_session(ExerciseDetails(), ExerciseDetails())
    assert comparison.completion_rate == 0
    assert comparison.duration_difference == 0


# ============================================================================
# PERFORMANCE
# ============================================================================


def test_pushed_too_hard_on_low_readiness(now):
    analysis = analyze_session_performance(_session(now, readiness=40, rpe=8, completion=90))
    assert analysis.readiness_vs_performance == ReadinessVsPerformance.PUSHED_TOO_HARD
    assert analysis.alerts


def test_could_push_more_needs_full_completion(now):
    full = analyze_session_performance(_session(now, readiness=85, rpe=3, completion=100))
    assert full.readiness_vs_performance == ReadinessVsPerformance.COULD_PUSH_MORE
    assert full.effort_level == EffortLevel.TOO_EASY

    partial = analyze_session_performance(_session(now, readiness=85, rpe=3, completion=95))
    assert partial.readiness_vs_performance == ReadinessVsPerformance.NORMAL


def test_too_hard_effort(now):
    analysis = analyze_session_performance(_session(now, readiness=60, rpe=9, completion=50))
    assert analysis.effort_level == EffortLevel.TOO_HARD
    assert "Completamento basso con sforzo massimo" in analysis.alerts


def test_optimal_balance(now):
    analysis = analyze_session_performance(_session(now, readiness=75, rpe=8, completion=85))
    assert analysis.readiness_vs_performance == ReadinessVsPerformance.OPTIMAL
    assert analysis.effort_level == EffortLevel.OPTIMAL


def test_pain_and_low_confidence_add_notes(now):
    analysis = analyze_session_performance(_session(now, readiness=60, rpe=6, completion=70, pain=True, technique_confidence=2))
    assert "Dolore riportato durante l'allenamento" in analysis.alerts
    assert len(analysis.recommendations) == 2


def test_missing_feedback_is_neutral(now):
    analysis = analyze_session_performance(Session(completed_at=now, pre_workout=Assessment()))
    assert analysis.readiness_vs_performance == ReadinessVsPerformance.NORMAL
    assert analysis.effort_level == EffortLevel.APPROPRIATE
    assert analysis.alerts == []


# ============================================================================
# CONSISTENCY
# ============================================================================


def test_consistency_daily_sessions(make_session, now):
    sessions = [make_session(days_ago=d) for d in (0, 1, 2)]
    metrics = calculate_consistency_metrics(sessions, now=now)

    assert metrics.total_sessions == 3
    assert metrics.current_streak == 3
    assert metrics.longest_streak == 3
    assert metrics.average_sessions_per_week == 3.0
    # 3/5*50 + 3/7*30 + 3/14*20 = 47.1
    assert metrics.consistency == 47


def test_consistency_one_rest_day_keeps_streak(make_session, now):
    sessions = [make_session(days_ago=d) for d in (0, 2, 4)]
    assert calculate_consistency_metrics(sessions, now=now).current_streak == 3


def test_consistency_old_sessions_have_no_current_streak(make_session, now):
    sessions = [make_session(days_ago=10), make_session(days_ago=9)]
    metrics = calculate_consistency_metrics(sessions, now=now)
    assert metrics.current_streak == 0
    assert metrics.longest_streak == 2


def test_consistency_without_sessions(now):
    metrics = calculate_consistency_metrics([], now=now)
    assert metrics.total_sessions == 0
    assert metrics.consistency == 0


# ============================================================================
# PATTERNS
# ============================================================================


def test_patterns_need_five_sessions(make_session):
    sessions = [make_session(days_ago=d, rpe=9, completion=40) for d in range(1, 5)]
    assert detect_session_patterns(sessions) == []


def test_patterns_on_struggling_history(make_session):
    sessions = [
        make_session(days_ago=d, rpe=9, completion=50, pain=True, motivation=2)
        for d in range(1, 6)
    ]
    types = {p.type for p in detect_session_patterns(sessions)}
    assert {"high_rpe_streak", "low_completion", "recurring_pain", "low_motivation"} <= types
    assert "improving_efficiency" not in types


def test_patterns_improving_efficiency(make_session):
    rpes = [4, 4, 4, 8, 8]  # newest first
    sessions = [make_session(days_ago=i + 1, rpe=rpe, completion=90) for i, rpe in enumerate(rpes)]
    patterns = detect_session_patterns(sessions)
    assert [p.type for p in patterns] == ["improving_efficiency"]
    assert patterns[0].severity == "positive"


def test_patterns_only_look_at_last_seven(make_session):
    recent = [make_session(days_ago=d, rpe=5, completion=90) for d in range(1, 8)]
    old = [make_session(days_ago=d, rpe=10, completion=20, pain=True) for d in range(20, 25)]
    assert detect_session_patterns(recent + old) == []
