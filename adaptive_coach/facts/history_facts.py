"""History fact provider.

Turns a bounded window of recent sessions into counts, streaks, trailing
averages, trend directions and composite anti-pattern flags.

Conventions:
- Series (``recentRpes`` etc.) are ordered newest first, so "the last 3
  sessions" is ``series[:3]``
- Trend directions are computed on the same series in chronological order,
  so ``decreasing`` means the values are dropping over time
- Averages are None when the series is empty
"""

from collections.abc import Sequence
from datetime import datetime, timedelta

from loguru import logger

from adaptive_coach.core.clock import ensure_aware, resolve_now
from adaptive_coach.facts.schemas import HistoryFacts
from adaptive_coach.metrics.calculations import (
    average,
    count_consecutive_high_rpe,
    days_since,
    trend_direction,
)
from adaptive_coach.metrics.constants import (
    HIGH_COMPLETION_RATE,
    HIGH_RPE,
    HISTORY_LOOKBACK_DAYS,
    INCONSISTENT_DAYS_SINCE_LAST,
    INCONSISTENT_MISSED_DAYS,
    LONG_STREAK_MIN,
    LOW_COMPLETION_RATE,
    LOW_ENJOYMENT,
    MONTHLY_SESSION_TARGET,
    OVERTRAINING_MIN_AVG_RPE,
    PERFORMING_WELL_MIN_COMPLETION,
    PROGRESSION_MAX_AVG_RPE,
    PROGRESSION_MIN_AVG_COMPLETION,
    RECENT_WINDOW,
    REGRESSION_MAX_AVG_COMPLETION,
    REGRESSION_MIN_AVG_RPE,
    REGRESSION_WINDOW,
    STREAK_BROKEN_AFTER_DAYS,
    STREAK_MIN,
    UNDERTRAINING_MAX_AVG_RPE,
    WEEKLY_SESSION_TARGET,
)
from adaptive_coach.state.enums import TrendDirection
from adaptive_coach.state.models import Session

TimedSession = tuple[datetime, Session]


def derive_history_facts(
    sessions: Sequence[Session] | None,
    now: datetime | None = None,
    lookback_days: int = HISTORY_LOOKBACK_DAYS,
) -> HistoryFacts:
    """Derive history facts from recent sessions.

    Args:
        sessions: Recent sessions, any order (the caller does the windowing
            against storage; ``lookback_days`` narrows it further)
        now: Reference time (defaults to the local clock)
        lookback_days: Window for series, averages and pain statistics

    Returns:
        HistoryFacts; the neutral set when there is no history
    """
    if not sessions:
        return HistoryFacts()

    now = resolve_now(now)
    timed: list[TimedSession] = [(ensure_aware(s.completed_at, now.tzinfo), s) for s in sessions]
    cutoff = now - timedelta(days=lookback_days)
    recent = sorted((pair for pair in timed if pair[0] >= cutoff), key=lambda pair: pair[0], reverse=True)
    recent_sessions = [session for _, session in recent]
    feedbacks = [s.post_workout for s in recent_sessions if s.post_workout is not None]
    assessments = [s.pre_workout for s in recent_sessions if s.pre_workout is not None]

    rpes = [f.rpe for f in feedbacks if f.rpe is not None]
    completions = [f.completion for f in feedbacks if f.completion is not None]
    enjoyments = [f.enjoyment for f in feedbacks if f.enjoyment is not None]
    readiness_scores = [a.readiness_score for a in assessments if a.readiness_score is not None]
    motivations = [a.motivation for a in assessments]

    rpe_trend = trend_direction(rpes[::-1])
    completion_trend = trend_direction(completions[::-1])
    readiness_trend = trend_direction(readiness_scores[::-1])
    enjoyment_trend = trend_direction(enjoyments[::-1])
    motivation_trend = trend_direction(motivations[::-1])

    painful = [f for f in feedbacks if f.pain]
    pain_areas = list(dict.fromkeys(area for f in painful for area in f.pain_areas))

    streak = _calculate_streak(timed, now)
    sessions_this_week = _count_sessions_in_days(timed, 7, now)
    sessions_this_month = _count_sessions_in_days(timed, 30, now)
    missed_this_week = max(0, WEEKLY_SESSION_TARGET - sessions_this_week)
    missed_this_month = max(0, MONTHLY_SESSION_TARGET - sessions_this_month)

    last_time, last_session = recent[0] if recent else (None, None)
    last_feedback = last_session.post_workout if last_session else None
    last_assessment = last_session.pre_workout if last_session else None
    days_since_last = days_since(last_time, now) if last_time else None

    last3_rpes = rpes[:RECENT_WINDOW]
    last3_completions = completions[:RECENT_WINDOW]
    last3_enjoyments = enjoyments[:RECENT_WINDOW]
    has_rpe_window = len(rpes) >= RECENT_WINDOW
    avg_rpe3 = average(last3_rpes)
    avg_completion3 = average(last3_completions)

    facts = HistoryFacts(
        total_sessions=len(sessions),
        recent_session_count=len(recent),
        sessions_this_week=sessions_this_week,
        sessions_this_month=sessions_this_month,
        has_session_history=True,
        last_session_date=last_time,
        days_since_last_session=days_since_last,
        last_session_rpe=last_feedback.rpe if last_feedback else None,
        last_session_completion=last_feedback.completion if last_feedback else None,
        last_readiness_score=last_assessment.readiness_score if last_assessment else None,
        current_streak=streak,
        missed_days_this_week=missed_this_week,
        missed_days_this_month=missed_this_month,
        is_on_streak=streak >= STREAK_MIN,
        has_long_streak=streak >= LONG_STREAK_MIN,
        streak_broken=days_since_last is not None and days_since_last > STREAK_BROKEN_AFTER_DAYS,
        recent_rpes=rpes,
        recent_high_rpe_flags=[rpe >= HIGH_RPE for rpe in rpes],
        average_rpe=average(rpes) if rpes else None,
        rpe_trend=rpe_trend,
        consecutive_high_rpe=count_consecutive_high_rpe(recent_sessions),
        has_consistently_high_rpe=has_rpe_window and all(r >= HIGH_RPE for r in last3_rpes),
        has_consistently_low_rpe=has_rpe_window and all(r <= 5 for r in last3_rpes),
        recent_completions=completions,
        average_completion=average(completions) if completions else None,
        completion_trend=completion_trend,
        has_low_completion_rate=len(completions) >= RECENT_WINDOW and avg_completion3 < LOW_COMPLETION_RATE,
        has_high_completion_rate=len(completions) >= RECENT_WINDOW and avg_completion3 >= HIGH_COMPLETION_RATE,
        recent_readiness_scores=readiness_scores,
        average_readiness=average(readiness_scores) if readiness_scores else None,
        readiness_trend=readiness_trend,
        recent_enjoyments=enjoyments,
        average_enjoyment=average(enjoyments) if enjoyments else None,
        enjoyment_trend=enjoyment_trend,
        has_low_enjoyment=len(enjoyments) >= RECENT_WINDOW and average(last3_enjoyments) < LOW_ENJOYMENT,
        recent_motivations=motivations,
        motivation_trend=motivation_trend,
        recent_pain_flags=[f.pain for f in feedbacks],
        recent_pain_intensities=[f.pain_intensity for f in painful],
        recent_pain_count=len(painful),
        has_pain_history=bool(painful),
        has_recurring_pain=len(painful) >= 2,
        frequent_pain_areas=pain_areas,
        pain_frequency=len(painful) / len(recent) if recent else 0.0,
        should_consider_progression=(
            has_rpe_window
            and bool(last3_completions)
            and avg_rpe3 <= PROGRESSION_MAX_AVG_RPE
            and avg_completion3 >= PROGRESSION_MIN_AVG_COMPLETION
        ),
        should_consider_regression=(
            len(rpes) >= REGRESSION_WINDOW
            and (
                average(rpes[:REGRESSION_WINDOW]) >= REGRESSION_MIN_AVG_RPE
                or (bool(completions) and average(completions[:REGRESSION_WINDOW]) < REGRESSION_MAX_AVG_COMPLETION)
            )
        ),
        is_performing_well=(
            has_rpe_window
            and 5 <= avg_rpe3 <= 7
            and bool(last3_completions)
            and avg_completion3 >= PERFORMING_WELL_MIN_COMPLETION
        ),
        shows_overtraining_sign=(
            has_rpe_window
            and avg_rpe3 >= OVERTRAINING_MIN_AVG_RPE
            and completion_trend == TrendDirection.DECREASING
        ),
        shows_undertraining_sign=(
            has_rpe_window
            and avg_rpe3 <= UNDERTRAINING_MAX_AVG_RPE
            and all(s.post_workout is not None and s.post_workout.could_do_more for s in recent_sessions)
        ),
        shows_motivation_issue=(
            len(enjoyments) >= RECENT_WINDOW
            and enjoyment_trend == TrendDirection.DECREASING
            and average(last3_enjoyments) < LOW_ENJOYMENT
        ),
        shows_inconsistency=(
            missed_this_week >= INCONSISTENT_MISSED_DAYS
            or (streak < 2 and days_since_last is not None and days_since_last > INCONSISTENT_DAYS_SINCE_LAST)
        ),
    )

    logger.debug(
        "History facts derived",
        total_sessions=facts.total_sessions,
        recent=facts.recent_session_count,
        streak=facts.current_streak,
        overtraining=facts.shows_overtraining_sign,
    )
    return facts


def _calculate_streak(timed: Sequence[TimedSession], now: datetime) -> int:
    """Consecutive training days ending today or yesterday."""
    days = sorted({when.date() for when, _ in timed}, reverse=True)
    if not days:
        return 0

    today = now.date()
    if days[0] not in (today, today - timedelta(days=1)):
        return 0

    streak = 1
    for current, previous in zip(days, days[1:]):
        if (current - previous).days > 1:
            break
        streak += 1
    return streak


def _count_sessions_in_days(timed: Sequence[TimedSession], days: int, now: datetime) -> int:
    cutoff = now - timedelta(days=days)
    return sum(1 for when, _ in timed if when >= cutoff)
