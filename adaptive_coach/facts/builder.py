"""Fact map assembly.

The fact map is rebuilt on every evaluation and never persisted. Layout:

- profile facts at the top level (``age``, ``isBeginner``, ``conditions``…)
- ``assessment``, ``feedback`` and ``history`` as nested objects, reached
  from rules through ``path`` (e.g. ``{"fact": "history", "path": "$.averageRpe"}``)
- shortcuts: ``readinessScore``, ``currentRpe``, ``currentCompletion``
- wall-clock facts: ``timestamp``, ``hour``, ``dayOfWeek`` (0 = Sunday),
  ``isWeekend``, ``isMorning``, ``isAfternoon``, ``isEvening``
"""

from collections.abc import Sequence
from datetime import datetime
from typing import Any

from adaptive_coach.core.clock import resolve_now
from adaptive_coach.facts.history_facts import derive_history_facts
from adaptive_coach.facts.user_facts import (
    derive_assessment_facts,
    derive_feedback_facts,
    derive_user_facts,
)
from adaptive_coach.metrics.constants import HISTORY_LOOKBACK_DAYS
from adaptive_coach.state.models import Assessment, Feedback, Session, UserProfile


def time_facts(now: datetime) -> dict[str, Any]:
    day_of_week = (now.weekday() + 1) % 7
    return {
        "timestamp": now.isoformat(),
        "hour": now.hour,
        "dayOfWeek": day_of_week,
        "isWeekend": day_of_week in (0, 6),
        "isMorning": 5 <= now.hour < 12,
        "isAfternoon": 12 <= now.hour < 17,
        "isEvening": 17 <= now.hour < 21,
    }


def prepare_facts(
    profile: UserProfile | None = None,
    assessment: Assessment | None = None,
    feedback: Feedback | None = None,
    sessions: Sequence[Session] | None = None,
    now: datetime | None = None,
    lookback_days: int = HISTORY_LOOKBACK_DAYS,
) -> dict[str, Any]:
    """Build the fact map for one engine run."""
    now = resolve_now(now)
    facts: dict[str, Any] = derive_user_facts(profile, now.date()).to_facts()
    facts["assessment"] = derive_assessment_facts(assessment).to_facts()
    facts["feedback"] = derive_feedback_facts(feedback).to_facts()
    facts["history"] = derive_history_facts(sessions, now, lookback_days).to_facts()
    facts["readinessScore"] = assessment.readiness_score if assessment else None
    facts["currentRpe"] = feedback.rpe if feedback else None
    facts["currentCompletion"] = feedback.completion if feedback else None
    facts.update(time_facts(now))
    return facts
