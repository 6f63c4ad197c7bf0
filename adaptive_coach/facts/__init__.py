"""Fact derivation layer."""

from adaptive_coach.facts.builder import prepare_facts
from adaptive_coach.facts.history_facts import derive_history_facts
from adaptive_coach.facts.schemas import AssessmentFacts, FeedbackFacts, HistoryFacts, UserFacts
from adaptive_coach.facts.user_facts import (
    derive_assessment_facts,
    derive_feedback_facts,
    derive_user_facts,
)

__all__ = [
    "AssessmentFacts",
    "FeedbackFacts",
    "HistoryFacts",
    "UserFacts",
    "derive_assessment_facts",
    "derive_feedback_facts",
    "derive_history_facts",
    "derive_user_facts",
    "prepare_facts",
]
