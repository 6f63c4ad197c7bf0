"""Decision orchestration on top of the rule engine."""

from adaptive_coach.coach.orchestrator import DecisionOrchestrator
from adaptive_coach.coach.service import CoachingService

__all__ = ["CoachingService", "DecisionOrchestrator"]
