"""Root conftest for all tests.

Shared fixtures: a fixed clock, profile records, a session factory and
engines/orchestrators built from the packaged rule sets.
"""

from collections.abc import Callable
from datetime import UTC, date, datetime, timedelta

import pytest

from adaptive_coach.coach.orchestrator import DecisionOrchestrator
from adaptive_coach.rules.engine import RulesEngine
from adaptive_coach.rules.loader import build_default_engine, packaged_rulesets_dir
from adaptive_coach.state.enums import Experience, Gender, Goal
from adaptive_coach.state.models import Assessment, Feedback, Session, UserProfile

# Wednesday, mid-morning
FIXED_NOW = datetime(2025, 3, 12, 10, 0, tzinfo=UTC)


@pytest.fixture
def now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def clock() -> Callable[[], datetime]:
    return lambda: FIXED_NOW


@pytest.fixture
def female_profile() -> UserProfile:
    return UserProfile(
        id="user-f",
        name="Giulia",
        birth_date=date(1995, 6, 1),
        gender=Gender.FEMALE,
        weight=60,
        height=165,
        goal=Goal.TONING,
        experience=Experience.INTERMEDIATE,
        conditions=["none"],
    )


@pytest.fixture
def male_profile() -> UserProfile:
    return UserProfile(
        id="user-m",
        name="Marco",
        birth_date=date(1988, 1, 15),
        gender=Gender.MALE,
        weight=70,
        height=175,
        goal=Goal.STRENGTH,
        experience=Experience.BEGINNER,
    )


@pytest.fixture
def make_session() -> Callable[..., Session]:
    """Factory for history sessions completed ``days_ago`` days before FIXED_NOW.

    The pre-workout assessment is attached only when motivation or
    readiness_score is given.
    """

    def _make(
        days_ago: float = 1,
        rpe: int | None = None,
        completion: float | None = None,
        pain: bool = False,
        pain_intensity: int = 0,
        pain_areas: list[str] | None = None,
        enjoyment: int | None = None,
        could_do_more: bool = False,
        motivation: int | None = None,
        readiness_score: int | None = None,
    ) -> Session:
        pre = None
        if motivation is not None or readiness_score is not None:
            pre = Assessment(motivation=motivation or 3, readiness_score=readiness_score)
        post = Feedback(
            rpe=rpe,
            completion=completion,
            pain=pain,
            pain_intensity=pain_intensity,
            pain_areas=pain_areas or [],
            enjoyment=enjoyment,
            could_do_more=could_do_more,
        )
        return Session(
            completed_at=FIXED_NOW - timedelta(days=days_ago),
            pre_workout=pre,
            post_workout=post,
        )

    return _make


@pytest.fixture
def engine(clock) -> RulesEngine:
    return build_default_engine(directory=packaged_rulesets_dir(), clock=clock)


@pytest.fixture
def orchestrator(engine, clock) -> DecisionOrchestrator:
    return DecisionOrchestrator(engine, clock=clock)


@pytest.fixture
def empty_orchestrator(clock) -> DecisionOrchestrator:
    """Orchestrator over an engine with the predicate library and no rules."""
    return DecisionOrchestrator(RulesEngine(clock=clock), clock=clock)
