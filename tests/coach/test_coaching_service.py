"""Tests for the async coaching service and its display views.

Tests cover:
- Readiness view (summary text, capped recommendations with icons)
- Progression view (label, icon, adjustment factor, insights order)
- Concurrent calls share no state
"""

import asyncio

import pytest

from adaptive_coach.coach.presentation import PROGRESSION_PRESENTATION, TIP_ICON
from adaptive_coach.coach.service import CoachingService
from adaptive_coach.metrics.constants import READINESS_SUMMARIES
from adaptive_coach.state.enums import MenstrualPhase, ProgressionAction, ReadinessLevel
from adaptive_coach.state.models import Assessment, Feedback


@pytest.fixture
def service(orchestrator) -> CoachingService:
    return CoachingService(orchestrator, top_recommendations=2)


def _struggling_assessment() -> Assessment:
    return Assessment(
        energy=2,
        doms=4,
        stress=4,
        motivation=2,
        menstrual_phase=MenstrualPhase.MENSTRUAL,
        hydration=False,
        fasting=True,
    )


@pytest.mark.asyncio
async def test_readiness_view(service, female_profile):
    view = await service.readiness_view(female_profile, _struggling_assessment())
    assert view.level == ReadinessLevel.LOW
    assert view.summary == READINESS_SUMMARIES[ReadinessLevel.LOW]
    assert view.score == view.base_score + view.total_modifier
    assert len(view.recommendations) <= 2
    assert all(rec.icon for rec in view.recommendations)
    assert len(view.alerts) == 2


@pytest.mark.asyncio
async def test_progression_view_pain(service, male_profile):
    feedback = Feedback(rpe=6, completion=80, pain=True, pain_areas=["knees"])
    view = await service.progression_view(male_profile, None, feedback)

    presentation = PROGRESSION_PRESENTATION[ProgressionAction.DECREASE]
    assert view.decision == ProgressionAction.DECREASE
    assert view.adjustment_factor == 0.9
    assert view.label == presentation.label
    assert view.icon == presentation.icon
    assert view.insights[0].type == "decision"
    assert view.insights[0].text == view.reason
    assert view.summary.startswith(presentation.label)


@pytest.mark.asyncio
async def test_progression_view_rest_with_warnings(service, male_profile, make_session):
    sessions = [make_session(days_ago=d, rpe=9, completion=c) for d, c in ((1, 60), (2, 75), (3, 90))]
    view = await service.progression_view(male_profile, None, Feedback(rpe=8, completion=70), sessions)

    assert view.decision == ProgressionAction.REST
    assert view.adjustment_factor == 0.0
    assert view.has_warnings is True
    assert view.warning_count == len(view.anti_patterns)
    kinds = [insight.type for insight in view.insights]
    # decision first, then warnings, then tips
    assert kinds == sorted(kinds, key=["decision", "warning", "tip"].index)
    assert kinds.count("tip") <= 3
    assert all(insight.icon == TIP_ICON for insight in view.insights if insight.type == "tip")


@pytest.mark.asyncio
async def test_progression_view_increase(service, male_profile):
    view = await service.progression_view(male_profile, None, Feedback(rpe=3, completion=95))
    assert view.decision == ProgressionAction.INCREASE
    assert view.adjustment_factor == 1.1
    assert view.has_warnings is False


@pytest.mark.asyncio
async def test_concurrent_calls_are_independent(service, female_profile, male_profile):
    struggling, neutral = await asyncio.gather(
        service.evaluate_readiness(female_profile, _struggling_assessment()),
        service.evaluate_readiness(male_profile, Assessment()),
    )
    assert struggling.score == 10
    assert neutral.score == 60


@pytest.mark.asyncio
async def test_exercise_and_pattern_passthrough(service, male_profile):
    exercises = await service.get_exercise_recommendations(male_profile, Assessment())
    assert exercises.success is True
    report = await service.detect_anti_patterns(male_profile)
    assert report.patterns == []
