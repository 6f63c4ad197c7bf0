"""Tests for the profile, assessment and feedback fact providers.

Tests cover:
- Neutral fact sets for missing inputs
- Profile flags (gender, experience, goal, conditions, age and BMI bands)
- Missing biometrics never flagged as underweight
- Assessment flags (DOMS areas, phases, readiness band)
- Feedback flags (effort, completion, pain, progression hints)
- camelCase fact names
"""

from datetime import date

from adaptive_coach.facts.builder import prepare_facts, time_facts
from adaptive_coach.facts.user_facts import derive_assessment_facts, derive_feedback_facts, derive_user_facts
from adaptive_coach.state.enums import MenstrualPhase
from adaptive_coach.state.models import Assessment, Feedback, UserProfile

TODAY = date(2025, 3, 12)

# ============================================================================
# PROFILE
# ============================================================================


def test_no_profile_gives_neutral_facts():
    facts = derive_user_facts(None, TODAY)
    assert facts.has_profile is False
    assert facts.age is None
    assert facts.bmi is None
    assert facts.conditions == []
    assert facts.is_female is False


def test_female_profile_flags(female_profile):
    facts = derive_user_facts(female_profile, TODAY)
    assert facts.has_profile is True
    assert facts.age == 29
    assert facts.is_female is True
    assert facts.is_intermediate is True
    assert facts.goal_is_toning is True
    assert facts.is_young is True
    assert facts.age_category_key == "young"
    assert facts.bmi == 22.0
    assert facts.is_normal_weight is True
    # "none" is not a medical condition
    assert facts.has_medical_conditions is False


def test_condition_flags():
    profile = UserProfile(conditions=["back_pain", "knee_issues", "pregnancy"])
    facts = derive_user_facts(profile, TODAY)
    assert facts.has_medical_conditions is True
    assert facts.has_back_pain is True
    assert facts.has_knee_issues is True
    assert facts.has_pregnancy is True
    assert facts.has_heart_condition is False


def test_missing_biometrics_not_underweight():
    facts = derive_user_facts(UserProfile(weight=70), TODAY)
    assert facts.bmi is None
    assert facts.bmi_category_key is None
    assert facts.is_underweight is False


def test_obese_senior():
    profile = UserProfile(birth_date=date(1950, 1, 1), weight=110, height=170)
    facts = derive_user_facts(profile, TODAY)
    assert facts.is_senior is True
    assert facts.is_obese is True
    assert facts.bmi_category == "Obesità"


def test_user_facts_use_camel_case_names(male_profile):
    facts = derive_user_facts(male_profile, TODAY).to_facts()
    assert facts["isBeginner"] is True
    assert facts["goalIsStrength"] is True
    assert facts["ageCategoryKey"] == "adult"
    assert "is_beginner" not in facts


# ============================================================================
# ASSESSMENT
# ============================================================================


def test_no_assessment_gives_neutral_facts():
    facts = derive_assessment_facts(None)
    assert facts.has_assessment is False
    assert facts.doms == 1
    assert facts.readiness_score is None
    assert facts.has_low_readiness is False


def test_assessment_flags():
    assessment = Assessment(
        energy=2,
        doms=4,
        doms_areas=["shoulders", "thighs"],
        stress=4,
        motivation=2,
        available_time=15,
        hydration=False,
        fasting=True,
        menstrual_phase=MenstrualPhase.LUTEAL,
        readiness_score=35,
    )
    facts = derive_assessment_facts(assessment)
    assert facts.has_low_energy is True
    assert facts.has_severe_doms is True
    assert facts.has_upper_body_doms is True
    assert facts.has_lower_body_doms is True
    assert facts.has_core_doms is False
    assert facts.has_high_stress is True
    assert facts.has_low_motivation is True
    assert facts.has_limited_time is True
    assert facts.is_dehydrated is True
    assert facts.is_in_fasting_state is True
    assert facts.is_luteal_phase is True
    assert facts.has_low_readiness is True


def test_unscored_assessment_has_no_readiness_band():
    facts = derive_assessment_facts(Assessment())
    assert facts.has_assessment is True
    assert not (facts.has_low_readiness or facts.has_medium_readiness or facts.has_high_readiness)


# ============================================================================
# FEEDBACK
# ============================================================================


def test_no_feedback_gives_neutral_facts():
    facts = derive_feedback_facts(None)
    assert facts.has_feedback is False
    assert facts.rpe is None
    assert facts.should_progress is False


def test_feedback_should_progress():
    facts = derive_feedback_facts(Feedback(rpe=5, completion=95, could_do_more=True))
    assert facts.should_progress is True
    assert facts.was_moderate is True
    assert facts.had_high_completion is True
    assert facts.should_regress is False


def test_feedback_should_regress():
    facts = derive_feedback_facts(Feedback(rpe=9, completion=50))
    assert facts.should_regress is True
    assert facts.was_very_hard is True
    assert facts.had_low_completion is True


def test_feedback_pain_flags():
    severe = derive_feedback_facts(Feedback(rpe=6, completion=80, pain=True, pain_intensity=4))
    assert severe.had_pain is True
    assert severe.had_severe_pain is True
    assert severe.had_mild_pain is False

    mild = derive_feedback_facts(Feedback(rpe=6, completion=80, pain=True, pain_intensity=1))
    assert mild.had_mild_pain is True
    assert mild.should_regress is True


# ============================================================================
# FACT MAP
# ============================================================================


def test_prepare_facts_layout(female_profile, now):
    assessment = Assessment(readiness_score=62)
    facts = prepare_facts(
        profile=female_profile,
        assessment=assessment,
        feedback=Feedback(rpe=6, completion=80),
        now=now,
    )
    assert facts["isFemale"] is True
    assert facts["assessment"]["readinessScore"] == 62
    assert facts["readinessScore"] == 62
    assert facts["currentRpe"] == 6
    assert facts["currentCompletion"] == 80
    assert facts["feedback"]["hasFeedback"] is True
    assert facts["history"]["hasSessionHistory"] is False


def test_time_facts_sunday_is_zero(now):
    """FIXED_NOW is a Wednesday at 10:00."""
    facts = time_facts(now)
    assert facts["dayOfWeek"] == 3
    assert facts["hour"] == 10
    assert facts["isMorning"] is True
    assert facts["isWeekend"] is False

    sunday = time_facts(now.replace(day=16, hour=19))
    assert sunday["dayOfWeek"] == 0
    assert sunday["isWeekend"] is True
    assert sunday["isEvening"] is True
