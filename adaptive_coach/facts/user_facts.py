"""Fact providers for the profile, the pre-workout assessment and the
post-workout feedback.

Each provider is pure and total: ``None`` input yields the neutral fact set.
"""

from datetime import date

from adaptive_coach.facts.schemas import AssessmentFacts, FeedbackFacts, UserFacts
from adaptive_coach.metrics.calculations import (
    calculate_age,
    calculate_bmi,
    get_age_category,
    get_bmi_category,
    get_readiness_level,
)
from adaptive_coach.metrics.constants import CORE_AREAS, LOWER_BODY_AREAS, UPPER_BODY_AREAS
from adaptive_coach.state.enums import (
    Condition,
    Experience,
    Gender,
    Goal,
    MenstrualPhase,
    ReadinessLevel,
)
from adaptive_coach.state.models import Assessment, Feedback, UserProfile


def derive_user_facts(profile: UserProfile | None, today: date | None = None) -> UserFacts:
    """Profile facts: biometrics, category labels and boolean flags.

    A BMI of 0 (missing weight or height) is reported as ``bmi=None`` with no
    category, so an incomplete profile is never flagged as underweight.
    """
    if profile is None:
        return UserFacts()

    age = calculate_age(profile.birth_date, today) if profile.birth_date else None
    age_category = get_age_category(age)

    bmi: float | None = calculate_bmi(profile.weight, profile.height)
    bmi_category = get_bmi_category(bmi) if bmi else None
    if not bmi:
        bmi = None
    bmi_key = bmi_category.key if bmi_category else None

    conditions = list(profile.conditions)
    age_key = age_category.key if age_category else None

    return UserFacts(
        has_profile=True,
        name=profile.name,
        age=age,
        gender=profile.gender,
        weight=profile.weight,
        height=profile.height,
        bmi=bmi,
        bmi_category=bmi_category.label if bmi_category else None,
        bmi_category_key=bmi_key,
        age_category=age_category.label if age_category else None,
        age_category_key=age_key,
        goal=profile.goal,
        experience=profile.experience,
        conditions=conditions,
        is_female=profile.gender == Gender.FEMALE,
        is_male=profile.gender == Gender.MALE,
        is_beginner=profile.experience == Experience.BEGINNER,
        is_intermediate=profile.experience == Experience.INTERMEDIATE,
        is_advanced=profile.experience == Experience.ADVANCED,
        goal_is_toning=profile.goal == Goal.TONING,
        goal_is_strength=profile.goal == Goal.STRENGTH,
        goal_is_endurance=profile.goal == Goal.ENDURANCE,
        goal_is_flexibility=profile.goal == Goal.FLEXIBILITY,
        has_medical_conditions=any(c != Condition.NONE for c in conditions),
        has_back_pain=Condition.BACK_PAIN in conditions,
        has_knee_issues=Condition.KNEE_ISSUES in conditions,
        has_shoulder_issues=Condition.SHOULDER_ISSUES in conditions,
        has_neck_pain=Condition.NECK_PAIN in conditions,
        has_joint_issues=Condition.JOINT_ISSUES in conditions,
        has_heart_condition=Condition.HEART_CONDITION in conditions,
        has_pregnancy=Condition.PREGNANCY in conditions,
        has_recent_surgery=Condition.RECENT_SURGERY in conditions,
        is_young=age_key == "young",
        is_adult=age_key == "adult",
        is_mature=age_key == "mature",
        is_senior=age_key == "senior",
        is_underweight=bmi_key == "underweight",
        is_normal_weight=bmi_key == "normal",
        is_overweight=bmi_key == "overweight",
        is_obese=bmi_key == "obese",
        profile_created_at=profile.created_at,
        profile_updated_at=profile.updated_at,
    )


def derive_assessment_facts(assessment: Assessment | None) -> AssessmentFacts:
    if assessment is None:
        return AssessmentFacts()

    areas = list(assessment.doms_areas)
    phase = assessment.menstrual_phase
    score = assessment.readiness_score
    level = get_readiness_level(score) if score is not None else None

    return AssessmentFacts(
        has_assessment=True,
        is_skipped=assessment.skipped,
        energy=assessment.energy,
        doms=assessment.doms,
        doms_areas=areas,
        stress=assessment.stress,
        motivation=assessment.motivation,
        available_time=assessment.available_time,
        hydration=assessment.hydration,
        fasting=assessment.fasting,
        menstrual_phase=phase,
        is_follicular_phase=phase == MenstrualPhase.FOLLICULAR,
        is_ovulation_phase=phase == MenstrualPhase.OVULATION,
        is_luteal_phase=phase == MenstrualPhase.LUTEAL,
        is_menstrual_phase=phase == MenstrualPhase.MENSTRUAL,
        readiness_score=score,
        has_low_energy=assessment.energy <= 2,
        has_high_energy=assessment.energy >= 4,
        has_significant_doms=assessment.doms >= 3,
        has_severe_doms=assessment.doms >= 4,
        has_high_stress=assessment.stress >= 4,
        has_low_motivation=assessment.motivation <= 2,
        has_high_motivation=assessment.motivation >= 4,
        is_dehydrated=not assessment.hydration,
        is_in_fasting_state=assessment.fasting,
        has_limited_time=assessment.available_time <= 20,
        has_extended_time=assessment.available_time >= 45,
        has_upper_body_doms=any(area in UPPER_BODY_AREAS for area in areas),
        has_lower_body_doms=any(area in LOWER_BODY_AREAS for area in areas),
        has_core_doms=any(area in CORE_AREAS for area in areas),
        has_low_readiness=level == ReadinessLevel.LOW,
        has_medium_readiness=level == ReadinessLevel.MEDIUM,
        has_high_readiness=level == ReadinessLevel.HIGH,
    )


def derive_feedback_facts(feedback: Feedback | None) -> FeedbackFacts:
    if feedback is None:
        return FeedbackFacts()

    rpe = feedback.rpe
    completion = feedback.completion
    enjoyment = feedback.enjoyment
    confidence = feedback.technique_confidence
    has_scores = rpe is not None and completion is not None

    return FeedbackFacts(
        has_feedback=True,
        rpe=rpe,
        completion=completion,
        enjoyment=enjoyment,
        technique_confidence=confidence,
        could_do_more=feedback.could_do_more,
        notes=feedback.notes,
        pain=feedback.pain,
        pain_areas=list(feedback.pain_areas),
        pain_intensity=feedback.pain_intensity,
        was_easy=rpe is not None and rpe <= 4,
        was_moderate=rpe is not None and 5 <= rpe <= 7,
        was_hard=rpe is not None and rpe >= 8,
        was_very_hard=rpe is not None and rpe >= 9,
        had_high_completion=completion is not None and completion >= 90,
        had_medium_completion=completion is not None and 60 <= completion < 90,
        had_low_completion=completion is not None and completion < 60,
        had_pain=feedback.pain,
        had_severe_pain=feedback.pain_intensity >= 4,
        had_mild_pain=feedback.pain and feedback.pain_intensity < 3,
        enjoyed_workout=enjoyment is not None and enjoyment >= 4,
        did_not_enjoy=enjoyment is not None and enjoyment <= 2,
        felt_confident=confidence is not None and confidence >= 4,
        lacked_confidence=confidence is not None and confidence <= 2,
        should_progress=has_scores and rpe <= 6 and completion >= 90 and feedback.could_do_more,
        should_maintain=has_scores and 5 <= rpe <= 7 and completion >= 70,
        should_regress=has_scores and (rpe >= 9 or completion < 60 or feedback.pain),
    )
