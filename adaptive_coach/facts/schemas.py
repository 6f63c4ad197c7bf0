"""Fact models for rule evaluation.

One model per fact category. Every field has the documented neutral default,
so ``UserFacts()`` (etc.) is the "no data" fact set. Serialized with camelCase
keys, which are the fact names the rule set files reference.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from adaptive_coach.state.enums import TrendDirection


class FactModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    def to_facts(self) -> dict[str, Any]:
        """Flat, rule-friendly mapping keyed by camelCase fact name."""
        return self.model_dump(by_alias=True)


class UserFacts(FactModel):
    has_profile: bool = False
    name: str | None = None
    age: int | None = None
    gender: str | None = None
    weight: float | None = None
    height: float | None = None

    bmi: float | None = None
    bmi_category: str | None = None
    bmi_category_key: str | None = None
    age_category: str | None = None
    age_category_key: str | None = None

    goal: str | None = None
    experience: str | None = None
    conditions: list[str] = Field(default_factory=list)

    is_female: bool = False
    is_male: bool = False
    is_beginner: bool = False
    is_intermediate: bool = False
    is_advanced: bool = False

    goal_is_toning: bool = False
    goal_is_strength: bool = False
    goal_is_endurance: bool = False
    goal_is_flexibility: bool = False

    has_medical_conditions: bool = False
    has_back_pain: bool = False
    has_knee_issues: bool = False
    has_shoulder_issues: bool = False
    has_neck_pain: bool = False
    has_joint_issues: bool = False
    has_heart_condition: bool = False
    has_pregnancy: bool = False
    has_recent_surgery: bool = False

    is_young: bool = False
    is_adult: bool = False
    is_mature: bool = False
    is_senior: bool = False

    is_underweight: bool = False
    is_normal_weight: bool = False
    is_overweight: bool = False
    is_obese: bool = False

    profile_created_at: datetime | None = None
    profile_updated_at: datetime | None = None


class AssessmentFacts(FactModel):
    has_assessment: bool = False
    is_skipped: bool = False

    energy: int = 3
    doms: int = 1
    doms_areas: list[str] = Field(default_factory=list)
    stress: int = 3
    motivation: int = 3
    available_time: int = 30
    hydration: bool = True
    fasting: bool = False

    menstrual_phase: str | None = None
    is_follicular_phase: bool = False
    is_ovulation_phase: bool = False
    is_luteal_phase: bool = False
    is_menstrual_phase: bool = False

    readiness_score: int | None = None

    has_low_energy: bool = False
    has_high_energy: bool = False
    has_significant_doms: bool = False
    has_severe_doms: bool = False
    has_high_stress: bool = False
    has_low_motivation: bool = False
    has_high_motivation: bool = False
    is_dehydrated: bool = False
    is_in_fasting_state: bool = False
    has_limited_time: bool = False
    has_extended_time: bool = False

    has_upper_body_doms: bool = False
    has_lower_body_doms: bool = False
    has_core_doms: bool = False

    has_low_readiness: bool = False
    has_medium_readiness: bool = False
    has_high_readiness: bool = False


class FeedbackFacts(FactModel):
    has_feedback: bool = False

    rpe: int | None = None
    completion: float | None = None
    enjoyment: int | None = None
    technique_confidence: int | None = None
    could_do_more: bool = False
    notes: str = ""

    pain: bool = False
    pain_areas: list[str] = Field(default_factory=list)
    pain_intensity: int = 0

    was_easy: bool = False
    was_moderate: bool = False
    was_hard: bool = False
    was_very_hard: bool = False

    had_high_completion: bool = False
    had_medium_completion: bool = False
    had_low_completion: bool = False

    had_pain: bool = False
    had_severe_pain: bool = False
    had_mild_pain: bool = False

    enjoyed_workout: bool = False
    did_not_enjoy: bool = False

    felt_confident: bool = False
    lacked_confidence: bool = False

    should_progress: bool = False
    should_maintain: bool = False
    should_regress: bool = False


class HistoryFacts(FactModel):
    # Counts
    total_sessions: int = 0
    recent_session_count: int = 0
    sessions_this_week: int = 0
    sessions_this_month: int = 0

    # Last session
    has_session_history: bool = False
    last_session_date: datetime | None = None
    days_since_last_session: int | None = None
    last_session_rpe: int | None = None
    last_session_completion: float | None = None
    last_readiness_score: int | None = None

    # Streaks and consistency
    current_streak: int = 0
    missed_days_this_week: int = 4
    missed_days_this_month: int = 16
    is_on_streak: bool = False
    has_long_streak: bool = False
    streak_broken: bool = False

    # RPE
    recent_rpes: list[int] = Field(default_factory=list)
    recent_high_rpe_flags: list[bool] = Field(default_factory=list)
    average_rpe: float | None = None
    rpe_trend: TrendDirection = TrendDirection.STABLE
    consecutive_high_rpe: int = 0
    has_consistently_high_rpe: bool = False
    has_consistently_low_rpe: bool = False

    # Completion
    recent_completions: list[float] = Field(default_factory=list)
    average_completion: float | None = None
    completion_trend: TrendDirection = TrendDirection.STABLE
    has_low_completion_rate: bool = False
    has_high_completion_rate: bool = False

    # Readiness
    recent_readiness_scores: list[int] = Field(default_factory=list)
    average_readiness: float | None = None
    readiness_trend: TrendDirection = TrendDirection.STABLE

    # Enjoyment and motivation
    recent_enjoyments: list[int] = Field(default_factory=list)
    average_enjoyment: float | None = None
    enjoyment_trend: TrendDirection = TrendDirection.STABLE
    has_low_enjoyment: bool = False
    recent_motivations: list[int] = Field(default_factory=list)
    motivation_trend: TrendDirection = TrendDirection.STABLE

    # Pain
    recent_pain_flags: list[bool] = Field(default_factory=list)
    recent_pain_intensities: list[int] = Field(default_factory=list)
    recent_pain_count: int = 0
    has_pain_history: bool = False
    has_recurring_pain: bool = False
    frequent_pain_areas: list[str] = Field(default_factory=list)
    pain_frequency: float = 0.0

    # Progression indicators
    should_consider_progression: bool = False
    should_consider_regression: bool = False
    is_performing_well: bool = False

    # Anti-pattern indicators
    shows_overtraining_sign: bool = False
    shows_undertraining_sign: bool = False
    shows_motivation_issue: bool = False
    shows_inconsistency: bool = False
