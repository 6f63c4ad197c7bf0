"""Canonical enums for the coaching domain.

All enums are string-based so records and fact maps stay JSON-serializable
and match the tokens used by the rule set files.
"""

from enum import StrEnum


# -----------------------------
# Profile
# -----------------------------
class Gender(StrEnum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class Goal(StrEnum):
    """User's declared training goal."""

    TONING = "toning"
    STRENGTH = "strength"
    ENDURANCE = "endurance"
    FLEXIBILITY = "flexibility"


class Experience(StrEnum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class Condition(StrEnum):
    """Physical limitation tags recorded during onboarding."""

    BACK_PAIN = "back_pain"
    KNEE_ISSUES = "knee_issues"
    SHOULDER_ISSUES = "shoulder_issues"
    NECK_PAIN = "neck_pain"
    JOINT_ISSUES = "joint_issues"
    HEART_CONDITION = "heart_condition"
    PREGNANCY = "pregnancy"
    RECENT_SURGERY = "recent_surgery"
    NONE = "none"


# -----------------------------
# Assessment
# -----------------------------
class MenstrualPhase(StrEnum):
    FOLLICULAR = "follicular"
    OVULATION = "ovulation"
    LUTEAL = "luteal"
    MENSTRUAL = "menstrual"


class BodyArea(StrEnum):
    """Body areas used for DOMS and pain tagging."""

    NECK = "neck"
    SHOULDERS = "shoulders"
    UPPER_BACK = "upper_back"
    LOWER_BACK = "lower_back"
    CHEST = "chest"
    ARMS = "arms"
    ABS = "abs"
    GLUTES = "glutes"
    THIGHS = "thighs"
    CALVES = "calves"
    KNEES = "knees"
    ANKLES = "ankles"


# -----------------------------
# Decisions
# -----------------------------
class ReadinessLevel(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ProgressionAction(StrEnum):
    """Relative intensity for the next session."""

    INCREASE = "increase"
    MAINTAIN = "maintain"
    DECREASE = "decrease"
    REST = "rest"


class AntiPatternType(StrEnum):
    OVERTRAINING = "overtraining"
    UNDERTRAINING = "undertraining"
    HIGH_RPE_STREAK = "high_rpe_streak"
    RECURRING_PAIN = "recurring_pain"
    PAIN_IGNORED = "pain_ignored"
    MOTIVATION_DECLINE = "motivation_decline"
    INCONSISTENCY = "inconsistency"
    LOW_COMPLETION = "low_completion"
    STREAK_BROKEN = "streak_broken"


class EventType(StrEnum):
    """Event types a rule may emit."""

    READINESS_MODIFIER = "readiness_modifier"
    PROGRESSION = "progression"
    ANTI_PATTERN = "anti_pattern"
    ALERT = "alert"
    WARNING = "warning"
    EXCLUDE_EXERCISE = "exclude_exercise"
    MODIFY_EXERCISE = "modify_exercise"
    RECOMMEND_EXERCISE = "recommend_exercise"


# -----------------------------
# Trends
# -----------------------------
class TrendDirection(StrEnum):
    """Least-squares slope direction of a series."""

    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"


class TrendLabel(StrEnum):
    """First-3 vs last-3 mean comparison used by analyze_trend."""

    UP = "up"
    DOWN = "down"
    STABLE = "stable"
