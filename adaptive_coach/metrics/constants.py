"""Fixed coaching constants.

Every threshold used by the calculators and the fact providers lives here.
None of them is configurable at call time: tests assert on these exact
boundaries.
"""

from dataclasses import dataclass

from adaptive_coach.state.enums import (
    AntiPatternType,
    Condition,
    Experience,
    Gender,
    Goal,
    MenstrualPhase,
    ProgressionAction,
    ReadinessLevel,
)

# -----------------------------
# Labels (user-facing, Italian)
# -----------------------------
GOAL_LABELS: dict[Goal, str] = {
    Goal.TONING: "Tonificazione",
    Goal.STRENGTH: "Forza",
    Goal.ENDURANCE: "Resistenza",
    Goal.FLEXIBILITY: "Flessibilità",
}

EXPERIENCE_LABELS: dict[Experience, str] = {
    Experience.BEGINNER: "Principiante",
    Experience.INTERMEDIATE: "Intermedio",
    Experience.ADVANCED: "Avanzato",
}

GENDER_LABELS: dict[Gender, str] = {
    Gender.MALE: "Uomo",
    Gender.FEMALE: "Donna",
    Gender.OTHER: "Altro",
}

CONDITION_LABELS: dict[Condition, str] = {
    Condition.BACK_PAIN: "Problemi alla schiena",
    Condition.KNEE_ISSUES: "Problemi alle ginocchia",
    Condition.SHOULDER_ISSUES: "Problemi alle spalle",
    Condition.NECK_PAIN: "Dolore al collo",
    Condition.JOINT_ISSUES: "Problemi articolari",
    Condition.HEART_CONDITION: "Patologie cardiache",
    Condition.PREGNANCY: "Gravidanza",
    Condition.RECENT_SURGERY: "Intervento recente",
    Condition.NONE: "Nessuna limitazione",
}

PROGRESSION_LABELS: dict[ProgressionAction, str] = {
    ProgressionAction.INCREASE: "Aumenta intensità",
    ProgressionAction.MAINTAIN: "Mantieni il ritmo",
    ProgressionAction.DECREASE: "Riduci intensità",
    ProgressionAction.REST: "Giorno di riposo",
}

ANTI_PATTERN_LABELS: dict[AntiPatternType, str] = {
    AntiPatternType.OVERTRAINING: "Possibile sovrallenamento",
    AntiPatternType.UNDERTRAINING: "Allenamento troppo leggero",
    AntiPatternType.HIGH_RPE_STREAK: "RPE alto consecutivo",
    AntiPatternType.RECURRING_PAIN: "Dolore ricorrente",
    AntiPatternType.PAIN_IGNORED: "Dolore ignorato ripetutamente",
    AntiPatternType.MOTIVATION_DECLINE: "Motivazione in calo",
    AntiPatternType.INCONSISTENCY: "Allenamento irregolare",
    AntiPatternType.LOW_COMPLETION: "Completamento basso costante",
    AntiPatternType.STREAK_BROKEN: "Serie interrotta",
}

# -----------------------------
# Readiness
# -----------------------------
READINESS_WEIGHTS: dict[str, float] = {
    "energy": 0.30,
    "doms": 0.30,
    "stress": 0.15,
    "motivation": 0.10,
    "menstrual_phase": 0.15,  # redistributed when not applicable
}

MENSTRUAL_PHASE_MODIFIERS: dict[MenstrualPhase, float] = {
    MenstrualPhase.FOLLICULAR: 1.10,
    MenstrualPhase.OVULATION: 1.15,
    MenstrualPhase.LUTEAL: 0.95,
    MenstrualPhase.MENSTRUAL: 0.85,
}

DEHYDRATION_MULTIPLIER = 0.95
FASTING_MULTIPLIER = 0.90

# Upper bounds (inclusive) of the low and medium bands
READINESS_LOW_MAX = 40
READINESS_MEDIUM_MAX = 70

# Score given to a skipped assessment
SKIPPED_ASSESSMENT_SCORE = 70

READINESS_COLORS: dict[ReadinessLevel, str] = {
    ReadinessLevel.LOW: "#ef4444",
    ReadinessLevel.MEDIUM: "#eab308",
    ReadinessLevel.HIGH: "#22c55e",
}

READINESS_LABELS: dict[ReadinessLevel, str] = {
    ReadinessLevel.LOW: "Riposo consigliato",
    ReadinessLevel.MEDIUM: "Allenamento normale",
    ReadinessLevel.HIGH: "Pronto per spingerti!",
}

READINESS_SUMMARIES: dict[ReadinessLevel, str] = {
    ReadinessLevel.LOW: "Il tuo corpo ha bisogno di recupero. Ascoltalo e vai piano.",
    ReadinessLevel.MEDIUM: "Sei in buona forma per un allenamento standard.",
    ReadinessLevel.HIGH: "Sei al top! Ottima giornata per dare il massimo.",
}

# -----------------------------
# Categories
# -----------------------------


@dataclass(frozen=True)
class BMICategory:
    key: str
    max: float  # exclusive upper bound
    label: str
    color: str


@dataclass(frozen=True)
class AgeCategory:
    key: str
    max: float  # exclusive upper bound
    label: str
    recovery_multiplier: float


BMI_CATEGORIES: tuple[BMICategory, ...] = (
    BMICategory(key="underweight", max=18.5, label="Sottopeso", color="#3b82f6"),
    BMICategory(key="normal", max=25, label="Normopeso", color="#22c55e"),
    BMICategory(key="overweight", max=30, label="Sovrappeso", color="#eab308"),
    BMICategory(key="obese", max=float("inf"), label="Obesità", color="#ef4444"),
)

AGE_CATEGORIES: tuple[AgeCategory, ...] = (
    AgeCategory(key="young", max=30, label="Giovane", recovery_multiplier=1.0),
    AgeCategory(key="adult", max=45, label="Adulto", recovery_multiplier=1.1),
    AgeCategory(key="mature", max=60, label="Maturo", recovery_multiplier=1.2),
    AgeCategory(key="senior", max=float("inf"), label="Senior", recovery_multiplier=1.3),
)

# -----------------------------
# Progression matrix
# -----------------------------
HIGH_RPE = 8
CONSECUTIVE_HIGH_RPE_FOR_REST = 3

# -----------------------------
# Trends
# -----------------------------
TREND_MIN_POINTS = 3
TREND_RELATIVE_THRESHOLD = 0.10  # analyze_trend: 10% of the older mean
SLOPE_THRESHOLD = 0.1  # least-squares slope sensitivity

# -----------------------------
# History facts
# -----------------------------
HISTORY_LOOKBACK_DAYS = 14
RECENT_WINDOW = 3  # "last 3 sessions" aggregates
REGRESSION_WINDOW = 2
WEEKLY_SESSION_TARGET = 4
MONTHLY_SESSION_TARGET = 16
PROGRESSION_MAX_AVG_RPE = 6
PROGRESSION_MIN_AVG_COMPLETION = 85
REGRESSION_MIN_AVG_RPE = 9
REGRESSION_MAX_AVG_COMPLETION = 60
PERFORMING_WELL_MIN_COMPLETION = 80
LOW_COMPLETION_RATE = 70
HIGH_COMPLETION_RATE = 90
OVERTRAINING_MIN_AVG_RPE = 8
UNDERTRAINING_MAX_AVG_RPE = 4
LOW_ENJOYMENT = 3
STREAK_MIN = 3
LONG_STREAK_MIN = 7
STREAK_BROKEN_AFTER_DAYS = 2
INCONSISTENT_MISSED_DAYS = 3
INCONSISTENT_DAYS_SINCE_LAST = 3

# Body-area groups used by the DOMS flags
UPPER_BODY_AREAS = frozenset({"chest", "upper_back", "shoulders", "arms", "neck"})
LOWER_BODY_AREAS = frozenset({"glutes", "thighs", "calves", "knees", "ankles"})
CORE_AREAS = frozenset({"abs", "lower_back"})

# -----------------------------
# Secondary metrics
# -----------------------------
BASE_RECOVERY_HOURS = 24
NEUTRAL_RPE = 5
NEUTRAL_COMPLETION = 75  # stands in for a missing completion: maps to MAINTAIN
