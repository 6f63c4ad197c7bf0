"""Metric calculators.

Standalone, deterministic numeric functions: age, BMI, readiness score,
progression decision matrix, trend analysis and secondary metrics.

Properties:
- Deterministic: same inputs produce the same output
- Total on documented degenerate inputs (BMI 0 on missing height, None age)
- Half-up rounding everywhere a value is rounded, so scores are reproducible
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal

from adaptive_coach.core.clock import parse_timestamp, resolve_now
from adaptive_coach.metrics.constants import (
    AGE_CATEGORIES,
    BASE_RECOVERY_HOURS,
    BMI_CATEGORIES,
    CONSECUTIVE_HIGH_RPE_FOR_REST,
    DEHYDRATION_MULTIPLIER,
    FASTING_MULTIPLIER,
    HIGH_RPE,
    MENSTRUAL_PHASE_MODIFIERS,
    NEUTRAL_RPE,
    READINESS_LOW_MAX,
    READINESS_MEDIUM_MAX,
    READINESS_WEIGHTS,
    SLOPE_THRESHOLD,
    TREND_MIN_POINTS,
    TREND_RELATIVE_THRESHOLD,
    AgeCategory,
    BMICategory,
)
from adaptive_coach.state.enums import (
    Gender,
    ProgressionAction,
    ReadinessLevel,
    TrendDirection,
    TrendLabel,
)
from adaptive_coach.state.models import Assessment, Session, UserProfile

MS_PER_DAY = 86_400_000


def round_half_up(value: float, digits: int = 0) -> float:
    """Round like a calculator does (0.5 always goes up)."""
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def calculate_age(birth_date: date | datetime, today: date | None = None) -> int:
    """Whole years between birth_date and today, birthday-aware."""
    if isinstance(birth_date, datetime):
        birth_date = birth_date.date()
    today = today or date.today()
    age = today.year - birth_date.year
    if (today.month, today.day) < (birth_date.month, birth_date.day):
        age -= 1
    return age


def calculate_bmi(weight_kg: float | None, height_cm: float | None) -> float:
    """BMI rounded to one decimal.

    Returns 0 when weight or height is missing or zero. This is a documented
    degenerate value, not an error: get_bmi_category(0) is "underweight", so
    callers that care about "no data" must check for 0 first.
    """
    if not weight_kg or not height_cm:
        return 0
    height_m = height_cm / 100
    return round_half_up(weight_kg / (height_m * height_m), 1)


def get_bmi_category(bmi: float) -> BMICategory:
    for category in BMI_CATEGORIES:
        if bmi < category.max:
            return category
    return BMI_CATEGORIES[-1]


def get_age_category(age: int | None) -> AgeCategory | None:
    if age is None:
        return None
    for category in AGE_CATEGORIES:
        if age < category.max:
            return category
    return AGE_CATEGORIES[-1]


def calculate_readiness_score(assessment: Assessment, profile: UserProfile | None = None) -> int:
    """Weighted readiness score in [0, 100].

    Order of operations:
        1. Normalize 1-5 inputs to 0-100 (DOMS and stress inverted)
        2. Weighted sum; the menstrual-phase weight is redistributed evenly
           over the other four unless the profile is female and a phase is set
        3. Multiply by the phase modifier (female with phase only)
        4. x0.95 when not hydrated, x0.90 when fasting
        5. Clamp to [0, 100] and round half-up

    Args:
        assessment: Pre-workout assessment
        profile: User profile (only gender is used)

    Returns:
        Integer readiness score
    """
    is_female = profile is not None and profile.gender == Gender.FEMALE
    phase = assessment.menstrual_phase

    normalized_energy = (assessment.energy / 5) * 100
    normalized_doms = ((6 - assessment.doms) / 5) * 100
    normalized_stress = ((6 - assessment.stress) / 5) * 100
    normalized_motivation = (assessment.motivation / 5) * 100

    weights = dict(READINESS_WEIGHTS)
    apply_phase = is_female and phase is not None
    if not apply_phase:
        share = weights["menstrual_phase"] / 4
        for key in ("energy", "doms", "stress", "motivation"):
            weights[key] += share
        weights["menstrual_phase"] = 0.0

    score = (
        normalized_energy * weights["energy"]
        + normalized_doms * weights["doms"]
        + normalized_stress * weights["stress"]
        + normalized_motivation * weights["motivation"]
    )

    if apply_phase:
        score *= MENSTRUAL_PHASE_MODIFIERS[phase]

    if not assessment.hydration:
        score *= DEHYDRATION_MULTIPLIER
    if assessment.fasting:
        score *= FASTING_MULTIPLIER

    return int(round_half_up(max(0.0, min(100.0, score))))


def get_readiness_level(score: float) -> ReadinessLevel:
    if score <= READINESS_LOW_MAX:
        return ReadinessLevel.LOW
    if score <= READINESS_MEDIUM_MAX:
        return ReadinessLevel.MEDIUM
    return ReadinessLevel.HIGH


@dataclass(frozen=True)
class ProgressionHistory:
    """Context for the progression matrix beyond the current session."""

    pain_reported: bool = False
    consecutive_high_rpe: int = 0
    recent_sessions: tuple[Session, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ProgressionDecision:
    action: ProgressionAction
    reason: str
    confidence: float  # informational only


def calculate_progression_decision(
    rpe: float,
    completion: float,
    history: ProgressionHistory | None = None,
) -> ProgressionDecision:
    """RPE x completion decision matrix.

    Precedence (first match wins):
        1. Pain reported → DECREASE
        2. 3+ consecutive high-RPE sessions → REST
        3. RPE <= 4 and completion >= 80 → INCREASE
        4. RPE <= 5 and completion >= 90 → INCREASE
        5. RPE >= 8 and completion < 60 → DECREASE
        6. RPE >= 7 and completion < 70 → DECREASE
        7. Otherwise → MAINTAIN

    Pain short-circuits before any RPE/completion check.
    """
    history = history or ProgressionHistory()

    if history.pain_reported:
        return ProgressionDecision(
            action=ProgressionAction.DECREASE,
            reason="Dolore riportato - riduci intensità per recuperare",
            confidence=0.9,
        )

    if history.consecutive_high_rpe >= CONSECUTIVE_HIGH_RPE_FOR_REST:
        return ProgressionDecision(
            action=ProgressionAction.REST,
            reason="RPE alto per 3+ sessioni consecutive - riposo consigliato",
            confidence=0.85,
        )

    if rpe <= 4 and completion >= 80:
        return ProgressionDecision(
            action=ProgressionAction.INCREASE,
            reason="Ottimo lavoro! Pronto per aumentare la difficoltà",
            confidence=0.8,
        )

    if rpe <= 5 and completion >= 90:
        return ProgressionDecision(
            action=ProgressionAction.INCREASE,
            reason="Completamento eccellente, puoi spingerti di più",
            confidence=0.7,
        )

    if rpe >= 8 and completion < 60:
        return ProgressionDecision(
            action=ProgressionAction.DECREASE,
            reason="Allenamento troppo intenso - riduci per la prossima sessione",
            confidence=0.85,
        )

    if rpe >= 7 and completion < 70:
        return ProgressionDecision(
            action=ProgressionAction.DECREASE,
            reason="Difficoltà elevata - considera una riduzione",
            confidence=0.7,
        )

    return ProgressionDecision(
        action=ProgressionAction.MAINTAIN,
        reason="Buon equilibrio tra sforzo e completamento",
        confidence=0.75,
    )


def count_consecutive_high_rpe(sessions: Sequence[Session]) -> int:
    """Sessions, newest first, with RPE >= 8 before the first one without."""
    count = 0
    for session in sorted(sessions, key=lambda s: s.completed_at, reverse=True):
        rpe = session.post_workout.rpe if session.post_workout else None
        if rpe is None or rpe < HIGH_RPE:
            break
        count += 1
    return count


def days_since(value: date | datetime | str, now: datetime | None = None) -> int | None:
    """Absolute number of whole days between value and now.

    Returns None when value cannot be read as a date.
    """
    now = resolve_now(now)
    then = parse_timestamp(value, now.tzinfo)
    if then is None:
        return None
    diff_ms = abs((now - then).total_seconds()) * 1000
    return math.floor(diff_ms / MS_PER_DAY)


def average(values: Sequence[float]) -> float:
    if not values:
        return 0
    return sum(values) / len(values)


def analyze_trend(values: Sequence[float]) -> TrendLabel:
    """Compare the mean of the last 3 values with the mean of the first 3.

    Values are ordered oldest to newest. A change larger than 10% of the older
    mean is a trend; fewer than 3 values is always stable.
    """
    if not values or len(values) < TREND_MIN_POINTS:
        return TrendLabel.STABLE

    recent_avg = average(values[-TREND_MIN_POINTS:])
    older_avg = average(values[:TREND_MIN_POINTS])
    diff = recent_avg - older_avg
    threshold = older_avg * TREND_RELATIVE_THRESHOLD

    if diff > threshold:
        return TrendLabel.UP
    if diff < -threshold:
        return TrendLabel.DOWN
    return TrendLabel.STABLE


def linear_slope(values: Sequence[float]) -> float:
    """Least-squares slope of values against their index."""
    n = len(values)
    if n < 2:
        return 0.0
    sum_x = sum_y = sum_xy = sum_x2 = 0.0
    for i, y in enumerate(values):
        sum_x += i
        sum_y += y
        sum_xy += i * y
        sum_x2 += i * i
    return (n * sum_xy - sum_x * sum_y) / (n * sum_x2 - sum_x * sum_x)


def trend_direction(values: Sequence[float], threshold: float = SLOPE_THRESHOLD) -> TrendDirection:
    """Slope-based direction; series shorter than 3 are stable."""
    if len(values) < TREND_MIN_POINTS:
        return TrendDirection.STABLE
    slope = linear_slope(values)
    if slope > threshold:
        return TrendDirection.INCREASING
    if slope < -threshold:
        return TrendDirection.DECREASING
    return TrendDirection.STABLE


def calculate_recovery_time(rpe: float, age: int | None) -> int:
    """Recommended recovery hours after a session."""
    category = get_age_category(age)
    age_multiplier = category.recovery_multiplier if category else 1.0
    rpe_multiplier = 1 + (rpe - NEUTRAL_RPE) * 0.1
    return int(round_half_up(BASE_RECOVERY_HOURS * rpe_multiplier * age_multiplier))


def estimate_calories_burned(duration_minutes: float, rpe: float, weight_kg: float) -> int:
    """Calories = MET x weight(kg) x duration(hours), MET bucketed by RPE."""
    if rpe <= 3:
        met = 3
    elif rpe <= 6:
        met = 5
    elif rpe <= 8:
        met = 7
    else:
        met = 9
    hours = duration_minutes / 60
    return int(round_half_up(met * weight_kg * hours))


def calculate_intensity_modifier(readiness_score: float) -> float:
    """Workout intensity multiplier (0.5-1.1) for a readiness score."""
    if readiness_score < 30:
        return 0.5
    if readiness_score < 50:
        return 0.7
    if readiness_score < 70:
        return 0.85
    if readiness_score < 85:
        return 1.0
    return 1.1
