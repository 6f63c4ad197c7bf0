"""Persisted records consumed by the decision engine.

These are input contracts only. The persistence layer owns the records;
the engine reads them and never writes them back. Keys are accepted both
in the camelCase form used by the stored JSON and as snake_case names.
"""

from datetime import date, datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from adaptive_coach.core.clock import resolve_now
from adaptive_coach.state.enums import Experience, Gender, Goal, MenstrualPhase


class RecordModel(BaseModel):
    """Base for immutable, camelCase-tolerant records."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        extra="ignore",
    )


class UserProfile(RecordModel):
    """Identity, biometric and preference record.

    Age bounds (14-100) are validated by onboarding, not here.
    """

    id: str | None = None
    name: str = ""
    birth_date: date | None = None
    gender: Gender | None = None
    weight: float | None = None  # kg
    height: float | None = None  # cm
    goal: Goal | None = None
    experience: Experience | None = None
    conditions: list[str] = Field(default_factory=list)
    onboarding_completed: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None


class Assessment(RecordModel):
    """Pre-workout self-assessment.

    Scales are 1-5. readiness_score stays None until the assessment is scored;
    scoring produces a copy, the original is never mutated.
    """

    energy: int = Field(default=3, ge=1, le=5)
    doms: int = Field(default=3, ge=1, le=5)
    doms_areas: list[str] = Field(default_factory=list)
    stress: int = Field(default=3, ge=1, le=5)
    motivation: int = Field(default=3, ge=1, le=5)
    available_time: int = 30  # minutes: 15, 30, 45 or 60
    hydration: bool = True
    fasting: bool = False
    menstrual_phase: MenstrualPhase | None = None
    readiness_score: int | None = Field(default=None, ge=0, le=100)
    skipped: bool = False


class Feedback(RecordModel):
    """Post-workout feedback."""

    rpe: int | None = Field(default=None, ge=1, le=10)
    completion: float | None = Field(default=None, ge=0, le=100)
    pain: bool = False
    pain_areas: list[str] = Field(default_factory=list)
    pain_intensity: int = Field(default=0, ge=0, le=5)
    enjoyment: int | None = Field(default=None, ge=1, le=5)
    could_do_more: bool = False
    technique_confidence: int | None = Field(default=None, ge=1, le=5)
    notes: str = ""


class ExerciseEntry(RecordModel):
    name: str | None = None
    exercise_id: str | None = None
    duration: float = 0  # seconds

    @property
    def key(self) -> str | None:
        return self.name or self.exercise_id


class ExerciseDetails(RecordModel):
    """Exercises per workout phase."""

    warmup: list[ExerciseEntry] = Field(default_factory=list)
    workout: list[ExerciseEntry] = Field(default_factory=list)
    cooldown: list[ExerciseEntry] = Field(default_factory=list)


class Session(RecordModel):
    """Append-only history record of one completed workout."""

    day: int | None = None
    workout_title: str | None = None
    duration: float | None = None
    exercise_details: ExerciseDetails | None = None
    pre_workout: Assessment | None = None
    post_workout: Feedback | None = None
    completed_at: datetime = Field(
        validation_alias=AliasChoices("completedAt", "completed_at", "date"),
    )

    @field_validator("completed_at")
    @classmethod
    def validate_completed_at(cls, value: datetime) -> datetime:
        """Naive timestamps are read as UTC so histories always sort."""
        return resolve_now(value)
