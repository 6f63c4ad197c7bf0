from pathlib import Path

from loguru import logger
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from adaptive_coach.rules.engine import DuplicateRulePolicy


class Settings(BaseSettings):
    log_level: str = Field(default="INFO", validation_alias="COACH_LOG_LEVEL")
    log_file: str | None = Field(default=None, validation_alias="COACH_LOG_FILE")
    log_json: bool = Field(default=False, validation_alias="COACH_LOG_JSON", description="JSON lines on stderr")
    rulesets_dir: Path | None = Field(
        default=None,
        validation_alias="COACH_RULESETS_DIR",
        description="Directory of *.rules.json / *.rules.yaml files; None uses the packaged rule sets",
    )
    duplicate_rule_policy: DuplicateRulePolicy = Field(
        default=DuplicateRulePolicy.REPLACE,
        validation_alias="COACH_DUPLICATE_RULE_POLICY",
    )
    history_lookback_days: int = Field(default=14, ge=1, validation_alias="COACH_HISTORY_LOOKBACK_DAYS")
    history_max_sessions: int = Field(
        default=20,
        ge=1,
        validation_alias="COACH_HISTORY_MAX_SESSIONS",
        description="Most recent sessions handed to the engine by the CLI",
    )
    top_recommendations: int = Field(default=5, ge=0, validation_alias="COACH_TOP_RECOMMENDATIONS")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="COACH_",
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate that log level is one of the standard logging levels."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_value = value.upper()
        if upper_value not in valid_levels:
            logger.warning(f"Invalid COACH_LOG_LEVEL '{value}'. Valid levels are: {', '.join(valid_levels)}. Defaulting to INFO.")
            return "INFO"
        return upper_value

    @field_validator("rulesets_dir")
    @classmethod
    def validate_rulesets_dir(cls, value: Path | None) -> Path | None:
        """Warn early when a configured rule set directory does not exist."""
        if value is not None and not value.is_dir():
            logger.warning(f"COACH_RULESETS_DIR does not exist: {value}. Rule set loading will fail.")
        return value


settings = Settings()
