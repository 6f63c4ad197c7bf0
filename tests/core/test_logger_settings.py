"""Tests for logging setup and environment-driven settings."""

import json
import sys

from loguru import logger

from adaptive_coach.config.settings import Settings
from adaptive_coach.core.logger import setup_logger
from adaptive_coach.rules.engine import DuplicateRulePolicy


def test_setup_logger_writes_file_sink(tmp_path):
    log_file = tmp_path / "logs" / "coach.log"
    try:
        setup_logger(level="DEBUG", log_file=str(log_file))
        logger.info("Readiness evaluated", score=58)
    finally:
        logger.remove()
        logger.add(sys.stderr)

    content = log_file.read_text(encoding="utf-8")
    assert "Readiness evaluated" in content
    assert "'score': 58" in content


def test_settings_defaults(monkeypatch):
    for name in ("COACH_LOG_LEVEL", "COACH_RULESETS_DIR", "COACH_DUPLICATE_RULE_POLICY", "COACH_HISTORY_LOOKBACK_DAYS"):
        monkeypatch.delenv(name, raising=False)
    settings = Settings(_env_file=None)
    assert settings.log_level == "INFO"
    assert settings.rulesets_dir is None
    assert settings.duplicate_rule_policy == DuplicateRulePolicy.REPLACE
    assert settings.history_lookback_days == 14


def test_settings_from_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("COACH_LOG_LEVEL", "debug")
    monkeypatch.setenv("COACH_RULESETS_DIR", str(tmp_path))
    monkeypatch.setenv("COACH_DUPLICATE_RULE_POLICY", "reject")
    monkeypatch.setenv("COACH_HISTORY_LOOKBACK_DAYS", "28")
    settings = Settings(_env_file=None)
    assert settings.log_level == "DEBUG"
    assert settings.rulesets_dir == tmp_path
    assert settings.duplicate_rule_policy == DuplicateRulePolicy.REJECT
    assert settings.history_lookback_days == 28


def test_invalid_log_level_falls_back_to_info(monkeypatch):
    monkeypatch.setenv("COACH_LOG_LEVEL", "verbose")
    assert Settings(_env_file=None).log_level == "INFO"


def test_setup_logger_serialized_console(capsys):
    try:
        setup_logger(level="INFO", serialize=True)
        logger.warning("Anti-patterns detected", patterns=["overtraining"])
    finally:
        logger.remove()
        logger.add(sys.stderr)

    record = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
    assert record["record"]["message"] == "Anti-patterns detected"
    assert record["record"]["extra"]["patterns"] == ["overtraining"]
