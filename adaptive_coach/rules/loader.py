"""Rule set file loading.

Rule sets are ``{"rules": [...]}`` documents stored as ``*.rules.json``
(``.yaml`` / ``.yml`` also accepted). Files are loaded in a fixed category
order so that "first seen" tie-breaks between equal-priority events are
stable; unknown files follow in name order.
"""

import json
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import yaml
from loguru import logger

from adaptive_coach.config.settings import settings
from adaptive_coach.core.clock import Clock, local_now
from adaptive_coach.rules.engine import DuplicateRulePolicy, RulesEngine
from adaptive_coach.rules.errors import RuleSetLoadError

RULESET_SUFFIXES = (".json", ".yaml", ".yml")

RULESET_ORDER = (
    "readiness",
    "progression",
    "anti_pattern",
    "special_cases",
    "exercise_selection",
    "alerts",
)


def packaged_rulesets_dir() -> Path:
    return Path(__file__).parent / "rulesets"


def ruleset_name(path: Path) -> str:
    """``readiness.rules.json`` → ``readiness``."""
    return path.name.split(".", 1)[0]


def read_ruleset(path: Path) -> dict[str, Any]:
    """Parse one rule set file.

    Raises:
        RuleSetLoadError: if the file cannot be read, parsed, or has no rules list
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise RuleSetLoadError(f"Cannot read rule set {path}: {e}") from e

    try:
        document = json.loads(text) if path.suffix == ".json" else yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise RuleSetLoadError(f"Cannot parse rule set {path}: {e}") from e

    if not isinstance(document, dict) or not isinstance(document.get("rules"), list):
        raise RuleSetLoadError(f"Rule set {path} has no 'rules' list")
    return document


def _load_order(path: Path) -> tuple[int, str]:
    name = ruleset_name(path)
    rank = RULESET_ORDER.index(name) if name in RULESET_ORDER else len(RULESET_ORDER)
    return rank, path.name


def ruleset_files(directory: Path) -> list[Path]:
    if not directory.is_dir():
        raise RuleSetLoadError(f"Rule set directory not found: {directory}")
    files = [p for p in directory.iterdir() if p.is_file() and p.suffix in RULESET_SUFFIXES]
    return sorted(files, key=_load_order)


def load_rulesets_from_dir(directory: Path | None = None) -> list[dict[str, Any]]:
    directory = directory or packaged_rulesets_dir()
    rulesets = [read_ruleset(path) for path in ruleset_files(directory)]
    logger.debug("Rule set files read", directory=str(directory), files=len(rulesets))
    return rulesets


def build_default_engine(
    directory: Path | None = None,
    clock: Clock = local_now,
    duplicate_policy: DuplicateRulePolicy | None = None,
    extra_rulesets: Iterable[dict[str, Any]] = (),
) -> RulesEngine:
    """Engine with the predicate library and every rule set of ``directory``.

    Defaults come from settings: ``rulesets_dir`` (packaged rule sets when
    unset) and ``duplicate_rule_policy``.
    """
    engine = RulesEngine(
        duplicate_policy=duplicate_policy or settings.duplicate_rule_policy,
        clock=clock,
    )
    rulesets = load_rulesets_from_dir(directory or settings.rulesets_dir)
    engine.load_all_rulesets([*rulesets, *extra_rulesets])
    return engine
