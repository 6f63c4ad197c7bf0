"""CLI for the adaptive coaching engine.

Runs the same orchestrator code path a UI would, over a JSON input file::

    {
        "profile": {...},
        "assessment": {...},
        "feedback": {...},
        "sessions": [{...}, ...]
    }

Every key is optional. Records use the stored camelCase keys.
"""

import asyncio
import json
from collections.abc import Sequence
from dataclasses import asdict
from datetime import datetime
from pathlib import Path

import typer
from loguru import logger
from pydantic import BaseModel, Field, ValidationError
from rich.console import Console
from rich.json import JSON
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from adaptive_coach.coach.orchestrator import DecisionOrchestrator
from adaptive_coach.coach.service import CoachingService
from adaptive_coach.config.settings import settings
from adaptive_coach.core.clock import Clock, local_now, resolve_now
from adaptive_coach.core.logger import setup_logger
from adaptive_coach.metrics.calculations import calculate_readiness_score, get_readiness_level
from adaptive_coach.metrics.constants import READINESS_LABELS
from adaptive_coach.metrics.session_analysis import calculate_consistency_metrics, detect_session_patterns
from adaptive_coach.rules.errors import RuleSetLoadError
from adaptive_coach.rules.loader import build_default_engine
from adaptive_coach.state.enums import Gender, MenstrualPhase
from adaptive_coach.state.models import Assessment, Feedback, Session, UserProfile

# Initialize Rich console for output
console = Console()

# Initialize Typer app
app = typer.Typer(
    name="adaptive-coach",
    help="Adaptive Coach CLI - readiness, progression and anti-pattern decisions",
    add_completion=False,
)

LEVEL_STYLES = {"low": "red", "medium": "yellow", "high": "green"}


class CoachInput(BaseModel):
    profile: UserProfile | None = None
    assessment: Assessment | None = None
    feedback: Feedback | None = None
    sessions: list[Session] = Field(default_factory=list)

    def recent_sessions(self, limit: int) -> list[Session]:
        return sorted(self.sessions, key=lambda s: s.completed_at, reverse=True)[:limit]


def _setup_logging(debug: bool = False) -> None:
    """Set up logging from settings; --debug forces the DEBUG level."""
    setup_logger(
        level="DEBUG" if debug else settings.log_level,
        log_file=settings.log_file,
        serialize=settings.log_json,
    )


def _load_input(path: Path) -> CoachInput:
    try:
        return CoachInput.model_validate_json(path.read_text(encoding="utf-8"))
    except OSError as e:
        console.print(f"[red]Error:[/red] cannot read {path}: {e}", style="bold red")
        raise typer.Exit(1) from e
    except ValidationError as e:
        console.print(f"[red]Error:[/red] invalid input in {path}", style="bold red")
        console.print(str(e))
        raise typer.Exit(1) from e


def _make_clock(now: str | None) -> Clock:
    if now is None:
        return local_now
    try:
        fixed = resolve_now(datetime.fromisoformat(now))
    except ValueError as e:
        console.print(f"[red]Error:[/red] --now must be an ISO-8601 timestamp, got {now!r}", style="bold red")
        raise typer.Exit(1) from e
    return lambda: fixed


def _build_service(clock: Clock, rules_dir: Path | None) -> CoachingService:
    try:
        engine = build_default_engine(directory=rules_dir, clock=clock)
    except RuleSetLoadError as e:
        console.print(f"[red]Error:[/red] {e}", style="bold red")
        raise typer.Exit(1) from e
    orchestrator = DecisionOrchestrator(engine, clock=clock, lookback_days=settings.history_lookback_days)
    return CoachingService(orchestrator, top_recommendations=settings.top_recommendations)


def _emit(result: BaseModel | dict, output_file: Path | None) -> None:
    payload = result.model_dump(mode="json") if isinstance(result, BaseModel) else result
    content = json.dumps(payload, indent=2, ensure_ascii=False)
    if output_file:
        output_file.write_text(content, encoding="utf-8")
        console.print(f"[green]Output written to {output_file}[/green]")
        return
    console.print(JSON(content))


def _session_window(data: CoachInput) -> Sequence[Session]:
    return data.recent_sessions(settings.history_max_sessions)


InputArg = typer.Argument(..., exists=True, dir_okay=False, help="JSON file with profile/assessment/feedback/sessions")
NowOpt = typer.Option(None, "--now", help="Reference time (ISO-8601); defaults to the local clock")
RulesDirOpt = typer.Option(None, "--rules-dir", help="Rule set directory; defaults to COACH_RULESETS_DIR or the packaged rules")
OutputOpt = typer.Option(None, "--output", "-o", help="Write JSON output to file")
DebugOpt = typer.Option(False, "--debug", help="Enable debug logging")


@app.command()
def readiness(
    input_file: Path = InputArg,
    now: str | None = NowOpt,
    rules_dir: Path | None = RulesDirOpt,
    output_file: Path | None = OutputOpt,
    debug: bool = DebugOpt,
) -> None:
    """Readiness score for the pre-workout assessment, adjusted by the rules."""
    _setup_logging(debug)
    data = _load_input(input_file)
    service = _build_service(_make_clock(now), rules_dir)

    view = asyncio.run(service.readiness_view(data.profile, data.assessment, _session_window(data)))
    style = LEVEL_STYLES[view.level.value]
    console.print(
        Panel(
            Text(f"{view.score}/100 - {view.label}", style=f"bold {style}"),
            subtitle=view.summary,
            border_style=style,
        )
    )
    _emit(view, output_file)


@app.command()
def progression(
    input_file: Path = InputArg,
    now: str | None = NowOpt,
    rules_dir: Path | None = RulesDirOpt,
    output_file: Path | None = OutputOpt,
    debug: bool = DebugOpt,
) -> None:
    """Progression decision for the next session from the post-workout feedback."""
    _setup_logging(debug)
    data = _load_input(input_file)
    if data.feedback is None:
        console.print("[yellow]No feedback in input: the decision falls back to history only[/yellow]")
    service = _build_service(_make_clock(now), rules_dir)

    view = asyncio.run(service.progression_view(data.profile, data.assessment, data.feedback, _session_window(data)))
    console.print(
        Panel(
            Text(f"{view.icon} {view.label} (x{view.adjustment_factor})", style="bold cyan"),
            subtitle=view.reason,
            border_style="yellow" if view.has_warnings else "cyan",
        )
    )
    _emit(view, output_file)


@app.command()
def exercises(
    input_file: Path = InputArg,
    now: str | None = NowOpt,
    rules_dir: Path | None = RulesDirOpt,
    output_file: Path | None = OutputOpt,
    debug: bool = DebugOpt,
) -> None:
    """Exercises to exclude, modify or recommend for this profile and assessment."""
    _setup_logging(debug)
    data = _load_input(input_file)
    service = _build_service(_make_clock(now), rules_dir)

    result = asyncio.run(service.get_exercise_recommendations(data.profile, data.assessment, _session_window(data)))
    _emit(result, output_file)


@app.command()
def patterns(
    input_file: Path = InputArg,
    now: str | None = NowOpt,
    rules_dir: Path | None = RulesDirOpt,
    output_file: Path | None = OutputOpt,
    debug: bool = DebugOpt,
) -> None:
    """Anti-patterns in the session history (rules) plus consistency metrics."""
    _setup_logging(debug)
    data = _load_input(input_file)
    clock = _make_clock(now)
    service = _build_service(clock, rules_dir)
    sessions = _session_window(data)

    report = asyncio.run(service.detect_anti_patterns(data.profile, sessions))
    if report.patterns:
        table = Table(title="Anti-patterns")
        table.add_column("Type", style="cyan")
        table.add_column("Severity")
        table.add_column("Recommendation")
        for pattern in report.patterns:
            table.add_row(pattern.message, pattern.severity or "-", pattern.recommendation or "")
        console.print(table)
    else:
        console.print("[green]No anti-patterns detected[/green]")

    consistency = calculate_consistency_metrics(data.sessions, now=clock())
    heuristics = detect_session_patterns(data.sessions)
    _emit(
        {
            "report": report.model_dump(mode="json"),
            "consistency": asdict(consistency),
            "sessionPatterns": [asdict(p) for p in heuristics],
        },
        output_file,
    )


@app.command()
def score(
    energy: int = typer.Option(3, "--energy", min=1, max=5),
    doms: int = typer.Option(3, "--doms", min=1, max=5),
    stress: int = typer.Option(3, "--stress", min=1, max=5),
    motivation: int = typer.Option(3, "--motivation", min=1, max=5),
    gender: Gender | None = typer.Option(None, "--gender"),
    phase: MenstrualPhase | None = typer.Option(None, "--phase", help="Menstrual phase (female profiles only)"),
    hydrated: bool = typer.Option(True, "--hydrated/--dehydrated"),
    fasting: bool = typer.Option(False, "--fasting"),
) -> None:
    """Base readiness score from the assessment inputs, without rules."""
    assessment = Assessment(
        energy=energy,
        doms=doms,
        stress=stress,
        motivation=motivation,
        menstrual_phase=phase,
        hydration=hydrated,
        fasting=fasting,
    )
    profile = UserProfile(gender=gender) if gender else None
    value = calculate_readiness_score(assessment, profile)
    level = get_readiness_level(value)
    console.print(f"[bold {LEVEL_STYLES[level.value]}]{value}[/bold {LEVEL_STYLES[level.value]}] {level.value} - {READINESS_LABELS[level]}")


@app.command()
def rules(
    rules_dir: Path | None = RulesDirOpt,
    debug: bool = DebugOpt,
) -> None:
    """List the loaded rules in evaluation order."""
    _setup_logging(debug)
    try:
        engine = build_default_engine(directory=rules_dir)
    except RuleSetLoadError as e:
        console.print(f"[red]Error:[/red] {e}", style="bold red")
        raise typer.Exit(1) from e

    table = Table(title=f"{len(engine.rules)} rules ({engine.state.value})")
    table.add_column("#", justify="right")
    table.add_column("Name", style="cyan")
    table.add_column("Event")
    table.add_column("Priority", justify="right")
    for index, rule in enumerate(engine.rules, start=1):
        priority = rule.event.params.priority
        table.add_row(str(index), rule.name, rule.event.type.value, "-" if priority is None else str(priority))
    console.print(table)
    logger.debug("Rules listed", count=len(engine.rules))


if __name__ == "__main__":
    app()
