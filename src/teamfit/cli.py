"""Typer CLI entrypoint for question assembly and scoring."""

from __future__ import annotations

import uuid
from pathlib import Path
from typing import Any, List, Optional

import typer
from pydantic import ValidationError

from .config import load_yaml
from .container import create_container
from .core.errors import InvalidInputError
from .logging import configure_logging
from .pipeline import load_bank, load_team_profiles, parse_weights
from .schemas.config import load_config

app = typer.Typer(help="Adaptive question selection and team-fit scoring CLI.")


def _load_settings(config: Optional[Path]) -> dict[str, Any]:
    if not config:
        return load_config(None).to_settings()
    try:
        raw = load_yaml(config)
        return load_config(raw).to_settings()
    except (ValueError, ValidationError) as exc:
        raise typer.BadParameter(str(exc), param_name="config") from exc


def _weights_option(entries: Optional[List[str]], name: str) -> dict[str, float] | None:
    if not entries:
        return None
    try:
        return parse_weights(entries)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_name=name) from exc


@app.command()
def assemble(
    bank: Path = typer.Option(..., exists=True, readable=True, dir_okay=False, help="Question bank JSON path."),
    competency: List[str] = typer.Option(..., "--competency", "-c", help="Competency id (repeatable)."),
    output: Path = typer.Option(
        ...,
        exists=False,
        file_okay=True,
        dir_okay=False,
        resolve_path=True,
        help="Output JSON path.",
    ),
    per_indicator: Optional[int] = typer.Option(None, min=0, help="Questions per indicator."),
    strategy: Optional[str] = typer.Option(None, help="WATERFALL, WEIGHTED or PRIORITY_FIRST."),
    difficulty: Optional[str] = typer.Option(None, help="Preferred difficulty level."),
    context_neutral: Optional[bool] = typer.Option(
        None, "--context-neutral/--no-context-neutral", help="Only use GENERAL-tagged questions."
    ),
    shuffle: Optional[bool] = typer.Option(None, "--shuffle/--no-shuffle", help="Shuffle the final order."),
    weight: Optional[List[str]] = typer.Option(None, help="Competency weight as ID=WEIGHT (repeatable)."),
    session_id: Optional[str] = typer.Option(None, help="Session UUID for reproducible ordering."),
    seed: Optional[int] = typer.Option(None, help="Random seed when no session id is given."),
    config: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help="YAML config path."),
    log_level: str = typer.Option("INFO", help="Log level for structured logging."),
) -> None:
    """Assemble a question set for one or more competencies."""
    settings = _load_settings(config)
    weights = _weights_option(weight, "weight")
    if session_id is not None:
        try:
            session_id = str(uuid.UUID(session_id))
        except ValueError as exc:
            raise typer.BadParameter("Session id must be a UUID", param_name="session_id") from exc

    configure_logging(log_level)

    question_bank, _ = load_bank(bank)
    container = create_container(settings=settings, bank=question_bank, seed=seed, session_id=session_id)
    pipeline = container.pipeline()

    try:
        selected = pipeline.assemble(
            competency_ids=competency,
            output_path=output,
            per_indicator=per_indicator,
            strategy=strategy,
            preferred_difficulty=difficulty.upper() if difficulty else None,
            context_neutral_only=context_neutral,
            shuffle=shuffle,
            competency_weights=weights,
            session_id=session_id,
        )
    except InvalidInputError as exc:
        raise typer.BadParameter(str(exc)) from exc
    typer.echo(f"Selected {len(selected)} questions. Results saved to {output}.")


@app.command()
def score(
    bank: Path = typer.Option(..., exists=True, readable=True, dir_okay=False, help="Question bank JSON path."),
    answers: Path = typer.Option(..., exists=True, readable=True, dir_okay=False, help="Answers JSONL path."),
    output: Path = typer.Option(
        ...,
        exists=False,
        file_okay=True,
        dir_okay=False,
        resolve_path=True,
        help="Output JSON path.",
    ),
    teams: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help="Team profiles JSON path."),
    team_id: Optional[str] = typer.Option(None, help="Team to score against."),
    saturation_threshold: Optional[float] = typer.Option(None, help="Saturation threshold override."),
    role_weight: Optional[List[str]] = typer.Option(None, help="Role weight as ID=WEIGHT (repeatable)."),
    config: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help="YAML config path."),
    log_level: str = typer.Option("INFO", help="Log level for structured logging."),
) -> None:
    """Score an answer session against the bank and an optional team."""
    settings = _load_settings(config)
    role_weights = _weights_option(role_weight, "role_weight")

    configure_logging(log_level)

    question_bank, _ = load_bank(bank)
    registry = load_team_profiles(teams)[0] if teams else None
    container = create_container(settings=settings, bank=question_bank, team_profiles=registry)
    pipeline = container.pipeline()

    try:
        result = pipeline.score(
            answers_path=answers,
            output_path=output,
            team_id=team_id,
            saturation_threshold=saturation_threshold,
            role_weights=role_weights,
        )
    except InvalidInputError as exc:
        raise typer.BadParameter(str(exc)) from exc
    verdict = "PASS" if result.passed else "FAIL"
    typer.echo(f"{verdict} {result.overall_percentage:.1f}%. Results saved to {output}.")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
