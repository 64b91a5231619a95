"""File loaders and the assemble/score pipeline."""

from __future__ import annotations

import json
from dataclasses import asdict
from enum import Enum
from pathlib import Path
from typing import Any, Iterable, Mapping, Sequence

import pendulum
import structlog
from pydantic import BaseModel, ValidationError

from . import __version__
from .catalog import QuestionBank, TeamProfileRegistry
from .core.errors import InvalidInputError
from .core.scoring import ScoringResult, TeamFitScoringEngine
from .core.selection import (
    CompetencySelector,
    DistributionPlanner,
    DistributionStrategy,
    SelectionWarnings,
)
from .schemas import Answer, BehavioralIndicator, Competency, DifficultyLevel, Question, TeamProfile


class RecordLoadError(ValueError):
    """Raised when a loader meets invalid records; keeps what did load."""

    label = "Record"

    def __init__(self, errors: list[str], partial: Any):
        super().__init__(f"{self.label} loading failed")
        self.errors = errors
        self.partial = partial

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.label} loading failed: {self.errors}"


class BankLoadError(RecordLoadError):
    label = "Question bank"


class AnswerLoadError(RecordLoadError):
    label = "Answer"


class TeamProfileLoadError(RecordLoadError):
    label = "Team profile"


def _read_json(path: Path, what: str) -> Any:
    with path.open("r", encoding="utf-8") as handle:
        try:
            return json.load(handle)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid {what} JSON: {exc}") from exc


def _validate_records(
    model: type[BaseModel],
    records: Any,
    section: str,
    errors: list[str],
) -> list[Any]:
    if records is None:
        return []
    if not isinstance(records, list):
        errors.append(f"{section}: expected a list")
        return []
    valid = []
    for idx, record in enumerate(records):
        try:
            valid.append(model.model_validate(record))
        except ValidationError as exc:
            errors.append(f"{section}[{idx}]: {exc}")
    return valid


class BankLoader:
    """Load a question bank document.

    The document is a JSON object with ``competencies``, ``indicators``,
    ``questions`` and ``retired_question_ids`` keys. Indicators must point at
    a known competency and questions at a known indicator.
    """

    def load(self, path: Path) -> QuestionBank:
        data = _read_json(path, "question bank")
        if not isinstance(data, dict):
            raise ValueError("Question bank JSON must be an object")

        errors: list[str] = []
        competencies = _validate_records(Competency, data.get("competencies"), "competencies", errors)
        competency_ids = {item.competency_id for item in competencies}

        indicators: list[BehavioralIndicator] = []
        for indicator in _validate_records(BehavioralIndicator, data.get("indicators"), "indicators", errors):
            if indicator.competency_id not in competency_ids:
                errors.append(
                    f"indicator {indicator.indicator_id}: unknown competency '{indicator.competency_id}'"
                )
                continue
            indicators.append(indicator)
        indicator_ids = {item.indicator_id for item in indicators}

        questions: list[Question] = []
        for question in _validate_records(Question, data.get("questions"), "questions", errors):
            if question.indicator_id not in indicator_ids:
                errors.append(f"question {question.question_id}: unknown indicator '{question.indicator_id}'")
                continue
            questions.append(question)

        retired = data.get("retired_question_ids") or []
        if not isinstance(retired, list):
            errors.append("retired_question_ids: expected a list")
            retired = []

        bank = QuestionBank(
            competencies=competencies,
            indicators=indicators,
            questions=questions,
            retired_question_ids=[str(item) for item in retired],
        )
        if errors:
            raise BankLoadError(errors, bank)
        return bank


class AnswerLoader:
    """Load session answers from JSON lines."""

    def load(self, path: Path) -> list[Answer]:
        answers: list[Answer] = []
        errors: list[str] = []
        with path.open("r", encoding="utf-8") as handle:
            for idx, line in enumerate(handle, start=1):
                raw = line.strip()
                if not raw:
                    continue
                try:
                    record = json.loads(raw)
                except json.JSONDecodeError as exc:
                    errors.append(f"line {idx}: invalid JSON ({exc})")
                    continue
                try:
                    answers.append(Answer.model_validate(record))
                except ValidationError as exc:
                    errors.append(f"line {idx}: {exc}")
        if errors:
            raise AnswerLoadError(errors, answers)
        return answers


class TeamProfileLoader:
    """Load team profiles from a JSON list (or ``{"teams": [...]}``)."""

    def load(self, path: Path) -> TeamProfileRegistry:
        data = _read_json(path, "team profile")
        if isinstance(data, dict):
            data = data.get("teams")
        errors: list[str] = []
        profiles = _validate_records(TeamProfile, data, "teams", errors)
        registry = TeamProfileRegistry(profiles)
        if errors:
            raise TeamProfileLoadError(errors, registry)
        return registry


class OutputWriter:
    """Persist pipeline payloads as JSON."""

    def write(self, path: Path, payload: dict | list[dict]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps(payload, ensure_ascii=False, indent=2, default=_json_default),
            encoding="utf-8",
        )


class AssessmentPipeline:
    """Assemble question sets and score answer sessions against a bank."""

    def __init__(
        self,
        *,
        bank: QuestionBank,
        selector: CompetencySelector,
        engine: TeamFitScoringEngine,
        selection: Mapping[str, Any] | None = None,
        answer_loader: AnswerLoader | None = None,
        writer: OutputWriter | None = None,
    ) -> None:
        self._bank = bank
        self._selector = selector
        self._engine = engine
        self._selection = dict(selection or {})
        self._answers = answer_loader or AnswerLoader()
        self._writer = writer or OutputWriter()
        self._logger = structlog.get_logger(__name__)

    def assemble(
        self,
        *,
        competency_ids: Sequence[str],
        output_path: Path,
        per_indicator: int | None = None,
        strategy: DistributionStrategy | str | None = None,
        preferred_difficulty: DifficultyLevel | str | None = None,
        context_neutral_only: bool | None = None,
        shuffle: bool | None = None,
        competency_weights: Mapping[str, float] | None = None,
        session_id: str | None = None,
    ) -> list[str]:
        """Select questions for the competencies and write them with metadata.

        Arguments left as ``None`` fall back to the configured selection
        defaults. ``competency_weights`` switches to weighted selection.
        """
        per_indicator = self._setting("per_indicator", per_indicator, 3)
        strategy = self._setting("strategy", strategy, DistributionStrategy.WATERFALL)
        preferred = self._setting("preferred_difficulty", preferred_difficulty, None)
        if preferred is not None:
            try:
                preferred = DifficultyLevel(preferred)
            except ValueError as exc:
                raise InvalidInputError(f"Unknown difficulty level: {preferred!r}") from exc
        context_neutral_only = self._setting("context_neutral_only", context_neutral_only, False)
        shuffle = self._setting("shuffle", shuffle, False)

        warnings = SelectionWarnings()
        if competency_weights:
            selected = self._selector.select_for_competencies_weighted(
                competency_ids,
                competency_weights,
                per_indicator,
                preferred,
                shuffle=shuffle,
                warnings=warnings,
            )
            strategy = DistributionStrategy.WEIGHTED
        else:
            selected = self._selector.select_for_competencies(
                competency_ids,
                per_indicator,
                preferred,
                shuffle=shuffle,
                context_neutral_only=context_neutral_only,
                strategy=strategy,
                warnings=warnings,
            )

        questions = [self._describe_question(question_id) for question_id in selected]
        collected = warnings.drain()
        for warning in collected:
            self._logger.warning("selection.warning", code=warning.code.value, **warning.details)

        metadata = {
            "session_id": session_id,
            "competency_ids": list(competency_ids),
            "strategy": DistributionPlanner.resolve_strategy(strategy).value,
            "per_indicator": per_indicator,
            "question_count": len(selected),
            "warnings": [asdict(warning) for warning in collected],
            "timestamp": pendulum.now().to_iso8601_string(),
            "app_version": __version__,
        }
        self._writer.write(output_path, {"metadata": metadata, "questions": questions})
        self._logger.info(
            "assembly.result",
            session_id=session_id,
            competencies=len(competency_ids),
            questions=len(selected),
            warnings=len(collected),
        )
        return selected

    def score(
        self,
        *,
        answers_path: Path,
        output_path: Path,
        team_id: str | None = None,
        saturation_threshold: float | None = None,
        role_weights: Mapping[str, float] | None = None,
    ) -> ScoringResult:
        load_errors: list[str] = []
        try:
            answers = self._answers.load(answers_path)
        except AnswerLoadError as exc:
            answers = exc.partial
            load_errors.extend(exc.errors)
            self._logger.warning("answers.partial_load", errors=exc.errors)

        result = self._engine.score(
            answers,
            questions=self._bank.questions,
            indicators=self._bank.indicators,
            competencies=self._bank.competencies,
            team_id=team_id,
            saturation_threshold=saturation_threshold,
            role_weights=role_weights,
        )

        metadata = {
            "team_id": team_id,
            "answer_count": len(answers),
            "errors": load_errors,
            "timestamp": pendulum.now().to_iso8601_string(),
            "app_version": __version__,
        }
        self._writer.write(output_path, {"metadata": metadata, "result": asdict(result)})
        return result

    def _setting(self, key: str, value: Any, default: Any) -> Any:
        if value is not None:
            return value
        configured = self._selection.get(key)
        return default if configured is None else configured

    def _describe_question(self, question_id: str) -> dict[str, Any]:
        question = self._bank.questions[question_id]
        indicator = self._bank.indicators.get(question.indicator_id)
        return {
            "question_id": question.question_id,
            "indicator_id": question.indicator_id,
            "competency_id": indicator.competency_id if indicator is not None else None,
            "difficulty": question.difficulty.value if question.difficulty is not None else None,
        }


def load_bank(path: Path) -> tuple[QuestionBank, list[str]]:
    """Load a bank, keeping the partial result when some records are invalid."""
    try:
        return BankLoader().load(path), []
    except BankLoadError as exc:
        structlog.get_logger(__name__).warning("bank.partial_load", errors=exc.errors)
        return exc.partial, exc.errors


def load_team_profiles(path: Path) -> tuple[TeamProfileRegistry, list[str]]:
    try:
        return TeamProfileLoader().load(path), []
    except TeamProfileLoadError as exc:
        structlog.get_logger(__name__).warning("team_profiles.partial_load", errors=exc.errors)
        return exc.partial, exc.errors


def parse_weights(entries: Iterable[str]) -> dict[str, float]:
    """Parse ``ID=WEIGHT`` pairs from the command line."""
    weights: dict[str, float] = {}
    for entry in entries:
        key, sep, value = entry.partition("=")
        if not sep or not key.strip():
            raise ValueError(f"Expected ID=WEIGHT, got {entry!r}")
        try:
            weights[key.strip()] = float(value)
        except ValueError as exc:
            raise ValueError(f"Invalid weight in {entry!r}") from exc
    return weights


def _json_default(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    if isinstance(value, pendulum.DateTime):
        return value.to_iso8601_string()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")
