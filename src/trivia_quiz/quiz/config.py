"""Configuration loader for quiz runs."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from trivia_quiz.core import config as core_config
from trivia_quiz.core import workspace as workspace_mod

from .client import (
    DEFAULT_BASE_URL,
    MAX_AMOUNT,
    BatchRequest,
    Difficulty,
    QuestionType,
)

CONFIG_FILENAME = "quiz.toml"
ENV_PREFIX = "TRIVIA_QUIZ_"
CONFIG_ENV = f"{ENV_PREFIX}CONFIG"
TEMPLATE_PACKAGE = "trivia_quiz.quiz"

DEFAULTS: Mapping[str, Mapping[str, object]] = {
    "bank": {
        "base_url": DEFAULT_BASE_URL,
        "amount": 10,
        "category": 9,
        "difficulty": Difficulty.EASY.value,
        "type": QuestionType.MULTIPLE.value,
        "timeout_seconds": 10.0,
    },
    "logging": {"level": "INFO", "verbose": False},
}


class QuizConfigError(RuntimeError):
    """Raised when configuration parsing or validation fails."""


@dataclass(frozen=True)
class QuizConfig:
    """Fully resolved settings for a quiz run."""

    request: BatchRequest
    base_url: str
    timeout_seconds: float
    log_level: str
    verbose: bool


@dataclass(frozen=True)
class ConfigOverrides:
    """CLI-sourced values applied on top of environment and file options."""

    amount: Optional[int] = None
    category: Optional[int] = None
    difficulty: Optional[str] = None
    question_type: Optional[str] = None
    log_level: Optional[str] = None
    verbose: Optional[bool] = None


@dataclass(frozen=True)
class LoadResult:
    config: QuizConfig
    layout: workspace_mod.WorkspaceLayout
    config_path: Optional[Path]


def load_config(
    *,
    config_path: Optional[Path] = None,
    overrides: Optional[ConfigOverrides] = None,
    env: Optional[Mapping[str, str]] = None,
    workspace_path: Optional[Path] = None,
) -> LoadResult:
    """Load configuration applying precedence CLI > env > TOML > defaults."""

    overrides = overrides or ConfigOverrides()
    env_map = os.environ if env is None else env

    try:
        layout = workspace_mod.ensure_workspace(
            env=env_map, path=workspace_path
        )
    except workspace_mod.WorkspaceError as exc:
        raise QuizConfigError(str(exc)) from exc

    requested = _resolve_config_path(config_path, env_map, layout)
    loaded_path: Optional[Path] = None
    if requested.exists():
        loaded_path = requested
    elif config_path is not None or _env(env_map, "CONFIG"):
        raise QuizConfigError(f"Config file not found: {requested}")

    try:
        layers = [core_config.load_toml(loaded_path)] if loaded_path else []
        table = core_config.layer_tables(DEFAULTS, *layers)
    except core_config.TomlConfigError as exc:
        raise QuizConfigError(str(exc)) from exc

    bank = table["bank"]
    logging_table = table["logging"]

    amount = _as_int(
        _pick_first(overrides.amount, _env(env_map, "AMOUNT"), bank["amount"]),
        "bank.amount",
    )
    if not 1 <= amount <= MAX_AMOUNT:
        raise QuizConfigError(
            f"bank.amount must be between 1 and {MAX_AMOUNT}, got {amount}."
        )
    category = _as_int(
        _pick_first(
            overrides.category, _env(env_map, "CATEGORY"), bank["category"]
        ),
        "bank.category",
    )
    if category < 1:
        raise QuizConfigError("bank.category must be a positive integer.")

    try:
        difficulty = Difficulty.from_value(
            _pick_first(
                overrides.difficulty,
                _env(env_map, "DIFFICULTY"),
                bank["difficulty"],
            )
        )
        question_type = QuestionType.from_value(
            _pick_first(
                overrides.question_type, _env(env_map, "TYPE"), bank["type"]
            )
        )
    except ValueError as exc:
        raise QuizConfigError(str(exc)) from exc

    base_url = _pick_first(_env(env_map, "BASE_URL"), bank["base_url"])
    if not isinstance(base_url, str) or not base_url.strip():
        raise QuizConfigError("bank.base_url must be a non-empty string.")

    timeout = _as_float(
        _pick_first(_env(env_map, "TIMEOUT"), bank["timeout_seconds"]),
        "bank.timeout_seconds",
    )
    if timeout <= 0:
        raise QuizConfigError("bank.timeout_seconds must be positive.")

    level = _pick_first(
        overrides.log_level, _env(env_map, "LOG_LEVEL"), logging_table["level"]
    )
    if not isinstance(level, str) or not level.strip():
        raise QuizConfigError("logging.level must be a non-empty string.")
    verbose = _pick_first(overrides.verbose, logging_table["verbose"])
    if not isinstance(verbose, bool):
        raise QuizConfigError("logging.verbose must be true or false.")

    config = QuizConfig(
        request=BatchRequest(
            amount=amount,
            category=category,
            difficulty=difficulty,
            question_type=question_type,
        ),
        base_url=base_url.strip(),
        timeout_seconds=timeout,
        log_level=level.strip().upper(),
        verbose=verbose,
    )
    return LoadResult(config=config, layout=layout, config_path=loaded_path)


def template_text() -> str:
    """Return the commented ``quiz.toml`` shipped with the package."""

    try:
        return core_config.read_packaged_text(
            TEMPLATE_PACKAGE, CONFIG_FILENAME
        )
    except core_config.TomlConfigError as exc:  # pragma: no cover
        raise QuizConfigError(str(exc)) from exc


def write_template(path: Path, *, overwrite: bool = False) -> Path:
    try:
        return core_config.write_toml_template(
            path, template=template_text(), overwrite=overwrite
        )
    except core_config.TomlConfigError as exc:
        raise QuizConfigError(str(exc)) from exc


def _resolve_config_path(
    config_path: Optional[Path],
    env_map: Mapping[str, str],
    layout: workspace_mod.WorkspaceLayout,
) -> Path:
    if config_path is not None:
        return config_path.expanduser()
    env_candidate = _env(env_map, "CONFIG")
    if env_candidate:
        return Path(env_candidate).expanduser()
    return layout.path_for("config") / CONFIG_FILENAME


def _env(env_map: Mapping[str, str], key: str) -> Optional[str]:
    raw = env_map.get(f"{ENV_PREFIX}{key}")
    if raw is None:
        return None
    value = raw.strip()
    return value or None


def _as_int(value: object, label: str) -> int:
    if isinstance(value, bool):
        raise QuizConfigError(f"{label} must be an integer.")
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError as exc:
        raise QuizConfigError(f"{label} must be an integer.") from exc


def _as_float(value: object, label: str) -> float:
    if isinstance(value, bool):
        raise QuizConfigError(f"{label} must be a number.")
    try:
        return float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise QuizConfigError(f"{label} must be a number.") from exc


def _pick_first(*candidates: object) -> object:
    for candidate in candidates:
        if candidate is not None:
            return candidate
    return None
