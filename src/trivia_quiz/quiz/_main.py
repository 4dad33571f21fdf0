"""Command-line entry points for playing and inspecting quizzes."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Sequence

from dotenv import load_dotenv
from rich.console import Console

from trivia_quiz.core import workspace as workspace_mod
from trivia_quiz.core.logging import configure_logger
from trivia_quiz.core.workspace import WorkspaceError

from .client import QuestionBankClient, QuestionBankError
from .config import (
    CONFIG_FILENAME,
    ConfigOverrides,
    LoadResult,
    QuizConfigError,
    load_config,
    write_template,
)
from .console import run_console_quiz
from .formatter import format_batch
from .session import QuizSession

LOGGER_NAME = "trivia_quiz"


def _build_parser(prog: str, description: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=prog, description=description)
    parser.add_argument(
        "--amount",
        type=int,
        help="Number of questions to request (1-50).",
    )
    parser.add_argument(
        "--category",
        type=int,
        help="Question bank category id (9 is General Knowledge).",
    )
    parser.add_argument(
        "--difficulty",
        choices=["easy", "medium", "hard"],
        help="Question difficulty.",
    )
    parser.add_argument(
        "--type",
        dest="question_type",
        choices=["multiple", "boolean"],
        help="Question type.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help=(
            "Path to a TOML config file (defaults to the workspace config "
            "directory)."
        ),
    )
    parser.add_argument(
        "--workspace",
        type=Path,
        help="Override the workspace root used for config and logs.",
    )
    parser.add_argument(
        "--log-level",
        help="Set the logging level for the run (defaults to INFO).",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        default=None,
        help="Mirror log records to stderr.",
    )
    return parser


def _prepare(
    parser: argparse.ArgumentParser, argv: Sequence[str] | None
) -> tuple[argparse.Namespace, LoadResult, logging.Logger]:
    args = parser.parse_args(list(argv) if argv is not None else None)
    load_dotenv()
    overrides = ConfigOverrides(
        amount=args.amount,
        category=args.category,
        difficulty=args.difficulty,
        question_type=args.question_type,
        log_level=args.log_level,
        verbose=args.verbose,
    )
    try:
        loaded = load_config(
            config_path=args.config,
            overrides=overrides,
            workspace_path=args.workspace,
        )
    except QuizConfigError as exc:
        parser.error(str(exc))

    logger, _ = configure_logger(
        LOGGER_NAME,
        log_dir=loaded.layout.path_for("logs"),
        level=loaded.config.log_level,
        verbose=loaded.config.verbose,
        filename="trivia.log",
    )
    logger.debug(
        "CLI invoked",
        extra={"prog": parser.prog, "config_path": loaded.config_path},
    )
    return args, loaded, logger


def _build_session(loaded: LoadResult, logger: logging.Logger) -> QuizSession:
    config = loaded.config
    client = QuestionBankClient(
        config.base_url,
        timeout=config.timeout_seconds,
        logger=logger.getChild("client"),
    )
    return QuizSession(
        client, config.request, logger=logger.getChild("session")
    )


def play_main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser(
        "trivia play", "Play a trivia quiz in the terminal."
    )
    _, loaded, logger = _prepare(parser, argv)
    console = Console()
    session = _build_session(loaded, logger)
    outcome = run_console_quiz(
        session, console, lambda: console.input("[bold cyan]> [/]")
    )
    logger.info("Console quiz ended", extra={"exit": outcome.exit_action})
    return 1 if outcome.exit_action == "failed" else 0


def tui_main(argv: Sequence[str] | None = None) -> int:
    # Imported lazily so the console commands do not pay for Textual.
    from .view import TriviaApp

    parser = _build_parser("trivia tui", "Play a trivia quiz in a Textual UI.")
    _, loaded, logger = _prepare(parser, argv)
    TriviaApp(_build_session(loaded, logger)).run()
    return 0


def fetch_main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser(
        "trivia fetch",
        "Fetch one question batch and print it as JSON lines.",
    )
    parser.add_argument(
        "--output",
        type=Path,
        help="Write the batch to this JSONL file instead of stdout.",
    )
    args, loaded, logger = _prepare(parser, argv)
    config = loaded.config
    client = QuestionBankClient(
        config.base_url,
        timeout=config.timeout_seconds,
        logger=logger.getChild("client"),
    )
    try:
        raws = asyncio.run(client.fetch(config.request))
    except QuestionBankError as exc:
        logger.error("Fetch failed", extra={"kind": exc.kind})
        sys.stderr.write(f"{exc.kind.message}\n{exc}\n")
        return 1

    records = [question.to_dict() for question in format_batch(raws)]
    if args.output is not None:
        write_jsonl(args.output, records)
        sys.stdout.write(
            f"Wrote {len(records)} question(s) -> {args.output}\n"
        )
    else:
        for record in records:
            sys.stdout.write(json.dumps(record, ensure_ascii=False) + "\n")
    return 0


def write_jsonl(path: Path, records: Sequence[dict]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as fh:
        for rec in records:
            fh.write(json.dumps(rec, ensure_ascii=False))
            fh.write("\n")


def config_main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="trivia config",
        description="Manage the quiz configuration file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    init_parser = subparsers.add_parser(
        "init", help=f"Write the default {CONFIG_FILENAME} template."
    )
    init_parser.add_argument(
        "--path",
        type=Path,
        help=(
            "Destination for the config TOML (defaults to the workspace "
            "config directory)."
        ),
    )
    init_parser.add_argument(
        "--workspace",
        type=Path,
        help="Workspace root used when resolving the default config path.",
    )
    init_parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite the destination if a config already exists.",
    )
    args = parser.parse_args(list(argv) if argv is not None else None)

    try:
        target = _resolve_config_target(args)
    except WorkspaceError as exc:
        sys.stderr.write(str(exc) + "\n")
        return 1

    try:
        written = write_template(target, overwrite=args.force)
    except QuizConfigError as exc:
        sys.stderr.write(str(exc) + "\n")
        return 1

    sys.stdout.write(f"Wrote quiz config to {written}\n")
    return 0


def _resolve_config_target(args: argparse.Namespace) -> Path:
    if args.path is not None:
        candidate = args.path.expanduser()
        if not candidate.is_absolute():
            candidate = (Path.cwd() / candidate).resolve()
        return candidate
    layout = workspace_mod.ensure_workspace(path=args.workspace)
    return layout.path_for("config") / CONFIG_FILENAME
