"""CLI entry point for workspace bootstrap."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Sequence

from trivia_quiz.core import workspace as workspace_mod
from trivia_quiz.quiz.config import CONFIG_FILENAME


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="trivia init",
        description=(
            "Create the trivia-quiz workspace with its config and logs "
            "directories."
        ),
    )
    parser.add_argument(
        "--path",
        type=Path,
        help=(
            "Override the workspace root (defaults to TRIVIA_QUIZ_DATA_HOME "
            "or ~/.trivia-quiz-data)."
        ),
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress informational output on success.",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    try:
        layout = workspace_mod.ensure_workspace(path=args.path)
    except workspace_mod.WorkspaceError as exc:
        sys.stderr.write(str(exc) + "\n")
        return 1

    if args.quiet:
        return 0

    def status(key: str) -> str:
        return "created" if layout.created.get(key, False) else "exists"

    lines = [f"Workspace ready at {layout.home} ({status('home')})"]
    for name, directory in layout.items():
        lines.append(f"  {name.ljust(6)}  {directory} ({status(name)})")
    config_file = layout.path_for("config") / CONFIG_FILENAME
    if config_file.exists():
        lines.append(f"Using config {config_file}")
    else:
        lines.append("No quiz.toml yet; run `trivia config init` to add one.")
    sys.stdout.write("\n".join(lines) + "\n")
    return 0


if __name__ == "__main__":  # pragma: no cover - module CLI guard
    raise SystemExit(main())
