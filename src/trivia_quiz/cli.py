"""Unified CLI entry point for trivia-quiz."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from importlib import import_module, metadata
from typing import Callable, Dict, Mapping, Sequence

PROG = "trivia"
DIST_NAME = "trivia-quiz"


@dataclass(frozen=True)
class CommandSpec:
    """A ``trivia`` subcommand backed by ``module:function``.

    The function receives the remaining arguments and returns an exit code.
    ``sys.argv`` is swapped while it runs so argparse reports
    ``trivia <name>`` as the program.
    """

    name: str
    summary: str
    target: str
    is_tui: bool = False

    def run(self, argv: Sequence[str]) -> int:
        module_name, _, func_name = self.target.partition(":")
        func = getattr(import_module(module_name), func_name)
        args = list(argv)
        saved = sys.argv
        sys.argv = [f"{PROG} {self.name}", *args]
        try:
            result = func(args)
        except SystemExit as exc:
            return _exit_code(exc)
        finally:
            sys.argv = saved
        return result if isinstance(result, int) else 0


COMMANDS: Mapping[str, CommandSpec] = {
    spec.name: spec
    for spec in (
        CommandSpec(
            "init",
            "Bootstrap the trivia-quiz workspace.",
            "trivia_quiz.workspace.cli:main",
        ),
        CommandSpec(
            "config",
            "Write the default quiz configuration file.",
            "trivia_quiz.quiz._main:config_main",
        ),
        CommandSpec(
            "play",
            "Play a trivia quiz in the terminal.",
            "trivia_quiz.quiz._main:play_main",
        ),
        CommandSpec(
            "tui",
            "Play a trivia quiz in a full-screen interface.",
            "trivia_quiz.quiz._main:tui_main",
            is_tui=True,
        ),
        CommandSpec(
            "fetch",
            "Fetch one question batch and print it as JSON lines.",
            "trivia_quiz.quiz._main:fetch_main",
        ),
    )
}


def format_command_table() -> str:
    width = max(len(name) for name in COMMANDS)
    rows = ["Available commands:"]
    for spec in COMMANDS.values():
        tag = " (TUI)" if spec.is_tui else ""
        rows.append(f"  {spec.name.ljust(width)}  {spec.summary}{tag}")
    return "\n".join(rows)


def format_usage() -> str:
    return (
        f"Usage: {PROG} <command> [args...]\n"
        f"Run `{PROG} list` for commands or `{PROG} help <name>` for "
        "details.\n\n" + format_command_table()
    )


def _out(text: str) -> None:
    sys.stdout.write(text + "\n")


def _err(text: str) -> None:
    sys.stderr.write(text + "\n")


def _unknown(name: str) -> int:
    _err(f"Unknown command '{name}'.")
    _err(format_command_table())
    return 2


def _show_usage(argv: Sequence[str]) -> int:
    _out(format_usage())
    return 0


def _show_list(argv: Sequence[str]) -> int:
    _out(format_command_table())
    return 0


def _show_version(argv: Sequence[str]) -> int:
    try:
        _out(metadata.version(DIST_NAME))
    except metadata.PackageNotFoundError:
        _out("unknown")
    return 0


def _show_help(argv: Sequence[str]) -> int:
    if not argv:
        return _show_usage(argv)
    spec = COMMANDS.get(argv[0])
    if spec is None:
        return _unknown(argv[0])
    _out(f"{spec.name}: {spec.summary}")
    _out(f"Run `{PROG} {spec.name} --help` for command options.")
    return 0


_BUILTINS: Dict[str, Callable[[Sequence[str]], int]] = {
    "-h": _show_usage,
    "--help": _show_usage,
    "-V": _show_version,
    "--version": _show_version,
    "version": _show_version,
    "list": _show_list,
    "help": _show_help,
}


def main(argv: Sequence[str] | None = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        _out(format_usage())
        return 2

    head, rest = args[0], args[1:]
    builtin = _BUILTINS.get(head)
    if builtin is not None:
        return builtin(rest)
    spec = COMMANDS.get(head)
    if spec is None:
        return _unknown(head)
    return spec.run(rest)


def _exit_code(exc: SystemExit) -> int:
    if exc.code is None:
        return 0
    if isinstance(exc.code, int):
        return exc.code
    _err(str(exc.code))
    return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
