"""Rich-powered console loop for a quiz session.

The loop renders whatever the :class:`QuizSession` currently exposes, reads
one command at a time from an input provider and turns it into a session
intent. All scoring and state rules live in the session; this module only
decides how things look and which answer string a command refers to.
"""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from dataclasses import dataclass
from typing import Any, Callable, Literal

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import AnswerMark, Phase, QuizResult
from .session import QuizSession

InputProvider = Callable[[], str]
Runner = Callable[[Coroutine[Any, Any, None]], None]
ExitAction = Literal["finished", "failed", "quit"]

_MARK_STYLES = {
    AnswerMark.PENDING: ("  ", ""),
    AnswerMark.CORRECT: ("✔ ", "bold green"),
    AnswerMark.WRONG: ("✘ ", "bold red"),
    AnswerMark.DIMMED: ("  ", "dim"),
}


@dataclass(frozen=True)
class SessionCommand:
    """Normalized user command parsed from console input."""

    type: Literal["select", "next", "restart", "quit"]
    choice: str | None = None


@dataclass(frozen=True)
class ConsoleRunResult:
    """Return value from ``run_console_quiz``."""

    exit_action: ExitAction
    result: QuizResult | None


def parse_session_command(raw: str | None) -> SessionCommand | None:
    if raw is None:
        return None
    text = raw.strip()
    if not text:
        return None
    lowered = text.lower()
    if lowered in {"n", "next"}:
        return SessionCommand("next")
    if lowered in {"r", "restart", "retry", "play"}:
        return SessionCommand("restart")
    if lowered in {"q", "quit", "exit"}:
        return SessionCommand("quit")
    return SessionCommand("select", text)


def resolve_answer(answers: tuple[str, ...], choice: str) -> str | None:
    """Map typed input onto one of ``answers``.

    Exact answer text wins, so numeric answers such as ``1984`` can be typed
    as they read. Otherwise a 1-based position is tried, then a
    case-insensitive text match.
    """

    if choice in answers:
        return choice
    if choice.isdigit():
        position = int(choice) - 1
        if 0 <= position < len(answers):
            return answers[position]
        return None
    folded = choice.casefold()
    for answer in answers:
        if answer.casefold() == folded:
            return answer
    return None


def run_console_quiz(
    session: QuizSession,
    console: Console,
    input_provider: InputProvider,
    *,
    runner: Runner = asyncio.run,
) -> ConsoleRunResult:
    """Play quizzes on ``console`` until the user quits.

    Ctrl-C while questions are loading or while waiting for input ends the
    run with the ``quit`` action.
    """

    if not _start(session, console, runner):
        return ConsoleRunResult("quit", None)
    while True:
        _render(console, session)
        try:
            raw = input_provider()
        except (EOFError, KeyboardInterrupt, StopIteration):
            console.print("\n[bold yellow]Session interrupted.[/]")
            break
        command = parse_session_command(raw)
        if command is None:
            console.print("[red]Unrecognized command. Try again.[/]")
            continue
        if command.type == "quit":
            break
        if command.type == "restart":
            if not _start(session, console, runner):
                return ConsoleRunResult("quit", None)
            continue
        _apply_command(command, session, console)

    return _exit_result(session)


def _start(session: QuizSession, console: Console, runner: Runner) -> bool:
    """Run one fetch; ``False`` when the user interrupted it."""

    pending = session.start()
    try:
        with console.status("Fetching Questions..."):
            runner(pending)
    except KeyboardInterrupt:
        pending.close()
        console.print("\n[bold yellow]Loading interrupted.[/]")
        return False
    return True


def _apply_command(
    command: SessionCommand,
    session: QuizSession,
    console: Console,
) -> None:
    question = session.current_question
    if question is None:
        console.print("[red]No question is showing. Use r to start.[/]")
        return

    if command.type == "next":
        if not session.is_locked:
            console.print("[red]Pick an answer before moving on.[/]")
            return
        session.advance()
        return

    if command.type == "select" and command.choice:
        if session.is_locked:
            console.print("[yellow]This question is already answered.[/]")
            return
        answer = resolve_answer(question.answers, command.choice)
        if answer is None:
            console.print(
                "[red]'%s' is not a valid choice for this question.[/red]"
                % escape(command.choice),
            )
            return
        session.select_answer(answer)


def _exit_result(session: QuizSession) -> ConsoleRunResult:
    if session.phase is Phase.FINISHED:
        return ConsoleRunResult("finished", session.result())
    if session.phase is Phase.FAILED:
        return ConsoleRunResult("failed", None)
    return ConsoleRunResult("quit", None)


def _render(console: Console, session: QuizSession) -> None:
    if session.phase is Phase.FAILED:
        _render_failure(console, session)
    elif session.phase is Phase.FINISHED:
        _render_result(console, session.result())
    elif session.phase is Phase.ACTIVE:
        _render_question(console, session)


def _render_failure(console: Console, session: QuizSession) -> None:
    console.print(
        Panel(
            session.error_message or "Could not load questions.",
            title="Trivia Challenge",
            border_style="red",
        )
    )
    console.print(Text("Commands: r (retry), q (quit)", style="dim"))


def _render_question(console: Console, session: QuizSession) -> None:
    question = session.current_question
    if question is None:
        return
    header = Text.assemble(
        (f"Question {session.current_index + 1}", "bold cyan"),
        (f" of {session.total_questions}", "dim"),
    )
    console.print()
    console.rule(header)
    console.print(Text(question.question_text, style="bold"))

    table = Table(show_header=False, box=box.SIMPLE, expand=True)
    table.add_column("#", justify="right", style="cyan")
    table.add_column("Answer")
    for position, answer in enumerate(question.answers, start=1):
        indicator, style = _MARK_STYLES[session.mark_for(answer)]
        table.add_row(str(position), Text(indicator + answer, style=style))
    console.print(table)

    progress = (
        f"Score {session.score} | answered {session.answered_count()} "
        f"of {session.total_questions}"
    )
    if session.is_locked:
        label = "Finish Quiz" if session.is_last_question else "Next Question"
        hint = f"n ({label}), r (restart), q (quit)"
    else:
        hint = (
            f"pick 1-{len(question.answers)} or type the answer, "
            "r (restart), q (quit)"
        )
    console.print(Text(f"{progress} | {hint}", style="dim"))


def _render_result(console: Console, result: QuizResult) -> None:
    console.print()
    console.rule(Text("Quiz Completed!", style="bold magenta"))
    console.print(Text(result.message, style="italic"))

    overview = Table(show_header=False, box=box.MINIMAL_DOUBLE_HEAD)
    overview.add_column("Metric", style="bold")
    overview.add_column("Value", justify="right")
    overview.add_row("Your score", f"{result.score} / {result.total}")
    overview.add_row("Percentage", f"{result.percentage}%")
    console.print(overview)
    console.print(Text("Commands: r (play again), q (quit)", style="dim"))
