from __future__ import annotations

import asyncio
import io

import pytest
from rich.console import Console

from fixtures import make_raw

from trivia_quiz.quiz import console as console_ui
from trivia_quiz.quiz.client import TransportError
from trivia_quiz.quiz.models import Phase
from trivia_quiz.quiz.session import QuizSession


def _console() -> Console:
    return Console(record=True, width=100, file=io.StringIO())


def _provider(*entries: str):
    queue = list(entries)

    def provide() -> str:
        if not queue:
            raise EOFError
        return queue.pop(0)

    return provide


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("n", console_ui.SessionCommand("next")),
        (" NEXT ", console_ui.SessionCommand("next")),
        ("r", console_ui.SessionCommand("restart")),
        ("retry", console_ui.SessionCommand("restart")),
        ("q", console_ui.SessionCommand("quit")),
        ("exit", console_ui.SessionCommand("quit")),
        ("2", console_ui.SessionCommand("select", "2")),
        ("Paris", console_ui.SessionCommand("select", "Paris")),
        ("", None),
        ("   ", None),
        (None, None),
    ],
)
def test_parse_session_command(raw, expected) -> None:
    assert console_ui.parse_session_command(raw) == expected


def test_resolve_answer_by_number_and_text() -> None:
    answers = ("London", "Paris", "Rome")

    assert console_ui.resolve_answer(answers, "2") == "Paris"
    assert console_ui.resolve_answer(answers, "paris") == "Paris"
    assert console_ui.resolve_answer(answers, "Rome") == "Rome"
    assert console_ui.resolve_answer(answers, "0") is None
    assert console_ui.resolve_answer(answers, "4") is None
    assert console_ui.resolve_answer(answers, "Berlin") is None


def test_resolve_answer_prefers_exact_numeric_text() -> None:
    legs = ("4", "6", "8", "10")

    assert console_ui.resolve_answer(legs, "4") == "4"
    assert console_ui.resolve_answer(legs, "8") == "8"
    assert console_ui.resolve_answer(legs, "2") == "6"
    assert console_ui.resolve_answer(legs, "10") == "10"
    years = ("1984", "1990", "2001", "1969")
    assert console_ui.resolve_answer(years, "1984") == "1984"
    assert console_ui.resolve_answer(years, "1985") is None


def test_console_plays_to_completion(source) -> None:
    source.queue([make_raw()])
    session = QuizSession(source)
    console = _console()

    outcome = console_ui.run_console_quiz(
        session, console, _provider("Paris", "n", "q")
    )

    assert outcome.exit_action == "finished"
    assert outcome.result is not None
    assert (outcome.result.score, outcome.result.total) == (1, 1)
    text = console.export_text()
    assert "Question 1 of 1" in text
    assert "What is the capital of France?" in text
    assert "✔ Paris" in text
    assert "Finish Quiz" in text
    assert "Quiz Completed!" in text
    assert "Perfect Score! You're a genius!" in text
    assert "1 / 1" in text
    assert "100%" in text


def test_console_marks_wrong_answer(source) -> None:
    source.queue([make_raw()])
    session = QuizSession(source)
    console = _console()

    console_ui.run_console_quiz(session, console, _provider("London", "q"))

    text = console.export_text()
    assert "✘ London" in text
    assert "✔ Paris" in text
    assert session.score == 0


def test_console_guards_invalid_commands(source) -> None:
    source.queue([make_raw()])
    session = QuizSession(source)
    console = _console()

    outcome = console_ui.run_console_quiz(
        session,
        console,
        _provider("", "n", "7", "[bold]Mars", "Paris", "London", "q"),
    )

    text = console.export_text()
    assert "Unrecognized command. Try again." in text
    assert "Pick an answer before moving on." in text
    assert "'7' is not a valid choice for this question." in text
    assert "'[bold]Mars' is not a valid choice for this question." in text
    assert "This question is already answered." in text
    assert outcome.exit_action == "quit"
    assert session.score == 1


def test_console_shows_failure_and_retries(source) -> None:
    source.queue(TransportError("HTTP 500", status_code=500))
    source.queue([make_raw()])
    session = QuizSession(source)
    console = _console()

    outcome = console_ui.run_console_quiz(
        session, console, _provider("1", "r", "Paris", "n", "q")
    )

    text = console.export_text()
    assert "Trivia Challenge" in text
    assert "Something went wrong. Could not fetch questions." in text
    assert "No question is showing. Use r to start." in text
    assert outcome.exit_action == "finished"
    assert len(source.calls) == 2


def test_console_reports_failed_exit(source) -> None:
    source.queue(TransportError("boom"))
    session = QuizSession(source)

    outcome = console_ui.run_console_quiz(
        session, _console(), _provider("q")
    )

    assert outcome == console_ui.ConsoleRunResult("failed", None)


def test_console_handles_interrupted_input(source) -> None:
    source.queue([make_raw()])
    session = QuizSession(source)
    console = _console()

    def interrupted() -> str:
        raise KeyboardInterrupt

    outcome = console_ui.run_console_quiz(session, console, interrupted)

    assert "Session interrupted." in console.export_text()
    assert outcome.exit_action == "quit"
    assert session.phase is Phase.ACTIVE


def test_console_uses_injected_runner(source) -> None:
    source.queue([make_raw()])
    session = QuizSession(source)
    seen = []

    def runner(coro) -> None:
        seen.append(coro)
        coro.close()

    outcome = console_ui.run_console_quiz(
        session, _console(), _provider("q"), runner=runner
    )

    assert len(seen) == 1
    assert session.phase is Phase.NOT_STARTED
    assert outcome.exit_action == "quit"


def test_console_selects_numeric_answer_by_text(source) -> None:
    source.queue(
        [make_raw("How many legs does a spider have?", "8", ("4", "6", "10"))]
    )
    session = QuizSession(source)
    console = _console()

    console_ui.run_console_quiz(session, console, _provider("8", "q"))

    assert session.is_locked
    assert session.selected_answer == "8"
    assert session.score == 1
    assert "not a valid choice" not in console.export_text()


def test_console_shows_answered_progress(source) -> None:
    source.queue([make_raw("Q1", "A1"), make_raw("Q2", "A2")])
    session = QuizSession(source)
    console = _console()

    console_ui.run_console_quiz(session, console, _provider("A1", "q"))

    text = console.export_text()
    assert "answered 0 of 2" in text
    assert "answered 1 of 2" in text


def test_console_interrupt_while_loading_quits(source) -> None:
    source.queue([make_raw()])
    session = QuizSession(source)
    console = _console()
    prompts = []

    def runner(coro) -> None:
        raise KeyboardInterrupt

    def provide() -> str:
        prompts.append(True)
        return "q"

    outcome = console_ui.run_console_quiz(
        session, console, provide, runner=runner
    )

    assert outcome == console_ui.ConsoleRunResult("quit", None)
    assert "Loading interrupted." in console.export_text()
    assert prompts == []


def test_console_interrupt_during_restart_quits(source) -> None:
    source.queue([make_raw()])
    session = QuizSession(source)
    calls = []

    def runner(coro) -> None:
        calls.append(coro)
        if len(calls) > 1:
            raise KeyboardInterrupt
        asyncio.run(coro)

    outcome = console_ui.run_console_quiz(
        session, _console(), _provider("Paris", "n", "r", "q"), runner=runner
    )

    assert outcome == console_ui.ConsoleRunResult("quit", None)
    assert len(calls) == 2
