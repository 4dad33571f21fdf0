from __future__ import annotations

import pytest

from trivia_quiz.quiz.models import ErrorKind, QuizResult


@pytest.mark.parametrize(
    ("score", "total", "percentage", "message"),
    [
        (1, 1, 100, "Perfect Score! You're a genius!"),
        (8, 10, 80, "Great job! You know your stuff."),
        (5, 10, 50, "Not bad! A solid effort."),
        (1, 8, 13, "Keep learning! Better luck next time."),
        (0, 10, 0, "Keep learning! Better luck next time."),
        (0, 0, 0, "Keep learning! Better luck next time."),
    ],
)
def test_quiz_result_percentage_and_message(
    score: int, total: int, percentage: int, message: str
) -> None:
    result = QuizResult(score=score, total=total)
    assert result.percentage == percentage
    assert result.message == message


def test_error_kinds_have_player_messages() -> None:
    assert ErrorKind.TRANSPORT.message.startswith("Something went wrong")
    assert "trivia API" in ErrorKind.BANK.message
    assert ErrorKind.PARSE.message
