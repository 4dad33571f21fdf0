"""Data structures shared by the question bank client and quiz session."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum


class Phase(Enum):
    """Stage of a quiz run."""

    NOT_STARTED = "not_started"
    LOADING = "loading"
    ACTIVE = "active"
    FINISHED = "finished"
    FAILED = "failed"


class ErrorKind(Enum):
    """Why a batch could not be loaded, with the message shown to players."""

    TRANSPORT = "transport"
    BANK = "bank"
    PARSE = "parse"

    @property
    def message(self) -> str:
        return _ERROR_MESSAGES[self]


_ERROR_MESSAGES = {
    ErrorKind.TRANSPORT: "Something went wrong. Could not fetch questions.",
    ErrorKind.BANK: (
        "There was an issue with the trivia API. Please try again later."
    ),
    ErrorKind.PARSE: "The trivia API returned an unexpected response.",
}


class AnswerMark(Enum):
    """How an answer option should be shown for the current question."""

    PENDING = "pending"
    CORRECT = "correct"
    WRONG = "wrong"
    DIMMED = "dimmed"


@dataclass(frozen=True)
class RawQuestion:
    """A question exactly as the bank sent it, entities still escaped."""

    question_text: str
    correct_answer: str
    incorrect_answers: tuple[str, ...]
    category: str | None = None
    difficulty: str | None = None
    question_type: str | None = None


@dataclass(frozen=True)
class FormattedQuestion:
    """Display-ready question with decoded text and shuffled answers."""

    question_text: str
    correct_answer: str
    answers: tuple[str, ...]
    category: str | None = None
    difficulty: str | None = None

    def is_correct(self, answer: str) -> bool:
        # Compared by value: a duplicate of the correct text also counts.
        return answer == self.correct_answer

    def to_dict(self) -> dict[str, object]:
        return {
            "question": self.question_text,
            "correct_answer": self.correct_answer,
            "answers": list(self.answers),
            "category": self.category,
            "difficulty": self.difficulty,
        }


@dataclass(frozen=True)
class QuizResult:
    """Final tally for a finished run."""

    score: int
    total: int
    percentage: int = field(init=False)

    def __post_init__(self) -> None:
        # Half-up rounding, so 1 of 8 reads as 13%.
        pct = 0
        if self.total:
            pct = math.floor(self.score * 100 / self.total + 0.5)
        object.__setattr__(self, "percentage", pct)

    @property
    def message(self) -> str:
        if self.percentage == 100:
            return "Perfect Score! You're a genius!"
        if self.percentage >= 80:
            return "Great job! You know your stuff."
        if self.percentage >= 50:
            return "Not bad! A solid effort."
        return "Keep learning! Better luck next time."
