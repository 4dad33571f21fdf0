"""Quiz session state machine.

A :class:`QuizSession` owns one quiz run: the formatted questions, the
current position, the running score and the per-question lock. Presentation
layers read its properties and drive it only through ``start``,
``select_answer`` and ``advance``; nothing else mutates it.

``start`` is the only coroutine. Every call bumps a generation counter and a
fetch only applies its outcome while its generation is still the newest, so a
slow response from a superseded start can never overwrite a newer run.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Protocol

from .client import BankError, BatchRequest, QuestionBankError
from .formatter import format_batch
from .models import (
    AnswerMark,
    ErrorKind,
    FormattedQuestion,
    Phase,
    QuizResult,
    RawQuestion,
)
from .text import RandomSource

_LOGGER = logging.getLogger(__name__)


class QuestionSource(Protocol):
    async def fetch_question_batch(
        self,
        amount: int,
        category: int,
        difficulty,
        question_type,
    ) -> Sequence[RawQuestion]: ...


class QuizSession:
    """One quiz run, reusable across replays via :meth:`start`."""

    def __init__(
        self,
        source: QuestionSource,
        request: BatchRequest | None = None,
        *,
        rng: RandomSource | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.request = request or BatchRequest()
        self._source = source
        self._rng = rng
        self._logger = logger or _LOGGER

        self._phase = Phase.NOT_STARTED
        self._questions: tuple[FormattedQuestion, ...] = ()
        self._index = 0
        self._score = 0
        self._selected: str | None = None
        self._locked = False
        self._error: ErrorKind | None = None
        self._error_detail: str | None = None
        self._generation = 0

    # Read surface -----------------------------------------------------

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def questions(self) -> tuple[FormattedQuestion, ...]:
        return self._questions

    @property
    def total_questions(self) -> int:
        return len(self._questions)

    @property
    def current_index(self) -> int:
        return self._index

    @property
    def current_question(self) -> FormattedQuestion | None:
        if self._phase is not Phase.ACTIVE:
            return None
        return self._questions[self._index]

    @property
    def score(self) -> int:
        return self._score

    @property
    def selected_answer(self) -> str | None:
        return self._selected

    @property
    def is_locked(self) -> bool:
        return self._locked

    @property
    def last_error(self) -> ErrorKind | None:
        return self._error

    @property
    def error_message(self) -> str | None:
        return self._error.message if self._error else None

    @property
    def error_detail(self) -> str | None:
        """Technical description of the last failure, for logs and debug."""

        return self._error_detail

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def is_last_question(self) -> bool:
        return (
            self._phase is Phase.ACTIVE
            and self._index == len(self._questions) - 1
        )

    def answered_count(self) -> int:
        if self._phase is Phase.FINISHED:
            return len(self._questions)
        if self._phase is not Phase.ACTIVE:
            return 0
        return self._index + (1 if self._locked else 0)

    def result(self) -> QuizResult:
        return QuizResult(score=self._score, total=len(self._questions))

    def mark_for(self, answer: str) -> AnswerMark:
        question = self.current_question
        if question is None or not self._locked:
            return AnswerMark.PENDING
        if question.is_correct(answer):
            return AnswerMark.CORRECT
        if answer == self._selected:
            return AnswerMark.WRONG
        return AnswerMark.DIMMED

    # Transitions ------------------------------------------------------

    async def start(self) -> None:
        """Reset the run and load a fresh batch of questions."""

        generation = self._begin()
        request = self.request
        try:
            raws = await self._source.fetch_question_batch(
                request.amount,
                request.category,
                request.difficulty,
                request.question_type,
            )
            questions = format_batch(raws, self._rng)
            if not questions:
                raise BankError("Question bank returned no questions.")
        except QuestionBankError as exc:
            self._fail(generation, exc)
            return
        self._activate(generation, questions)

    def select_answer(self, answer: str) -> None:
        """Lock in ``answer`` for the current question.

        Ignored unless a question is showing and still unlocked, so repeated
        or late UI events cannot score twice.
        """

        if self._phase is not Phase.ACTIVE or self._locked:
            self._logger.debug(
                "Ignoring answer selection",
                extra={"phase": self._phase, "locked": self._locked},
            )
            return
        question = self._questions[self._index]
        self._selected = answer
        self._locked = True
        correct = question.is_correct(answer)
        if correct:
            self._score += 1
        self._logger.debug(
            "Answer selected",
            extra={
                "index": self._index,
                "correct": correct,
                "score": self._score,
            },
        )

    def advance(self) -> None:
        """Move past an answered question, finishing after the last one."""

        if self._phase is not Phase.ACTIVE or not self._locked:
            self._logger.debug(
                "Ignoring advance",
                extra={"phase": self._phase, "locked": self._locked},
            )
            return
        if self._index < len(self._questions) - 1:
            self._index += 1
            self._selected = None
            self._locked = False
            return
        self._phase = Phase.FINISHED
        self._logger.info(
            "Quiz finished",
            extra={"score": self._score, "total": len(self._questions)},
        )

    # Internals --------------------------------------------------------

    def _begin(self) -> int:
        self._generation += 1
        self._phase = Phase.LOADING
        self._questions = ()
        self._index = 0
        self._score = 0
        self._selected = None
        self._locked = False
        self._error = None
        self._error_detail = None
        self._logger.debug(
            "Quiz loading", extra={"generation": self._generation}
        )
        return self._generation

    def _is_stale(self, generation: int) -> bool:
        if generation == self._generation:
            return False
        self._logger.warning(
            "Discarding stale question batch",
            extra={"generation": generation, "current": self._generation},
        )
        return True

    def _activate(
        self, generation: int, questions: tuple[FormattedQuestion, ...]
    ) -> None:
        if self._is_stale(generation):
            return
        self._questions = questions
        self._phase = Phase.ACTIVE
        self._logger.info(
            "Quiz started",
            extra={"generation": generation, "count": len(questions)},
        )

    def _fail(self, generation: int, exc: QuestionBankError) -> None:
        if self._is_stale(generation):
            return
        self._error = exc.kind
        self._error_detail = str(exc)
        self._phase = Phase.FAILED
        self._logger.warning(
            "Quiz failed to load",
            extra={"generation": generation, "kind": exc.kind},
        )
