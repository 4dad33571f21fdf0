"""Async client for the Open Trivia DB question bank."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

import httpx

from .models import ErrorKind, RawQuestion

DEFAULT_BASE_URL = "https://opentdb.com/api.php"
MAX_AMOUNT = 50

# Open Trivia DB ``response_code`` values other than 0 (success).
RESPONSE_CODES: Mapping[int, str] = {
    1: "Not enough questions for the requested parameters.",
    2: "The request contained an invalid parameter.",
    3: "Session token not found.",
    4: "Session token has returned all possible questions.",
    5: "Too many requests; the bank is rate limiting this client.",
}

_LOGGER = logging.getLogger(__name__)


class Difficulty(Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @classmethod
    def from_value(cls, value: "str | Difficulty") -> "Difficulty":
        return _member_for(cls, value)


class QuestionType(Enum):
    MULTIPLE = "multiple"
    BOOLEAN = "boolean"

    @classmethod
    def from_value(cls, value: "str | QuestionType") -> "QuestionType":
        return _member_for(cls, value)


def _member_for(enum_cls, value):
    if isinstance(value, enum_cls):
        return value
    normalized = str(value).strip().lower()
    for member in enum_cls:
        if member.value == normalized:
            return member
    expected = ", ".join(member.value for member in enum_cls)
    raise ValueError(
        f"Unknown {enum_cls.__name__.lower()} '{value}'. "
        f"Expected one of: {expected}."
    )


class QuestionBankError(RuntimeError):
    """Base class for failures while loading a question batch."""

    kind: ErrorKind = ErrorKind.TRANSPORT


class TransportError(QuestionBankError):
    """The request failed or came back with a non-success HTTP status."""

    kind = ErrorKind.TRANSPORT

    def __init__(self, message: str, *, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class BankError(QuestionBankError):
    """The bank answered but reported a problem with the request."""

    kind = ErrorKind.BANK

    def __init__(self, message: str, *, response_code: int | None = None):
        super().__init__(message)
        self.response_code = response_code


class ParseError(QuestionBankError):
    """The response body did not have the expected shape."""

    kind = ErrorKind.PARSE


@dataclass(frozen=True)
class BatchRequest:
    """Parameters for one question batch."""

    amount: int = 10
    category: int = 9
    difficulty: Difficulty = Difficulty.EASY
    question_type: QuestionType = QuestionType.MULTIPLE

    def params(self) -> dict[str, str]:
        return {
            "amount": str(self.amount),
            "category": str(self.category),
            "difficulty": self.difficulty.value,
            "type": self.question_type.value,
        }


class QuestionBankClient:
    """Fetches question batches; one GET per call and no retries."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        *,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.base_url = base_url
        self.timeout = timeout
        self._transport = transport
        self._logger = logger or _LOGGER

    async def fetch_question_batch(
        self,
        amount: int,
        category: int,
        difficulty: "Difficulty | str",
        question_type: "QuestionType | str",
    ) -> list[RawQuestion]:
        request = BatchRequest(
            amount=amount,
            category=category,
            difficulty=Difficulty.from_value(difficulty),
            question_type=QuestionType.from_value(question_type),
        )
        return await self.fetch(request)

    async def fetch(self, request: BatchRequest) -> list[RawQuestion]:
        self._logger.debug(
            "Fetching question batch",
            extra={"url": self.base_url, "params": request.params()},
        )
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                response = await client.get(
                    self.base_url, params=request.params()
                )
        except httpx.HTTPError as exc:
            raise TransportError(
                f"Request to {self.base_url} failed: {exc}"
            ) from exc

        if not response.is_success:
            raise TransportError(
                f"Question bank returned HTTP {response.status_code}.",
                status_code=response.status_code,
            )
        try:
            payload = response.json()
        except ValueError as exc:
            raise ParseError(
                f"Response body is not valid JSON: {exc}"
            ) from exc

        questions = parse_batch(payload, expected=request.amount)
        self._logger.info(
            "Fetched question batch", extra={"count": len(questions)}
        )
        return questions


def parse_batch(payload: Any, *, expected: int) -> list[RawQuestion]:
    """Validate a decoded response body and return its question records.

    The batch is all-or-nothing: a non-zero ``response_code`` or a result
    count different from ``expected`` raises :class:`BankError`.
    """

    if not isinstance(payload, Mapping):
        raise ParseError("Response body must be a JSON object.")
    code = payload.get("response_code")
    if isinstance(code, bool) or not isinstance(code, int):
        raise ParseError("Response is missing an integer 'response_code'.")
    if code != 0:
        detail = RESPONSE_CODES.get(code, "Unknown response code.")
        raise BankError(
            f"Question bank response code {code}: {detail}",
            response_code=code,
        )

    results = payload.get("results")
    if not isinstance(results, list):
        raise ParseError("Response is missing the 'results' list.")
    questions = [
        _parse_record(item, index) for index, item in enumerate(results)
    ]
    if len(questions) != expected:
        raise BankError(
            f"Question bank returned {len(questions)} of {expected} "
            "requested questions.",
            response_code=code,
        )
    return questions


def _parse_record(item: Any, index: int) -> RawQuestion:
    if not isinstance(item, Mapping):
        raise ParseError(f"Result {index} is not an object.")
    question = _require_str(item, "question", index)
    correct = _require_str(item, "correct_answer", index)
    incorrect = item.get("incorrect_answers")
    if (
        not isinstance(incorrect, Sequence)
        or isinstance(incorrect, str)
        or not incorrect
        or not all(isinstance(text, str) for text in incorrect)
    ):
        raise ParseError(
            f"Result {index} needs a non-empty 'incorrect_answers' list "
            "of strings."
        )
    return RawQuestion(
        question_text=question,
        correct_answer=correct,
        incorrect_answers=tuple(incorrect),
        category=_optional_str(item.get("category")),
        difficulty=_optional_str(item.get("difficulty")),
        question_type=_optional_str(item.get("type")),
    )


def _require_str(item: Mapping[str, Any], key: str, index: int) -> str:
    value = item.get(key)
    if not isinstance(value, str):
        raise ParseError(f"Result {index} is missing string field '{key}'.")
    return value


def _optional_str(value: Any) -> str | None:
    return value if isinstance(value, str) else None
