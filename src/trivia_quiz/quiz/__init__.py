from .client import (
    BankError,
    BatchRequest,
    Difficulty,
    ParseError,
    QuestionBankClient,
    QuestionBankError,
    QuestionType,
    TransportError,
    parse_batch,
)
from .console import ConsoleRunResult, run_console_quiz
from .formatter import format_batch, format_question
from .models import (
    AnswerMark,
    ErrorKind,
    FormattedQuestion,
    Phase,
    QuizResult,
    RawQuestion,
)
from .session import QuizSession
from .text import decode_entities, shuffle

__all__ = [
    "BankError",
    "BatchRequest",
    "Difficulty",
    "ParseError",
    "QuestionBankClient",
    "QuestionBankError",
    "QuestionType",
    "TransportError",
    "parse_batch",
    "ConsoleRunResult",
    "run_console_quiz",
    "format_batch",
    "format_question",
    "AnswerMark",
    "ErrorKind",
    "FormattedQuestion",
    "Phase",
    "QuizResult",
    "RawQuestion",
    "QuizSession",
    "decode_entities",
    "shuffle",
]
