from __future__ import annotations

from collections.abc import Iterable

from .models import FormattedQuestion, RawQuestion
from .text import RandomSource, decode_entities, shuffle


def format_question(
    raw: RawQuestion, rng: RandomSource | None = None
) -> FormattedQuestion:
    """Decode a bank record and mix the correct answer into the options.

    ``raw`` is assumed valid; the client rejects malformed records before
    they reach this point.
    """

    correct = decode_entities(raw.correct_answer)
    pool = [decode_entities(text) for text in raw.incorrect_answers]
    pool.append(correct)
    return FormattedQuestion(
        question_text=decode_entities(raw.question_text),
        correct_answer=correct,
        answers=tuple(shuffle(pool, rng)),
        category=decode_entities(raw.category) if raw.category else None,
        difficulty=raw.difficulty,
    )


def format_batch(
    raws: Iterable[RawQuestion], rng: RandomSource | None = None
) -> tuple[FormattedQuestion, ...]:
    return tuple(format_question(raw, rng) for raw in raws)
