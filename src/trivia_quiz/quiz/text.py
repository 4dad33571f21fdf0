"""Text helpers for question bank payloads."""

from __future__ import annotations

import html
import random
from collections.abc import Iterable
from typing import Protocol, TypeVar

T = TypeVar("T")


class RandomSource(Protocol):
    def shuffle(self, x: list) -> None: ...


def decode_entities(escaped: str) -> str:
    """Turn HTML entities such as ``&quot;`` or ``&#039;`` into characters.

    Text without entity syntax is returned unchanged; unknown entities pass
    through as written.
    """

    return html.unescape(escaped)


def shuffle(items: Iterable[T], rng: RandomSource | None = None) -> list[T]:
    """Return a shuffled copy of ``items``; the input is left untouched."""

    pool = list(items)
    (rng or random).shuffle(pool)
    return pool
