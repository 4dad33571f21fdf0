from __future__ import annotations

import random
from collections import Counter

import pytest

from trivia_quiz.quiz.text import decode_entities, shuffle


@pytest.mark.parametrize(
    ("escaped", "expected"),
    [
        ("&quot;Hello&quot;", '"Hello"'),
        ("Rock &amp; Roll", "Rock & Roll"),
        ("Don&#039;t Panic", "Don't Panic"),
        ("Pok&eacute;mon", "Pokémon"),
        ("plain text", "plain text"),
        ("", ""),
    ],
)
def test_decode_entities(escaped: str, expected: str) -> None:
    assert decode_entities(escaped) == expected


def test_decode_entities_leaves_unknown_entities() -> None:
    assert decode_entities("&zzz; stays") == "&zzz; stays"


@pytest.mark.parametrize(
    "text", ["Paris", "Rock & Roll", "\"quoted\" and 'single'", "1 < 2"]
)
def test_decode_entities_is_idempotent(text: str) -> None:
    once = decode_entities(text)
    assert decode_entities(once) == once


def test_shuffle_is_a_permutation_and_copies() -> None:
    items = ["a", "b", "b", "c", "d"]
    original = list(items)

    result = shuffle(items, random.Random(7))

    assert Counter(result) == Counter(items)
    assert items == original
    assert result is not items


def test_shuffle_changes_order_over_many_runs() -> None:
    items = list(range(6))
    rng = random.Random(42)
    orders = {tuple(shuffle(items, rng)) for _ in range(20)}
    assert len(orders) > 1
    assert any(order != tuple(items) for order in orders)


def test_shuffle_accepts_iterables_and_defaults_rng() -> None:
    result = shuffle(iter("xyz"))
    assert sorted(result) == ["x", "y", "z"]
    assert shuffle([]) == []
