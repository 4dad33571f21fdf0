from __future__ import annotations

import os
import random
import sys
from pathlib import Path

import pytest

TESTS_DIR = Path(__file__).resolve().parent
ROOT = TESTS_DIR.parent
for extra in (TESTS_DIR, ROOT / "src"):
    path_str = str(extra)
    if path_str not in sys.path:
        sys.path.insert(0, path_str)

from fixtures import StubSource, WorkspaceBuilder  # noqa: E402


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's TRIVIA_QUIZ_* settings out of the tests."""

    for name in list(os.environ):
        if name.startswith("TRIVIA_QUIZ_"):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture
def source() -> StubSource:
    return StubSource()


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def workspace(tmp_path: Path) -> WorkspaceBuilder:
    """Provide a helper bound to pytest's per-test tmp directory."""

    return WorkspaceBuilder(tmp_path)
