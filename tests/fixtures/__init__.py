"""Shared testing fixtures and stubs for the trivia_quiz test suite."""

from .bank import (  # noqa: F401
    GatedSource,
    StubSource,
    make_payload,
    make_raw,
    make_result,
)
from .workspace import WorkspaceBuilder  # noqa: F401

__all__ = [
    "GatedSource",
    "StubSource",
    "WorkspaceBuilder",
    "make_payload",
    "make_raw",
    "make_result",
]
