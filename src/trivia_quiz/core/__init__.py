"""Core shared helpers for trivia subcommands."""

from __future__ import annotations

from .config import (
    TomlConfigError,
    layer_tables,
    load_toml,
    read_packaged_text,
    write_toml_template,
)
from .logging import JsonLogFormatter, configure_logger
from .workspace import (
    WORKSPACE_ENV,
    WorkspaceError,
    WorkspaceLayout,
    ensure_workspace,
)

__all__ = [
    "TomlConfigError",
    "layer_tables",
    "load_toml",
    "read_packaged_text",
    "write_toml_template",
    "configure_logger",
    "JsonLogFormatter",
    "ensure_workspace",
    "WorkspaceLayout",
    "WorkspaceError",
    "WORKSPACE_ENV",
]
