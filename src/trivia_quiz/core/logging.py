"""Logging helpers shared by the trivia commands.

Every command logs to ``<workspace>/logs/<name>.log`` as JSON lines through
a size-rotated handler. ``--verbose`` adds a terse stderr echo and drops the
file threshold to DEBUG.
"""

from __future__ import annotations

import json
import logging
import sys
import tempfile
from datetime import datetime, timezone
from enum import Enum
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

__all__ = [
    "JsonLogFormatter",
    "configure_logger",
]

_FILE_MARKER = "_trivia_quiz_file"
_CONSOLE_MARKER = "_trivia_quiz_console"

# Attributes every LogRecord carries; anything else came in through ``extra``.
_RECORD_FIELDS = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", None, None))
) | {"message", "asctime", "taskName"}


class JsonLogFormatter(logging.Formatter):
    """One JSON object per record; ``extra`` fields land under ``"extra"``."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry: dict[str, Any] = {
            "timestamp": created.isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        extra = {
            key: value
            for key, value in vars(record).items()
            if key not in _RECORD_FIELDS
        }
        if extra:
            entry["extra"] = extra
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        if record.stack_info:
            entry["stack"] = record.stack_info
        return json.dumps(entry, ensure_ascii=True, default=_json_default)


def _json_default(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, (set, frozenset)):
        return sorted(value, key=repr)
    return repr(value)


def configure_logger(
    name: str,
    *,
    log_dir: Path,
    level: str = "INFO",
    verbose: bool = False,
    max_bytes: int = 1024 * 1024,
    backup_count: int = 2,
    filename: str | None = None,
) -> tuple[logging.Logger, Path]:
    """Attach the managed JSON file handler to ``name`` and return it.

    Repeated calls for the same file reuse the handler; a different file
    replaces it. The returned path is where records actually go, which is a
    temp directory when ``log_dir`` is not writable.
    """

    logger = logging.getLogger(name)
    logger.propagate = False
    logger.setLevel(logging.DEBUG)

    target = filename or name.rpartition(".")[2] + ".log"
    handler = _current_file_handler(logger, log_dir / target)
    if handler is None:
        handler = _open_file_handler(
            log_dir, target, max_bytes=max_bytes, backup_count=backup_count
        )
        logger.addHandler(handler)
    handler.setLevel(logging.DEBUG if verbose else _coerce_level(level))

    _set_console_echo(logger, verbose)
    return logger, Path(handler.baseFilename)


def _coerce_level(level: str) -> int:
    return logging.getLevelNamesMapping().get(level.upper(), logging.INFO)


def _current_file_handler(
    logger: logging.Logger, wanted: Path
) -> RotatingFileHandler | None:
    for handler in list(logger.handlers):
        if not getattr(handler, _FILE_MARKER, False):
            continue
        if Path(handler.baseFilename) == wanted.absolute():  # type: ignore
            return handler  # type: ignore[return-value]
        logger.removeHandler(handler)
        handler.close()
    return None


def _open_file_handler(
    log_dir: Path, filename: str, *, max_bytes: int, backup_count: int
) -> RotatingFileHandler:
    last_error: PermissionError | None = None
    for directory in (log_dir, _fallback_log_dir()):
        try:
            directory.mkdir(parents=True, exist_ok=True)
            path = directory / filename
            path.touch(mode=0o600, exist_ok=True)
            handler = RotatingFileHandler(
                path,
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding="utf-8",
            )
        except PermissionError as exc:
            last_error = exc
            continue
        handler.setFormatter(JsonLogFormatter())
        setattr(handler, _FILE_MARKER, True)
        return handler
    assert last_error is not None
    raise last_error


def _set_console_echo(logger: logging.Logger, enabled: bool) -> None:
    echoes = [h for h in logger.handlers if getattr(h, _CONSOLE_MARKER, False)]
    if enabled and not echoes:
        echo = logging.StreamHandler(stream=sys.stderr)
        echo.setLevel(logging.DEBUG)
        echo.setFormatter(logging.Formatter("%(levelname)s %(message)s"))
        setattr(echo, _CONSOLE_MARKER, True)
        logger.addHandler(echo)
    elif not enabled:
        for echo in echoes:
            logger.removeHandler(echo)
            echo.close()


def _fallback_log_dir() -> Path:
    return Path(tempfile.gettempdir()) / "trivia-quiz-logs"
