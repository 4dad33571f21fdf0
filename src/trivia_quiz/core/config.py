"""TOML helpers: read a file, layer it over defaults, ship a template."""

from __future__ import annotations

import copy
import tomllib
from importlib import resources
from pathlib import Path
from typing import Any, Mapping, MutableMapping

__all__ = [
    "TomlConfigError",
    "layer_tables",
    "load_toml",
    "read_packaged_text",
    "write_toml_template",
]

Table = MutableMapping[str, Any]


class TomlConfigError(RuntimeError):
    """Raised when a TOML file cannot be read, parsed or applied."""


def load_toml(path: Path) -> Mapping[str, Any]:
    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except FileNotFoundError as exc:
        raise TomlConfigError(f"Config file not found: {path}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise TomlConfigError(
            f"Failed to parse config TOML {path}: {exc}"
        ) from exc


def layer_tables(
    defaults: Mapping[str, Any], *layers: Mapping[str, Any]
) -> Table:
    """Return a copy of ``defaults`` with each layer applied in order.

    Layers may only set keys that already exist in ``defaults``, and a key
    keeps its shape: tables stay tables and plain values stay plain values.
    ``defaults`` itself is never modified.
    """

    merged: Table = copy.deepcopy(dict(defaults))
    for layer in layers:
        _apply(merged, layer, prefix="")
    return merged


def _apply(target: Table, layer: Mapping[str, Any], *, prefix: str) -> None:
    for key, value in layer.items():
        dotted = f"{prefix}{key}"
        if key not in target:
            raise TomlConfigError(f"Unknown configuration key '{dotted}'.")
        current = target[key]
        if isinstance(current, MutableMapping):
            if not isinstance(value, Mapping):
                raise TomlConfigError(
                    f"Expected table for '{dotted}', "
                    f"found {type(value).__name__}."
                )
            _apply(current, value, prefix=f"{dotted}.")
        elif isinstance(value, Mapping):
            raise TomlConfigError(
                f"Expected a value for '{dotted}', found a table."
            )
        else:
            target[key] = value


def read_packaged_text(package: str, filename: str) -> str:
    """Read a data file shipped inside ``package``."""

    try:
        resource = resources.files(package).joinpath(filename)
        return resource.read_text(encoding="utf-8")
    except (FileNotFoundError, ModuleNotFoundError) as exc:
        raise TomlConfigError(
            f"Packaged template {package}/{filename} is missing."
        ) from exc


def write_toml_template(
    path: Path,
    *,
    template: str,
    overwrite: bool = False,
    mode: int = 0o600,
) -> Path:
    """Write ``template`` to ``path``; an existing file needs ``overwrite``."""

    if path.exists() and not overwrite:
        raise TomlConfigError(f"Config already exists: {path}")
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(template, encoding="utf-8")
    try:
        path.chmod(mode)
    except PermissionError:  # pragma: no cover - depends on filesystem
        pass
    return path
