from __future__ import annotations

from pathlib import Path

import pytest

from trivia_quiz.core import config as core_config


def test_load_toml_reads_tables(tmp_path: Path) -> None:
    path = tmp_path / "quiz.toml"
    path.write_text('[bank]\namount = 3\ndifficulty = "hard"\n', "utf-8")

    assert core_config.load_toml(path) == {
        "bank": {"amount": 3, "difficulty": "hard"}
    }


def test_load_toml_errors(tmp_path: Path) -> None:
    with pytest.raises(core_config.TomlConfigError, match="not found"):
        core_config.load_toml(tmp_path / "missing.toml")

    broken = tmp_path / "broken.toml"
    broken.write_text("[bank\n", encoding="utf-8")
    with pytest.raises(core_config.TomlConfigError, match="Failed to parse"):
        core_config.load_toml(broken)


def test_layer_tables_applies_layers_in_order() -> None:
    defaults = {
        "bank": {"amount": 10, "category": 9},
        "logging": {"level": "INFO"},
    }

    merged = core_config.layer_tables(
        defaults, {"bank": {"amount": 4}}, {"bank": {"amount": 6}}
    )

    assert merged == {
        "bank": {"amount": 6, "category": 9},
        "logging": {"level": "INFO"},
    }
    assert defaults["bank"]["amount"] == 10


def test_layer_tables_without_layers_copies_defaults() -> None:
    defaults = {"bank": {"amount": 10}}

    merged = core_config.layer_tables(defaults)
    merged["bank"]["amount"] = 1

    assert defaults == {"bank": {"amount": 10}}


@pytest.mark.parametrize(
    ("layer", "message"),
    [
        ({"extra": 1}, "Unknown configuration key 'extra'"),
        ({"bank": {"color": "red"}}, "Unknown configuration key 'bank.color'"),
        ({"bank": "nope"}, "Expected table for 'bank', found str"),
        ({"bank": {"amount": {"n": 1}}}, "Expected a value for 'bank.amount'"),
    ],
)
def test_layer_tables_rejects_bad_shapes(layer, message) -> None:
    defaults = {"bank": {"amount": 10}}

    with pytest.raises(core_config.TomlConfigError, match=message):
        core_config.layer_tables(defaults, layer)


def test_read_packaged_text_returns_quiz_template() -> None:
    text = core_config.read_packaged_text("trivia_quiz.quiz", "quiz.toml")

    assert "[bank]" in text
    assert "[logging]" in text


def test_read_packaged_text_missing_file() -> None:
    with pytest.raises(core_config.TomlConfigError, match="is missing"):
        core_config.read_packaged_text("trivia_quiz.quiz", "absent.toml")


def test_write_toml_template_guards_existing(tmp_path: Path) -> None:
    target = tmp_path / "deep" / "quiz.toml"

    written = core_config.write_toml_template(target, template="a = 1\n")

    assert written == target
    assert target.read_text(encoding="utf-8") == "a = 1\n"
    with pytest.raises(core_config.TomlConfigError, match="already exists"):
        core_config.write_toml_template(target, template="a = 2\n")

    core_config.write_toml_template(
        target, template="a = 2\n", overwrite=True, mode=0o644
    )
    assert target.read_text(encoding="utf-8") == "a = 2\n"
    assert target.stat().st_mode & 0o777 == 0o644
