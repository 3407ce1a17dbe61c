"""Tests for pi.lineedit.config -- settings file and environment overrides."""

from __future__ import annotations

import json

import pytest

from pi.lineedit.config import LineEditConfig, load_config
from pi.lineedit.edit import EditCtx
from pi.lineedit.history import History


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for name in ("PI_LINEEDIT_MODE", "PI_LINEEDIT_PROTECT_NEWLINE", "PI_LINEEDIT_WIDE_CHARS"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("PI_CONFIG_DIR", str(tmp_path))
    return tmp_path


class TestLineEditConfig:
    def test_defaults(self) -> None:
        config = LineEditConfig()
        assert config.edit_mode == "emacs"
        assert config.protect_newline is True
        assert config.wide_chars is False
        assert config.max_repeat_count == 9999

    def test_unknown_mode_falls_back_to_emacs(self) -> None:
        assert LineEditConfig(edit_mode="nano").edit_mode == "emacs"  # type: ignore[arg-type]

    def test_repeat_cap_is_at_least_one(self) -> None:
        assert LineEditConfig(max_repeat_count=0).max_repeat_count == 1

    def test_negative_sizes_are_clamped(self) -> None:
        config = LineEditConfig(kill_ring_size=-1, undo_limit=-1)
        assert config.kill_ring_size == 0
        assert config.undo_limit == 0


class TestLoadConfig:
    """File values first, environment on top."""

    def test_missing_file_gives_defaults(self) -> None:
        assert load_config() == LineEditConfig()

    def test_reads_camel_case_file(self, clean_env) -> None:
        (clean_env / "lineedit.json").write_text(
            json.dumps({"editMode": "vi", "wideChars": True, "killRingSize": 4, "other": 1})
        )
        config = load_config()
        assert config.edit_mode == "vi"
        assert config.wide_chars is True
        assert config.kill_ring_size == 4

    def test_invalid_json_falls_back(self, clean_env, caplog) -> None:
        (clean_env / "lineedit.json").write_text("{not json")
        assert load_config() == LineEditConfig()
        assert "error reading" in caplog.text

    def test_non_object_json_falls_back(self, clean_env) -> None:
        (clean_env / "lineedit.json").write_text("[1, 2]")
        assert load_config() == LineEditConfig()

    def test_wrongly_typed_values_keep_defaults(self, clean_env, caplog) -> None:
        (clean_env / "lineedit.json").write_text(
            json.dumps({"maxRepeatCount": "5", "wideChars": 1, "encoding": 8, "editMode": "vi"})
        )
        config = load_config()
        assert config.max_repeat_count == 9999
        assert config.wide_chars is False
        assert config.encoding == "utf-8"
        assert config.edit_mode == "vi"
        assert "maxRepeatCount" in caplog.text

    def test_negative_sizes_keep_defaults(self, clean_env) -> None:
        (clean_env / "lineedit.json").write_text(json.dumps({"killRingSize": -1, "undoLimit": -5}))
        config = load_config()
        assert config.kill_ring_size == 32
        assert config.undo_limit == 100
        # the session must still be constructible
        EditCtx.from_config("> ", History(), config)

    def test_unknown_encoding_keeps_default(self, clean_env) -> None:
        (clean_env / "lineedit.json").write_text(json.dumps({"encoding": "no-such-codec"}))
        assert load_config().encoding == "utf-8"

    def test_bool_is_not_a_count(self, clean_env) -> None:
        (clean_env / "lineedit.json").write_text(json.dumps({"undoLimit": True}))
        assert load_config().undo_limit == 100

    def test_env_overrides_file(self, clean_env, monkeypatch) -> None:
        (clean_env / "lineedit.json").write_text(json.dumps({"editMode": "vi"}))
        monkeypatch.setenv("PI_LINEEDIT_MODE", "Emacs")
        monkeypatch.setenv("PI_LINEEDIT_PROTECT_NEWLINE", "0")
        monkeypatch.setenv("PI_LINEEDIT_WIDE_CHARS", "yes")
        config = load_config()
        assert config.edit_mode == "emacs"
        assert config.protect_newline is False
        assert config.wide_chars is True

    def test_explicit_path(self, tmp_path) -> None:
        path = tmp_path / "custom.json"
        path.write_text(json.dumps({"protectNewline": False}))
        assert load_config(path).protect_newline is False
