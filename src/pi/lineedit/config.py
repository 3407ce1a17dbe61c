"""Line editor configuration.

Settings live in ``~/.pi/lineedit.json`` (or ``$PI_CONFIG_DIR/lineedit.json``)
with camelCase keys; ``PI_LINEEDIT_*`` environment variables override them.
"""

from __future__ import annotations

import codecs
import json
import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from pi.lineedit.instr import EditMode

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "lineedit.json"

MAX_REPEAT_COUNT = 9999

_TRUE_VALUES = ("1", "true", "yes", "on")

# camelCase file key -> dataclass field
_FILE_KEYS: dict[str, str] = {
    "editMode": "edit_mode",
    "protectNewline": "protect_newline",
    "wideChars": "wide_chars",
    "encoding": "encoding",
    "maxRepeatCount": "max_repeat_count",
    "killRingSize": "kill_ring_size",
    "undoLimit": "undo_limit",
}


@dataclass
class LineEditConfig:
    """Options shared by every session a :class:`LineEditor` starts."""

    edit_mode: EditMode = "emacs"
    protect_newline: bool = True
    wide_chars: bool = False
    encoding: str = "utf-8"
    max_repeat_count: int = MAX_REPEAT_COUNT
    kill_ring_size: int = 32
    undo_limit: int = 100

    def __post_init__(self) -> None:
        if self.edit_mode not in ("emacs", "vi"):
            logger.warning("unknown edit mode %r, using emacs", self.edit_mode)
            self.edit_mode = "emacs"
        self.max_repeat_count = max(1, self.max_repeat_count)
        self.kill_ring_size = max(0, self.kill_ring_size)
        self.undo_limit = max(0, self.undo_limit)


_DEFAULTS: dict[str, Any] = {f.name: f.default for f in fields(LineEditConfig)}


def _is_valid_value(name: str, value: Any) -> bool:
    """Check a file value against the type of the field's default."""
    default = _DEFAULTS[name]
    if isinstance(default, bool):
        return isinstance(value, bool)
    if isinstance(default, int):
        return isinstance(value, int) and not isinstance(value, bool) and value >= 0
    if name == "encoding":
        if not isinstance(value, str):
            return False
        try:
            codecs.lookup(value)
        except LookupError:
            return False
        return True
    return isinstance(value, str)


def _get_config_path() -> Path:
    config_dir = Path(os.environ.get("PI_CONFIG_DIR", Path.home() / ".pi"))
    return config_dir / CONFIG_FILE_NAME


def _read_config_file(path: Path) -> dict[str, Any]:
    """Read the settings file, keeping only known keys with well-typed values.

    A missing file is not an error. An unreadable file, a file that is not a
    JSON object and every bad value log a warning and fall back to defaults.
    """
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text())
    except (OSError, ValueError) as e:
        logger.warning("error reading %s: %s", path, e)
        return {}
    if not isinstance(data, dict):
        logger.warning("ignoring %s: expected a JSON object", path)
        return {}

    values: dict[str, Any] = {}
    for key, value in data.items():
        name = _FILE_KEYS.get(key)
        if name is None:
            continue
        if not _is_valid_value(name, value):
            logger.warning("ignoring %s in %s: invalid value %r", key, path, value)
            continue
        values[name] = value
    return values


def _env_flag(name: str) -> bool | None:
    value = os.environ.get(name)
    if value is None:
        return None
    return value.strip().lower() in _TRUE_VALUES


def load_config(path: Path | None = None) -> LineEditConfig:
    """Build a config from the settings file and the environment."""
    values = _read_config_file(path or _get_config_path())

    mode = os.environ.get("PI_LINEEDIT_MODE")
    if mode:
        values["edit_mode"] = mode.strip().lower()
    for env_name, field_name in (
        ("PI_LINEEDIT_PROTECT_NEWLINE", "protect_newline"),
        ("PI_LINEEDIT_WIDE_CHARS", "wide_chars"),
    ):
        flag = _env_flag(env_name)
        if flag is not None:
            values[field_name] = flag

    return LineEditConfig(**values)
