"""Persistent JSON config helpers.

Stores the shortcut-follow switch, breadcrumb mode, hidden-file preference,
and the enumerator helper command. All access is defensive: malformed or
missing config falls back to defaults.
"""

from __future__ import annotations

import json
import os
import shlex
from pathlib import Path

from platformdirs import user_config_dir

APP_NAME = "lazynav"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
HELPER_ENV_VAR = "LAZYNAV_HELPER"
DEFAULT_HELPER_COMMAND: tuple[str, ...] = ("lazynav-helper",)


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Filesystem errors are ignored so an unwritable config never blocks a
    toggle from taking effect for the current session.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except OSError:
        pass


def _load_bool(key: str, default: bool) -> bool:
    value = load_config().get(key)
    return value if isinstance(value, bool) else default


def _save_bool(key: str, value: bool) -> None:
    config = load_config()
    config[key] = bool(value)
    save_config(config)


def load_follow_shortcuts() -> bool:
    """Return whether shortcuts and virtual directories are followed (default on)."""
    return _load_bool("follow_shortcuts", True)


def save_follow_shortcuts(follow: bool) -> None:
    _save_bool("follow_shortcuts", follow)


def load_breadcrumb_enabled() -> bool:
    return _load_bool("breadcrumb", True)


def save_breadcrumb_enabled(enabled: bool) -> None:
    _save_bool("breadcrumb", enabled)


def load_show_hidden() -> bool:
    return _load_bool("show_hidden", False)


def split_command(text: str) -> list[str]:
    """Split a command string on whitespace, keeping backslashes literal.

    Arguments containing spaces must be quoted (``"C:\\Program Files\\h.exe"``);
    the surrounding quotes are removed. An unbalanced quote falls back to a
    plain whitespace split.
    """
    lexer = shlex.shlex(text, posix=False)
    lexer.whitespace_split = True
    lexer.commenters = ""
    try:
        tokens = list(lexer)
    except ValueError:
        return text.split()
    parts: list[str] = []
    for token in tokens:
        if len(token) >= 2 and token[0] == token[-1] and token[0] in "\"'":
            token = token[1:-1]
        parts.append(token)
    return parts


def load_helper_command() -> list[str]:
    """Return the helper argv.

    ``$LAZYNAV_HELPER`` wins over the config file. A config string is split
    with ``split_command``; a list must contain only non-empty strings.
    """
    env_value = os.environ.get(HELPER_ENV_VAR, "").strip()
    if env_value:
        return split_command(env_value)

    value = load_config().get("helper_command")
    if isinstance(value, str) and value.strip():
        return split_command(value)
    if isinstance(value, list) and value and all(isinstance(part, str) and part for part in value):
        return list(value)
    return list(DEFAULT_HELPER_COMMAND)
