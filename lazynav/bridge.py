"""Bridge to the external drive/special-folder enumerator helper.

The helper is an opaque process reached through synchronous invocation with
captured stdout:
- no arguments: one line holding a literal ``drives``/``folders`` structure
- ``/l <path>``: one line with the resolved target of a shortcut file

Nothing is cached; every call re-runs the helper.
"""

from __future__ import annotations

import ast
import logging
import subprocess
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path

from .errors import BridgeError

logger = logging.getLogger(__name__)

RESOLVE_SHORTCUT_FLAG = "/l"


@dataclass(frozen=True)
class DriveRecord:
    """One ready drive reported by the helper."""

    letter: str

    @property
    def root(self) -> str:
        return f"{self.letter}:/"


@dataclass(frozen=True)
class SpecialFolderRecord:
    """One special-folder path; may be empty or point nowhere."""

    path: str


@dataclass(frozen=True)
class EnumerationResult:
    drives: tuple[DriveRecord, ...] = ()
    folders: tuple[SpecialFolderRecord, ...] = ()


def _to_forward_slashes(text: str) -> str:
    return text.replace("\\", "/")


def _group_values(raw: object) -> list[object]:
    """Flatten ``("name", a, b)`` or ``("name", [a, b])`` group values."""
    if isinstance(raw, (list, tuple)):
        if len(raw) == 1 and isinstance(raw[0], (list, tuple)):
            return list(raw[0])
        return list(raw)
    raise BridgeError(f"expected a sequence of values, got {type(raw).__name__}")


def _named_groups(data: object) -> dict[str, list[object]]:
    if isinstance(data, dict):
        groups: dict[str, list[object]] = {}
        for key, value in data.items():
            if not isinstance(key, str):
                raise BridgeError(f"group name must be a string, got {key!r}")
            groups[key] = _group_values(value)
        return groups

    if isinstance(data, (list, tuple)):
        groups = {}
        for group in data:
            if not isinstance(group, (list, tuple)) or not group or not isinstance(group[0], str):
                raise BridgeError(f"malformed group: {group!r}")
            groups[group[0]] = _group_values(tuple(group[1:]))
        return groups

    raise BridgeError(f"unexpected helper payload type: {type(data).__name__}")


def _parse_drive(raw: object) -> DriveRecord:
    if not isinstance(raw, str):
        raise BridgeError(f"drive entry must be a string, got {raw!r}")
    letter = _to_forward_slashes(raw.strip())
    for suffix in (":/", ":"):
        if letter.endswith(suffix):
            letter = letter[: -len(suffix)]
            break
    if len(letter) != 1 or not letter.isalpha():
        raise BridgeError(f"invalid drive identifier: {raw!r}")
    return DriveRecord(letter.upper())


def _parse_folder(raw: object) -> SpecialFolderRecord:
    if raw is None:
        return SpecialFolderRecord("")
    if not isinstance(raw, str):
        raise BridgeError(f"folder entry must be a string, got {raw!r}")
    return SpecialFolderRecord(_to_forward_slashes(raw.strip()))


def parse_enumeration(text: str) -> EnumerationResult:
    """Parse helper enumeration output into typed records.

    The payload is read as a Python literal (``ast.literal_eval``), either a
    ``{"drives": [...], "folders": [...]}`` mapping or a sequence of named
    groups such as ``(("drives", "C", "D"), ("folders", "C:/Users/me"))``.
    Missing groups are treated as empty; any other shape raises ``BridgeError``.
    """
    payload = text.strip()
    if not payload:
        raise BridgeError("helper produced no output")
    try:
        data = ast.literal_eval(payload)
    except (ValueError, SyntaxError, MemoryError, RecursionError) as exc:
        raise BridgeError(f"unparsable helper output: {payload[:80]!r}") from exc

    groups = _named_groups(data)
    drives = tuple(_parse_drive(raw) for raw in groups.get("drives", ()))
    folders = tuple(_parse_folder(raw) for raw in groups.get("folders", ()))
    return EnumerationResult(drives=drives, folders=folders)


class HelperBridge:
    """Runs the enumerator helper and converts its output to records.

    ``run`` defaults to ``subprocess.run`` and is injectable for tests. The
    helper blocks the caller until it exits; there is no timeout.
    """

    def __init__(
        self,
        command: Sequence[str],
        working_directory: Path | None = None,
        run: Callable[..., subprocess.CompletedProcess[str]] = subprocess.run,
        home: Callable[[], Path] = Path.home,
    ) -> None:
        if not command:
            raise ValueError("helper command must not be empty")
        self.command = list(command)
        self.working_directory = working_directory
        self._run = run
        self._home = home

    def _invoke(self, args: list[str], cwd: Path | None) -> str:
        try:
            proc = self._run(
                [*self.command, *args],
                stdout=subprocess.PIPE,
                stderr=subprocess.DEVNULL,
                text=True,
                encoding="utf-8",
                errors="replace",
                check=False,
                cwd=None if cwd is None else str(cwd),
            )
        except OSError as exc:
            raise BridgeError(f"could not run {self.command[0]}: {exc}") from exc
        if proc.returncode != 0:
            raise BridgeError(f"{self.command[0]} exited with status {proc.returncode}")
        return proc.stdout or ""

    def enumerate(self) -> EnumerationResult:
        """Return ready drives and special folders, retrying once from home."""
        try:
            return parse_enumeration(self._invoke([], self.working_directory))
        except BridgeError as exc:
            logger.warning("enumeration failed (%s); retrying from home directory", exc)

        return parse_enumeration(self._invoke([], self._home()))

    def resolve_shortcut(self, path: str) -> str:
        """Return the target of shortcut ``path``, or ``path`` when unresolvable."""
        try:
            output = self._invoke([RESOLVE_SHORTCUT_FLAG, str(path)], self.working_directory)
        except BridgeError as exc:
            logger.debug("shortcut resolution failed for %s: %s", path, exc)
            return path

        for line in output.splitlines():
            stripped = line.strip()
            if stripped:
                return _to_forward_slashes(stripped)
        logger.debug("helper returned no target for %s", path)
        return path
