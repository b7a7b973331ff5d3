"""Synthetic listing of drives and special folders (the virtual pane).

Each record becomes an ordinary entry line carrying sentinel metadata, so the
host's entry parser still finds a name field. The sentinel columns (and, for
folders, the leading directories) are hidden; only drive roots and folder leaf
names stay visible.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from .bridge import EnumerationResult
from .display import DisplayLine
from .entries import entry_name, format_entry_line

SENTINEL_MODE = "d---------"
SENTINEL_NLINK = "-"
SENTINEL_OWNER = "-"
SENTINEL_GROUP = "-"
SENTINEL_SIZE = "-"
SENTINEL_DATE = "Jan  1 00:00"
SEPARATOR_MARKER = "--"


class Enumerator(Protocol):
    def enumerate(self) -> EnumerationResult: ...


@dataclass(frozen=True)
class VirtualListing:
    """A rebuilt-on-demand, read-only pane of drive and folder entries."""

    lines: tuple[DisplayLine, ...]
    read_only: bool = True

    def names(self) -> list[str]:
        """Return the parsed name field of every line, separator included."""
        names: list[str] = []
        for line in self.lines:
            name = entry_name(line.text)
            if name is not None:
                names.append(name)
        return names


def _sentinel_line(name: str) -> tuple[str, int]:
    text = format_entry_line(
        SENTINEL_MODE,
        SENTINEL_NLINK,
        SENTINEL_OWNER,
        SENTINEL_GROUP,
        SENTINEL_SIZE,
        SENTINEL_DATE,
        name,
    )
    return text, len(text) - len(name)


def drive_line(root: str) -> DisplayLine:
    """Entry line for a drive root with the sentinel prefix hidden."""
    text, prefix_len = _sentinel_line(root)
    return DisplayLine(text, ((0, prefix_len),))


def folder_line(path: str) -> DisplayLine:
    """Entry line for a special folder showing only its leaf name."""
    text, prefix_len = _sentinel_line(path)
    leaf_start = path.rstrip("/").rfind("/") + 1
    return DisplayLine(text, ((0, prefix_len + leaf_start),))


def separator_line() -> DisplayLine:
    text, prefix_len = _sentinel_line(SEPARATOR_MARKER)
    return DisplayLine(text, ((0, prefix_len),))


def is_separator(line: DisplayLine | str) -> bool:
    text = line.text if isinstance(line, DisplayLine) else line
    return entry_name(text) == SEPARATOR_MARKER


def build_virtual_listing(
    enumerator: Enumerator,
    is_directory: Callable[[str], bool] = os.path.isdir,
) -> VirtualListing:
    """Enumerate drives and special folders into display lines.

    Drives come first in enumeration order, then every non-empty folder that
    exists on disk. A separator line sits between the two groups when both
    are present. ``BridgeError`` from the enumerator propagates.
    """
    result = enumerator.enumerate()

    drive_lines = [drive_line(drive.root) for drive in result.drives]
    folder_lines = [
        folder_line(folder.path)
        for folder in result.folders
        if folder.path and is_directory(folder.path)
    ]

    lines = list(drive_lines)
    if drive_lines and folder_lines:
        lines.append(separator_line())
    lines.extend(folder_lines)
    return VirtualListing(tuple(lines))
