"""Fixed-column directory entry lines shared by real and synthetic listings.

Line layout (the host's generic listing format)::

    "  " mode(10) " " nlink(>3) " " owner(<8) " " group(<8) " " size(>8) " " date(12) " " name

``entry_name`` is the host-side parser; synthetic lines must keep parsing
with it, which is why hidden metadata is concealed rather than removed.
"""

from __future__ import annotations

import os
import re
import stat
import time
from pathlib import Path

from .display import DisplayLine

ENTRY_INDENT = "  "
ENTRY_NAME_COLUMN = 57
_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

_ENTRY_RE = re.compile(
    r"^  (?P<mode>\S{10}) +(?P<nlink>\S+) (?P<owner>\S+) +(?P<group>\S+) +(?P<size>\S+) "
    r"(?P<date>[A-Z][a-z]{2} [ \d]\d \d\d:\d\d) (?P<name>.+)\Z",
    re.DOTALL,
)


def format_entry_date(epoch_seconds: float) -> str:
    """Return ``"Mon dd HH:MM"`` (12 columns, locale independent)."""
    moment = time.localtime(epoch_seconds)
    return f"{_MONTHS[moment.tm_mon - 1]} {moment.tm_mday:>2} {moment.tm_hour:02d}:{moment.tm_min:02d}"


def format_entry_line(
    mode: str,
    nlink: int | str,
    owner: str,
    group: str,
    size: int | str,
    date: str,
    name: str,
) -> str:
    """Compose one entry line; ``name`` always starts after the metadata columns."""
    return (
        f"{ENTRY_INDENT}{mode:<10.10} {str(nlink):>3} {owner:<8} {group:<8} "
        f"{str(size):>8} {date:<12.12} {name}"
    )


def entry_name(line: str) -> str | None:
    """Return the trailing name field of an entry line, or ``None``.

    ``line`` carries no line terminator; everything after the date column,
    newlines included, belongs to the name.
    """
    match = _ENTRY_RE.match(line)
    if match is None:
        return None
    return match.group("name")


def _owner_label(ident: int) -> str:
    return "-" if ident < 0 else str(ident)


def _directory_entry_line(name: str, entry_stat: os.stat_result) -> str:
    return format_entry_line(
        stat.filemode(entry_stat.st_mode),
        entry_stat.st_nlink,
        _owner_label(getattr(entry_stat, "st_uid", -1)),
        _owner_label(getattr(entry_stat, "st_gid", -1)),
        entry_stat.st_size,
        format_entry_date(entry_stat.st_mtime),
        name,
    )


def list_directory_lines(directory: Path | str, show_hidden: bool = False) -> list[DisplayLine]:
    """List ``directory`` as entry lines, directories first, then by name.

    Raises ``OSError`` when the directory cannot be scanned. Children whose
    ``stat`` fails are skipped.
    """
    rows: list[tuple[bool, str, str]] = []
    with os.scandir(directory) as entries:
        for child in entries:
            name = child.name
            if not show_hidden and name.startswith("."):
                continue
            try:
                child_stat = child.stat(follow_symlinks=False)
            except OSError:
                continue
            is_dir = stat.S_ISDIR(child_stat.st_mode)
            rows.append((is_dir, name, _directory_entry_line(name, child_stat)))

    rows.sort(key=lambda row: (not row[0], row[1].lower()))
    return [DisplayLine(text) for _is_dir, _name, text in rows]
