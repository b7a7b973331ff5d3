"""Clickable breadcrumb for the current directory in the status area.

The status text is a pure tail truncation of the canonical directory path.
A click is mapped back by counting characters from the click to the end of the
visible text, then locating the same distance from the end of the canonical
path. The displayed string is never used as a navigation source on its own.
"""

from __future__ import annotations

import os
import posixpath
from dataclasses import dataclass

from .ansi import SGR_DIM, SGR_RESET, strip_ansi

ELLIPSIS = "..."
BREADCRUMB_RESERVED_MARGIN = 6


def _split_drive(text: str) -> tuple[str, str]:
    if len(text) >= 2 and text[1] == ":" and text[0].isalpha():
        return text[:2], text[2:]
    return "", text


def normalize_directory(path: str | os.PathLike[str]) -> str:
    """Return ``path`` as an absolute, normalized, ``/``-terminated directory.

    Backslashes become forward slashes and a bare drive (``C:``) becomes its
    root. Raises ``ValueError`` for relative paths.
    """
    text = os.fspath(path).replace("\\", "/")
    drive, rest = _split_drive(text)
    if drive and not rest:
        rest = "/"
    if not rest.startswith("/"):
        raise ValueError(f"not an absolute directory path: {text!r}")

    normalized = posixpath.normpath(rest)
    if normalized.startswith("//"):
        normalized = "/" + normalized.lstrip("/")
    if not normalized.endswith("/"):
        normalized += "/"
    return drive + normalized


def render_breadcrumb(path: str, max_width: int) -> str:
    """Return ``path`` when it fits, otherwise ``"..."`` plus its last ``max_width`` chars."""
    if len(path) <= max_width:
        return path
    if max_width <= 0:
        return ELLIPSIS
    return ELLIPSIS + path[-max_width:]


def style_breadcrumb(display: str) -> str:
    """Dim a leading ellipsis; the visible characters are unchanged."""
    if not display.startswith(ELLIPSIS):
        return display
    return f"{SGR_DIM}{ELLIPSIS}{SGR_RESET}{display[len(ELLIPSIS):]}"


def breadcrumb_target(display: str, click_offset: int, canonical_path: str) -> str | None:
    """Map a click in ``display`` to the ancestor directory it names.

    Clicking anywhere in a segment selects the directory ending at that
    segment's closing separator. Returns ``None`` for clicks on the current
    (last) segment, on the elision marker, or outside the visible text.
    """
    visible = strip_ansi(display)
    if click_offset < 0 or click_offset >= len(visible):
        return None
    truncated = visible != canonical_path and visible.startswith(ELLIPSIS)
    if truncated and click_offset < len(ELLIPSIS):
        return None

    tail_length = len(visible) - click_offset
    target_index = max(0, len(canonical_path) - tail_length)

    boundary = canonical_path.find("/", target_index)
    if boundary < 0:
        boundary = len(canonical_path)
    current_end = len(canonical_path) - 1 if canonical_path.endswith("/") else len(canonical_path)
    if boundary >= current_end:
        return None
    return canonical_path[: boundary + 1]


@dataclass
class BreadcrumbState:
    """Canonical current directory plus the width it is displayed in.

    ``displayed`` is derived from ``canonical_path`` on every access.
    """

    canonical_path: str
    available_width: int = 80
    enabled: bool = True

    def __post_init__(self) -> None:
        self.canonical_path = normalize_directory(self.canonical_path)

    @property
    def max_width(self) -> int:
        return max(0, self.available_width - BREADCRUMB_RESERVED_MARGIN)

    @property
    def displayed(self) -> str:
        if not self.enabled:
            return self.canonical_path
        return render_breadcrumb(self.canonical_path, self.max_width)

    def set_path(self, path: str | os.PathLike[str]) -> None:
        self.canonical_path = normalize_directory(path)

    def set_width(self, available_width: int) -> None:
        self.available_width = max(0, available_width)

    def toggle(self) -> bool:
        self.enabled = not self.enabled
        return self.enabled

    def click(self, click_offset: int) -> str | None:
        """Return the directory to navigate to for a click at ``click_offset``."""
        if not self.enabled:
            return None
        return breadcrumb_target(self.displayed, click_offset, self.canonical_path)
