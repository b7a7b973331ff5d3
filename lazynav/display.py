"""Display lines with hidden metadata ranges and their presentation.

A hidden range stays in ``DisplayLine.text`` so column parsing keeps working;
only the presentation layer suppresses it.
"""

from __future__ import annotations

from dataclasses import dataclass

from .ansi import SGR_CONCEAL, SGR_REVEAL


@dataclass(frozen=True)
class DisplayLine:
    """One listing line plus ``(start, end)`` character ranges to hide."""

    text: str
    hidden_ranges: tuple[tuple[int, int], ...] = ()

    def __post_init__(self) -> None:
        for start, end in self.hidden_ranges:
            if not 0 <= start <= end <= len(self.text):
                raise ValueError(f"hidden range ({start}, {end}) outside line of length {len(self.text)}")

    def merged_ranges(self) -> list[tuple[int, int]]:
        merged: list[tuple[int, int]] = []
        for start, end in sorted(self.hidden_ranges):
            if start == end:
                continue
            if merged and start <= merged[-1][1]:
                merged[-1] = (merged[-1][0], max(merged[-1][1], end))
            else:
                merged.append((start, end))
        return merged


def visible_text(line: DisplayLine) -> str:
    """Return the text a user sees: hidden ranges removed."""
    parts: list[str] = []
    cursor = 0
    for start, end in line.merged_ranges():
        parts.append(line.text[cursor:start])
        cursor = end
    parts.append(line.text[cursor:])
    return "".join(parts)


def render_display_line(line: DisplayLine, conceal: bool = True) -> str:
    """Render ``line`` for a terminal.

    With ``conceal`` the hidden ranges are wrapped in the conceal/reveal SGR
    pair so they remain present (and selectable) but invisible. Without it the
    visible text alone is returned.
    """
    if not conceal:
        return visible_text(line)

    parts: list[str] = []
    cursor = 0
    for start, end in line.merged_ranges():
        parts.append(line.text[cursor:start])
        parts.append(f"{SGR_CONCEAL}{line.text[start:end]}{SGR_REVEAL}")
        cursor = end
    parts.append(line.text[cursor:])
    return "".join(parts)
