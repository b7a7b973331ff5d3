"""ANSI escape helpers for status and listing output.

Click offsets are measured on visible text, so styled strings must be
stripped of escape sequences before any column arithmetic.
"""

from __future__ import annotations

import re

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")

SGR_RESET = "\033[0m"
SGR_CONCEAL = "\033[8m"
SGR_REVEAL = "\033[28m"
SGR_DIM = "\033[2;38;5;245m"


def strip_ansi(text: str) -> str:
    """Return ``text`` without ANSI escape sequences."""
    if "\x1b" not in text:
        return text
    return ANSI_ESCAPE_RE.sub("", text)
