"""Command-line front door for lazynav.

Parses CLI options, builds a navigation session from persisted config, and
prints the breadcrumb status line followed by a directory or virtual-pane
listing.
"""

from __future__ import annotations

import argparse
import logging
import shutil
import sys
from pathlib import Path

from .display import render_display_line
from .errors import BridgeError
from .session import NavigatorSession


def _column_count(value: str) -> int:
    """argparse type for ``--max-cols``: a status width of at least one column."""
    try:
        columns = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"not a column count: {value!r}") from exc
    if columns < 1:
        raise argparse.ArgumentTypeError("column count must be at least 1")
    return columns


def _terminal_columns() -> int:
    """Width available to the breadcrumb status line when ``--max-cols`` is omitted."""
    return max(1, shutil.get_terminal_size((80, 24)).columns)


def render_session(session: NavigatorSession, max_cols: int, no_color: bool) -> str:
    """Render the status line and the current listing as printable text."""
    out = [session.status_line(max_cols, color=not no_color), "\n"]
    for line in session.lines:
        out.append(render_display_line(line, conceal=not no_color))
        out.append("\n")
    return "".join(out)


def main(default_path: Path | None = None) -> None:
    """Parse CLI arguments and print a listing for a directory or the virtual pane.

    ``default_path`` is primarily for tests; when omitted the current working
    directory is used.
    """
    parser = argparse.ArgumentParser(
        description="List directories with drive, special-folder, and shortcut resolution."
    )
    parser.add_argument("path", nargs="?", default=None, help="Directory to list. Defaults to current directory.")
    parser.add_argument("--virtual", action="store_true", help="List ready drives and special folders.")
    parser.add_argument("--resolve", metavar="PATH", help="Print the resolved target of PATH and exit.")
    parser.add_argument("--no-follow", action="store_true", help="Do not follow shortcuts or virtual directories.")
    parser.add_argument("--show-hidden", action="store_true", help="Include dot-files in directory listings.")
    parser.add_argument("--no-color", action="store_true", help="Disable ANSI output and omit hidden columns.")
    parser.add_argument(
        "--max-cols",
        type=_column_count,
        default=None,
        help="Status line width (default: terminal width).",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log helper and resolution details.")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.resolve is not None and (args.path is not None or args.virtual):
        raise SystemExit("Cannot combine --resolve with a path or --virtual.")

    if default_path is None:
        default_path = Path.cwd()
    path = Path(args.path or default_path)
    max_cols = args.max_cols if args.max_cols is not None else _terminal_columns()

    start = path if path.is_dir() else default_path
    session = NavigatorSession.from_config(start, width=max_cols, persist=False)
    if args.no_follow:
        session.set_follow_shortcuts(False)
    if args.show_hidden:
        session.show_hidden = True

    if args.resolve is not None:
        sys.stdout.write(session.resolver.resolve(args.resolve) + "\n")
        return

    if args.virtual:
        try:
            session.open_virtual_pane()
        except BridgeError as exc:
            raise SystemExit(f"Cannot list drives: {exc}") from exc
    else:
        if not path.exists():
            raise SystemExit(f"Path not found: {path}")
        try:
            session.visit(path)
        except OSError as exc:
            raise SystemExit(f"Cannot list {path}: {exc}") from exc

    sys.stdout.write(render_session(session, max_cols, args.no_color))


if __name__ == "__main__":
    main()
