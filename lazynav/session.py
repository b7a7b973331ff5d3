"""Host-facing navigation session.

Ties the resolver, the virtual pane, and the breadcrumb together behind the
entry points a file manager binds to keys: open/refresh the virtual pane,
go up, toggle breadcrumb and shortcut-follow modes, open the entry under
point, and handle status-area clicks.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable

from . import config
from .breadcrumb import BreadcrumbState, normalize_directory, style_breadcrumb
from .bridge import HelperBridge
from .display import DisplayLine
from .entries import entry_name, list_directory_lines
from .listing import Enumerator, VirtualListing, build_virtual_listing, is_separator
from .resolver import ResolutionPolicy, Resolver

logger = logging.getLogger(__name__)

VIRTUAL_PANE_LABEL = "Drives and special folders"

KEY_BINDINGS: dict[str, str] = {
    "V": "open_virtual_pane",
    "B": "toggle_breadcrumb",
    "g": "refresh",
    "^": "navigate_up",
    "L": "toggle_follow_shortcuts",
}


def _canonical(path: str | os.PathLike[str]) -> str:
    try:
        return normalize_directory(path)
    except ValueError:
        return normalize_directory(os.path.abspath(path))


def parent_directory(directory: str) -> str | None:
    """Return the canonical parent of ``directory``, or ``None`` at a top level."""
    cut = directory.rstrip("/").rfind("/")
    if cut < 0:
        return None
    return directory[: cut + 1]


class NavigatorSession:
    """Current location state for one pane.

    ``lines`` is either the real listing of ``breadcrumb.canonical_path`` or,
    while ``virtual`` is set, the synthetic drive/folder listing.
    """

    def __init__(
        self,
        enumerator: Enumerator,
        resolver: Resolver,
        breadcrumb: BreadcrumbState,
        show_hidden: bool = False,
        persist: bool = False,
        list_directory: Callable[[str, bool], list[DisplayLine]] = list_directory_lines,
    ) -> None:
        self.enumerator = enumerator
        self.resolver = resolver
        self.breadcrumb = breadcrumb
        self.show_hidden = show_hidden
        self.persist = persist
        self._list_directory = list_directory
        self.virtual: VirtualListing | None = None
        self.lines: tuple[DisplayLine, ...] = ()
        self._visit = resolver.wrap_visit(self._open_directory)
        self._entry_name = resolver.wrap_entry_name(self._entry_full_path)

    @classmethod
    def from_config(
        cls,
        start: str | os.PathLike[str],
        width: int = 80,
        persist: bool = True,
    ) -> NavigatorSession:
        """Build a session from persisted config, without visiting ``start`` yet."""
        bridge = HelperBridge(config.load_helper_command())
        policy = ResolutionPolicy(follow_shortcuts=config.load_follow_shortcuts())
        breadcrumb = BreadcrumbState(
            _canonical(start),
            available_width=width,
            enabled=config.load_breadcrumb_enabled(),
        )
        return cls(
            bridge,
            Resolver(bridge, policy),
            breadcrumb,
            show_hidden=config.load_show_hidden(),
            persist=persist,
        )

    @property
    def current_directory(self) -> str:
        return self.breadcrumb.canonical_path

    def _open_directory(self, path: str) -> str:
        directory = _canonical(path)
        lines = self._list_directory(directory, self.show_hidden)
        self.breadcrumb.set_path(directory)
        self.virtual = None
        self.lines = tuple(lines)
        return directory

    def visit(self, path: str | os.PathLike[str]) -> str:
        """Enter ``path`` (after virtual-directory resolution); returns the new directory.

        ``OSError`` from listing propagates and leaves the session unchanged.
        """
        return self._visit(os.fspath(path))

    def open_virtual_pane(self) -> VirtualListing:
        """Rebuild and show the drive/folder pane; ``BridgeError`` propagates."""
        listing = build_virtual_listing(self.enumerator)
        self.virtual = listing
        self.lines = listing.lines
        return listing

    def refresh(self) -> None:
        if self.virtual is not None:
            self.open_virtual_pane()
            return
        self._open_directory(self.current_directory)

    def navigate_up(self) -> None:
        """Go to the parent directory; top-level directories open the virtual pane."""
        if self.virtual is not None:
            self.open_virtual_pane()
            return
        parent = parent_directory(self.current_directory)
        if parent is None:
            self.open_virtual_pane()
            return
        self.visit(parent)

    def _entry_full_path(self, line: DisplayLine | str) -> str | None:
        text = line.text if isinstance(line, DisplayLine) else line
        name = entry_name(text)
        if name is None:
            return None
        if self.virtual is not None:
            return None if is_separator(text) else name
        if name in (".", ".."):
            return None
        return self.current_directory + name

    def entry_path(self, line: DisplayLine | str) -> str | None:
        """Return the path an operation on ``line`` acts upon (shortcuts resolved)."""
        return self._entry_name(line)

    def open_entry(self, line: DisplayLine | str) -> str | None:
        """Open the entry on ``line``: directories are visited, files are returned."""
        path = self.entry_path(line)
        if path is None:
            return None
        if os.path.isdir(path):
            return self.visit(path)
        return path

    def click_status(self, click_offset: int) -> str | None:
        """Navigate to the breadcrumb segment under ``click_offset``, if any."""
        if self.virtual is not None:
            return None
        target = self.breadcrumb.click(click_offset)
        if target is None:
            return None
        return self.visit(target)

    def status_line(self, width: int, color: bool = False) -> str:
        self.breadcrumb.set_width(width)
        if self.virtual is not None:
            return VIRTUAL_PANE_LABEL
        displayed = self.breadcrumb.displayed
        return style_breadcrumb(displayed) if color else displayed

    def toggle_breadcrumb(self) -> bool:
        enabled = self.breadcrumb.toggle()
        if self.persist:
            config.save_breadcrumb_enabled(enabled)
        return enabled

    def set_follow_shortcuts(self, follow: bool) -> None:
        """Change the follow switch; applies from the next resolution attempt."""
        self.resolver.policy.follow_shortcuts = bool(follow)
        if self.persist:
            config.save_follow_shortcuts(self.resolver.policy.follow_shortcuts)

    def toggle_follow_shortcuts(self) -> bool:
        self.set_follow_shortcuts(not self.resolver.policy.follow_shortcuts)
        return self.resolver.policy.follow_shortcuts

    def handle_key(self, key: str) -> bool:
        """Dispatch a bound key; returns ``False`` for unbound keys."""
        action = KEY_BINDINGS.get(key)
        if action is None:
            return False
        logger.debug("key %r -> %s", key, action)
        getattr(self, action)()
        return True


__all__ = [
    "KEY_BINDINGS",
    "NavigatorSession",
    "VIRTUAL_PANE_LABEL",
    "parent_directory",
]
