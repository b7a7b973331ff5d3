"""Shortcut and virtual-directory resolution applied around file operations.

Two hooks wrap the host's generic operations:
- ``before_visit``: entering a directory holding ``target.lnk`` enters its target
- ``after_entry_name``: an entry named ``*.lnk`` is replaced by its target

Resolution is opportunistic. Any miss falls back to the unresolved path so a
broken shortcut can still be operated on (for example, deleted).
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol, TypeVar

from .errors import ResolutionMiss

logger = logging.getLogger(__name__)

SHORTCUT_SUFFIX = ".lnk"
VIRTUAL_DIRECTORY_MARKER = "target.lnk"

T = TypeVar("T")


class ShortcutResolver(Protocol):
    def resolve_shortcut(self, path: str) -> str: ...


@dataclass
class ResolutionPolicy:
    """Mutable follow/no-follow switch, read on every resolution attempt."""

    follow_shortcuts: bool = True


def is_shortcut(name: str | os.PathLike[str]) -> bool:
    """Return whether ``name`` carries the shortcut-file suffix."""
    return os.fspath(name).lower().endswith(SHORTCUT_SUFFIX)


def _join(directory: str, name: str) -> str:
    return directory.rstrip("/\\") + "/" + name


def _is_readable_file(path: str) -> bool:
    return os.path.isfile(path) and os.access(path, os.R_OK)


class Resolver:
    """Applies shortcut resolution according to a ``ResolutionPolicy``."""

    def __init__(self, bridge: ShortcutResolver, policy: ResolutionPolicy | None = None) -> None:
        self.bridge = bridge
        self.policy = policy if policy is not None else ResolutionPolicy()

    def _log_miss(self, miss: ResolutionMiss) -> None:
        logger.debug("resolution miss: %s", miss)

    def before_visit(self, path: str) -> str:
        """Pre-navigation hook: dereference a virtual directory when following."""
        if not self.policy.follow_shortcuts:
            return path

        path = os.fspath(path)
        marker = _join(path, VIRTUAL_DIRECTORY_MARKER)
        if not _is_readable_file(marker):
            return path

        target = self.bridge.resolve_shortcut(marker)
        if target and target != marker and os.path.isdir(target):
            logger.debug("virtual directory %s -> %s", path, target)
            return target
        self._log_miss(ResolutionMiss(marker, "virtual-directory target is not an existing directory"))
        return path

    def after_entry_name(self, name: str) -> str:
        """Post-retrieval hook: replace a shortcut entry by its target when following."""
        if not self.policy.follow_shortcuts:
            return name

        name = os.fspath(name)
        if not is_shortcut(name):
            return name

        target = self.bridge.resolve_shortcut(name)
        if target and target != name and os.path.exists(target):
            return target
        self._log_miss(ResolutionMiss(name, "shortcut target does not exist"))
        return name

    def resolve(self, path: str) -> str:
        """Resolve an entry path the way an operation on it would see it."""
        resolved = self.after_entry_name(path)
        if os.path.isdir(resolved):
            return self.before_visit(resolved)
        return resolved

    def wrap_visit(self, open_fn: Callable[[str], T]) -> Callable[[str], T]:
        """Compose the pre-navigation hook in front of ``open_fn``."""

        def visit(path: str) -> T:
            return open_fn(self.before_visit(path))

        return visit

    def wrap_entry_name(self, name_fn: Callable[..., str | None]) -> Callable[..., str | None]:
        """Compose the post-retrieval hook after ``name_fn``."""

        def entry_name(*args: object, **kwargs: object) -> str | None:
            name = name_fn(*args, **kwargs)
            if not name:
                return name
            return self.after_entry_name(name)

        return entry_name
