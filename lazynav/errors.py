"""Exception types shared by the bridge, resolver, and session layers."""

from __future__ import annotations


class LazynavError(Exception):
    """Base class for lazynav failures surfaced to callers."""


class BridgeError(LazynavError):
    """Helper process could not be launched, failed, or printed unparsable output."""


class ResolutionMiss(LazynavError):
    """Shortcut or virtual-directory target is missing or unreadable.

    Never raised out of the resolver; it only describes a fallback in logs.
    """

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason
