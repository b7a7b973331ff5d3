"""lazynav: drive, special-folder, and shortcut-aware directory navigation.

The package root only exposes ``main``; the resolver, listing builder,
breadcrumb, and session live in their own submodules.
"""

from __future__ import annotations


def main(*args, **kwargs):
    """Run the ``lazynav`` command line; the CLI module is imported on first use."""
    from .cli import main as _main

    return _main(*args, **kwargs)

__all__ = ["main"]
