"""Make the checkout's ``lazynav`` package importable under bare ``pytest``.

Tests import ``lazynav`` directly; without an editable install the repository
root may be missing from ``sys.path``.
"""

from __future__ import annotations

import sys
from pathlib import Path


REPO_ROOT = str(Path(__file__).resolve().parent.parent)

if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)
